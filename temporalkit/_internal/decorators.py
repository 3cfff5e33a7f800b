"""Custom decorators for temporalkit.

This module provides decorator utilities for the library:
    - @memoize: Simple memoization decorator, used for the time zone
      lookup that maps an identifier to an immutable zone object

This module is not part of the public API.
"""

from __future__ import annotations

import functools
from typing import Callable, ParamSpec, TypeVar

P = ParamSpec("P")
T = TypeVar("T")


def memoize(func: Callable[P, T]) -> Callable[P, T]:
    """Simple memoization decorator for functions with hashable arguments.

    This decorator caches the results of function calls based on the
    arguments passed. Exceptions are not cached, so a failed lookup is
    retried on the next call.

    Args:
        func: The function to memoize.

    Returns:
        A memoized version of the function.

    Examples:
        >>> @memoize
        ... def expensive_calculation(n: int) -> int:
        ...     return n ** 2
    """
    cache: dict[tuple, T] = {}

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        key = (args, tuple(sorted(kwargs.items())))
        if key not in cache:
            cache[key] = func(*args, **kwargs)
        return cache[key]

    # Expose cache for testing/introspection
    wrapper._cache = cache  # type: ignore[attr-defined]
    wrapper._clear_cache = cache.clear  # type: ignore[attr-defined]
    return wrapper


__all__ = [
    "memoize",
]
