from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


async def first_result(*stages: Callable[[], Awaitable[T | None]]) -> T | None:
    """Run ``stages`` in order and return the first non-None result.

    Later stages are never awaited once an earlier one produced a value.
    Exceptions raised by a stage propagate unchanged.
    """
    for stage in stages:
        result = await stage()
        if result is not None:
            return result
    return None
