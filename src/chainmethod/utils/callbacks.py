"""
Callback/awaitable adapter.

Invocation paths are written once against an explicit continuation,
``callback(error, result)``. :func:`inject_awaitable` turns such a
function into one that resolves to ``result`` or raises ``error``.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from chainmethod.errors import ChainMethodError

Callback = Callable[[Optional[BaseException], Any], Union[Awaitable[Any], Any]]


async def invoke_callback(
    callback: Callback,
    error: Optional[BaseException] = None,
    result: Any = None,
) -> Any:
    """Run a sync or async callback and return whatever it returns."""
    outcome = callback(error, result)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    return outcome


async def inject_awaitable(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    **kwargs: Any,
) -> Any:
    """
    Run a callback-style coroutine and return its result.

    ``fn`` receives a ``callback`` keyword argument that settles an
    internal future. The first settlement wins.

    Args:
        fn: Coroutine function accepting ``callback=``
        *args: Positional arguments forwarded to ``fn``
        **kwargs: Keyword arguments forwarded to ``fn``

    Returns:
        The value passed to the callback

    Raises:
        The error passed to the callback, or anything ``fn`` raised
        before settling it
    """
    future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

    def settle(error: Optional[BaseException], result: Any = None) -> None:
        if future.done():
            return
        if error is not None:
            if not isinstance(error, BaseException):
                error = ChainMethodError(str(error))
            future.set_exception(error)
        else:
            future.set_result(result)

    try:
        await fn(*args, callback=settle, **kwargs)
    except Exception as exc:
        if not future.done():
            future.set_exception(exc)

    if not future.done():
        raise RuntimeError(f"{getattr(fn, '__name__', fn)!s} returned without settling its callback")
    return future.result()
