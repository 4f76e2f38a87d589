"""
Single-shot asynchronous results and the decoding/delivery helpers built on them.
"""
import asyncio
import concurrent.futures
from typing import Any, Awaitable, Callable, Generic, Optional, Set, TypeVar, Union

import structlog
from pydantic import TypeAdapter

from .errors import ResponseError

logger = structlog.get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")

# asyncio only keeps weak references to tasks
_pending: Set[asyncio.Task] = set()


class Cancellable:
    """Handle for a subscription started with Publisher.use()."""

    def __init__(self, future: Union[asyncio.Future, concurrent.futures.Future]):
        self._future = future

    def cancel(self) -> bool:
        """Cancel delivery. Returns False if the value was already delivered."""
        return self._future.cancel()

    @property
    def cancelled(self) -> bool:
        return self._future.cancelled()

    @property
    def done(self) -> bool:
        return self._future.done()

    async def wait(self):
        """Wait until the subscription has finished or been cancelled."""
        future = self._future
        if isinstance(future, concurrent.futures.Future):
            future = asyncio.wrap_future(future)
        await asyncio.wait({future})


class Publisher(Generic[T]):
    """A lazily started value delivered exactly once, or a failure.

    Nothing runs until the publisher is awaited or subscribed with use(),
    and every await starts the underlying operation again.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory

    def __await__(self):
        return self._factory().__await__()

    def map(self, transform: Callable[[T], U]) -> "Publisher[U]":
        async def run():
            return transform(await self)
        return Publisher(run)

    def map_error(self, transform: Callable[[Exception], Exception]) -> "Publisher[T]":
        async def run():
            try:
                return await self
            except Exception as e:
                raise transform(e) from e
        return Publisher(run)

    def json(self, model: Any) -> "Publisher[Any]":
        """Decode a JSON payload into model.

        model is anything pydantic can validate against: BaseModel subclasses,
        dataclasses, TypedDicts, builtins and their generics. Validation is
        strict, so "7" or true never pass for an int. Any failure, upstream
        ones included, becomes ResponseError.PARSE.
        """
        adapter = TypeAdapter(model)
        return self.map(lambda data: adapter.validate_json(data, strict=True)).map_error(_parse_error)

    def text(self) -> "Publisher[str]":
        """Decode the payload as strict UTF-8; any failure becomes ResponseError.PARSE."""
        return self.map(_decode_utf8).map_error(_parse_error)

    def use(self,
            on_success: Callable[[T], None],
            on_error: Optional[Callable[[Exception], None]] = None,
            loop: Optional[asyncio.AbstractEventLoop] = None) -> Cancellable:
        """Subscribe and deliver the outcome on the event loop.

        Without loop, the running loop is used. When loop is given and is not
        the running one (e.g. called from a worker thread), the subscription is
        scheduled onto it and callbacks run on that loop's thread.
        """
        async def deliver():
            try:
                value = await self
            except Exception as e:
                if on_error is None:
                    logger.warning("unhandled_failure", error=str(e), error_type=type(e).__name__)
                    return
                _invoke(on_error, e)
                return
            _invoke(on_success, value)

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if loop is None:
            if running is None:
                raise RuntimeError("use() needs a running event loop or an explicit loop")
            loop = running

        if loop is running:
            task = loop.create_task(deliver())
            _pending.add(task)
            task.add_done_callback(_pending.discard)
            return Cancellable(task)

        return Cancellable(asyncio.run_coroutine_threadsafe(deliver(), loop))


def _decode_utf8(data: bytes) -> str:
    return bytes(data).decode('utf-8')


def _parse_error(_: Exception) -> ResponseError:
    return ResponseError.parse()


def _invoke(callback: Callable[[Any], None], argument: Any):
    try:
        callback(argument)
    except Exception:
        logger.exception("callback_failed", callback=getattr(callback, '__qualname__', repr(callback)))
