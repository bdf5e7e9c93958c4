"""
Single confinement context for the local store.

Every read and write against the store runs on one background task that owns
the only AsyncSession. Callers enqueue an operation and await its result, so
operations never interleave and the session is never touched concurrently.

Usage:
    context = StorageContext(session_factory)

    # At startup
    await context.start()

    # From the event loop
    heroes = await context.run(lambda session: crud.get_heroes(session))

    # From another OS thread
    future = context.submit_threadsafe(my_operation)
    future.result()

    # At shutdown (pending operations are drained first)
    await context.stop()
"""

import asyncio
import concurrent.futures
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger("StorageContext")

T = TypeVar("T")

StorageOperation = Callable[[AsyncSession], Awaitable[T]]

# Queued after the last operation to tell the worker to exit
_STOP = object()


class QueuedOperation:
    """Wrapper for a storage operation with its result future."""

    def __init__(self, op: StorageOperation, loop: asyncio.AbstractEventLoop):
        self.op = op
        self.future: asyncio.Future = loop.create_future()


class StorageContext:
    """
    Serialized execution context owning the store's session.

    Operations run strictly one at a time, in submission order. An operation
    that itself calls run() (from inside the worker) executes inline.
    """

    def __init__(self, session_factory: async_sessionmaker, name: str = "storage"):
        self._session_factory = session_factory
        self._name = name
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._session: Optional[AsyncSession] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stopping = False

    @property
    def loop(self) -> Optional[asyncio.AbstractEventLoop]:
        """Event loop the worker runs on (None until started)."""
        return self._loop

    def is_running(self) -> bool:
        """Check if the worker task is running."""
        return not self._stopping and self._worker is not None and not self._worker.done()

    def queue_size(self) -> int:
        """Get the current number of pending operations."""
        if self._queue is None:
            return 0
        return self._queue.qsize()

    async def start(self) -> None:
        """Open the session and start the worker task."""
        if self.is_running():
            logger.warning(f"Storage context '{self._name}' already running")
            return

        self._loop = asyncio.get_running_loop()
        self._stopping = False
        self._queue = asyncio.Queue()
        self._session = self._session_factory()
        self._worker = asyncio.create_task(self._worker_loop(), name=f"storage-{self._name}")
        logger.info(f"Storage context '{self._name}' started - all store access is serialized")

    async def stop(self, timeout: float = 10.0) -> None:
        """
        Stop the worker gracefully.

        Operations already queued are executed before the worker exits.

        Args:
            timeout: Maximum time to wait for pending operations to complete
        """
        if self._worker is None:
            return

        logger.info(f"Stopping storage context '{self._name}'...")
        self._stopping = True
        await self._queue.put(_STOP)

        try:
            await asyncio.wait_for(self._worker, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Storage context didn't stop within {timeout}s, cancelling...")
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._fail_pending()

        await self._session.close()

        self._worker = None
        self._queue = None
        self._session = None
        self._stopping = False
        logger.info(f"Storage context '{self._name}' stopped")

    async def run(self, op: StorageOperation) -> T:
        """
        Execute an operation on the storage context and wait for its result.

        Args:
            op: Coroutine function receiving the context's session

        Returns:
            Whatever the operation returns

        Raises:
            RuntimeError: If the context is not running
            Any exception raised by the operation
        """
        # Already on the worker: queueing would wait on ourselves
        if self._worker is not None and asyncio.current_task() is self._worker:
            return await op(self._session)

        if not self.is_running():
            raise RuntimeError(f"Storage context '{self._name}' is not running")

        queued = QueuedOperation(op, self._loop)
        await self._queue.put(queued)
        return await queued.future

    def submit_threadsafe(self, op: StorageOperation) -> concurrent.futures.Future:
        """
        Hand an operation to the storage context from another OS thread.

        Args:
            op: Coroutine function receiving the context's session

        Returns:
            A concurrent.futures.Future resolved with the operation's result
        """
        if self._loop is None or not self.is_running():
            raise RuntimeError(f"Storage context '{self._name}' is not running")
        return asyncio.run_coroutine_threadsafe(self.run(op), self._loop)

    def _fail_pending(self) -> None:
        """Fail every operation left in the queue after the worker was cancelled."""
        dropped = 0
        while True:
            try:
                queued = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            if queued is _STOP or queued.future.done():
                continue
            queued.future.set_exception(
                RuntimeError(f"Storage context '{self._name}' stopped before running operation")
            )
            dropped += 1
        if dropped:
            logger.warning(f"Failed {dropped} pending storage operations on shutdown")

    async def _worker_loop(self) -> None:
        """Process queued operations one at a time until told to stop."""
        while True:
            queued = await self._queue.get()
            try:
                if queued is _STOP:
                    logger.debug(f"Storage context '{self._name}' drained")
                    return
                if queued.future.cancelled():
                    continue
                try:
                    result = await queued.op(self._session)
                except asyncio.CancelledError:
                    if not queued.future.done():
                        queued.future.set_exception(
                            RuntimeError(f"Storage context '{self._name}' stopped while running operation")
                        )
                    raise
                except Exception as e:
                    logger.debug(f"Storage operation failed: {e!r}")
                    if not queued.future.cancelled():
                        queued.future.set_exception(e)
                else:
                    if not queued.future.cancelled():
                        queued.future.set_result(result)
            finally:
                self._queue.task_done()
