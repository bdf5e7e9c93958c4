"""Tests for the storage confinement context."""

import asyncio

import pytest

from herocache.infrastructure.database import StorageContext, create_engine, create_session_factory

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def session_factory():
    return create_session_factory(create_engine(MEMORY_URL))


class TestStorageContext:
    """Tests for a running storage context."""

    @pytest.fixture(autouse=True)
    async def context(self, session_factory):
        """Start a context for each test and stop it afterwards."""
        self.context = StorageContext(session_factory, name="test")
        await self.context.start()
        yield self.context
        await self.context.stop()

    @pytest.mark.unit
    async def test_run_basic(self):
        """Test that an operation runs and its result is returned."""
        result = []

        async def op(session):
            result.append(session)
            return "done"

        ret = await self.context.run(op)
        assert ret == "done"
        assert len(result) == 1
        assert result[0] is not None

    @pytest.mark.unit
    async def test_every_operation_gets_the_same_session(self):
        """Test that all operations share the context's single session."""
        seen = []

        async def op(session):
            seen.append(session)

        await asyncio.gather(*(self.context.run(op) for _ in range(3)))
        assert len({id(s) for s in seen}) == 1

    @pytest.mark.unit
    async def test_run_serializes_concurrent_calls(self):
        """Test that concurrent operations never interleave."""
        execution_order = []

        def make_op(n: int):
            async def op(session):
                execution_order.append(f"start_{n}")
                await asyncio.sleep(0.01)
                execution_order.append(f"end_{n}")
                return n

            return op

        tasks = [asyncio.create_task(self.context.run(make_op(i))) for i in range(3)]
        results = await asyncio.gather(*tasks)

        assert results == [0, 1, 2]
        # Pattern must be start_x, end_x, start_y, end_y, ...
        for i in range(0, len(execution_order), 2):
            assert execution_order[i].split("_")[1] == execution_order[i + 1].split("_")[1]

    @pytest.mark.unit
    async def test_run_propagates_exceptions(self):
        """Test that exceptions from operations reach the caller."""

        async def failing(session):
            raise ValueError("test error")

        with pytest.raises(ValueError, match="test error"):
            await self.context.run(failing)

    @pytest.mark.unit
    async def test_context_survives_failed_operation(self):
        """Test that a failing operation does not stop the worker."""

        async def failing(session):
            raise ValueError("boom")

        async def ok(session):
            return 42

        with pytest.raises(ValueError):
            await self.context.run(failing)
        assert await self.context.run(ok) == 42

    @pytest.mark.unit
    async def test_nested_run_executes_inline(self):
        """Test that run() called from inside an operation does not deadlock."""

        async def inner(session):
            return "inner"

        async def outer(session):
            return await self.context.run(inner) + "+outer"

        result = await asyncio.wait_for(self.context.run(outer), timeout=1)
        assert result == "inner+outer"

    @pytest.mark.unit
    async def test_submit_threadsafe_from_other_thread(self):
        """Test that work handed in from another OS thread runs on the context."""
        worker_tasks = []

        async def op(session):
            worker_tasks.append(asyncio.current_task())
            return "from-thread"

        def in_thread():
            return self.context.submit_threadsafe(op).result(timeout=5)

        result = await asyncio.to_thread(in_thread)
        assert result == "from-thread"
        assert worker_tasks[0] is not None

    @pytest.mark.unit
    async def test_is_running(self):
        assert self.context.is_running() is True

    @pytest.mark.unit
    async def test_queue_size(self):
        assert self.context.queue_size() == 0


class TestStorageContextNotStarted:
    """Tests for a context that was never started or was stopped."""

    @pytest.mark.unit
    async def test_run_without_start_raises(self, session_factory):
        context = StorageContext(session_factory)

        async def op(session):
            return "never"

        with pytest.raises(RuntimeError, match="not running"):
            await context.run(op)

    @pytest.mark.unit
    async def test_submit_threadsafe_without_start_raises(self, session_factory):
        context = StorageContext(session_factory)

        async def op(session):
            return "never"

        with pytest.raises(RuntimeError):
            context.submit_threadsafe(op)

    @pytest.mark.unit
    async def test_is_running_when_stopped(self, session_factory):
        context = StorageContext(session_factory)
        assert context.is_running() is False
        assert context.queue_size() == 0

    @pytest.mark.unit
    async def test_stop_drains_pending_operations(self, session_factory):
        """Test that operations queued before stop() still complete."""
        context = StorageContext(session_factory)
        await context.start()
        done = []

        def make_op(n: int):
            async def op(session):
                await asyncio.sleep(0.005)
                done.append(n)
                return n

            return op

        tasks = [asyncio.create_task(context.run(make_op(i))) for i in range(3)]
        # Let every task enqueue before stopping
        await asyncio.sleep(0)
        await context.stop()

        assert await asyncio.gather(*tasks) == [0, 1, 2]
        assert done == [0, 1, 2]
        assert context.is_running() is False

    @pytest.mark.unit
    async def test_stop_timeout_fails_waiting_callers(self, session_factory):
        """Test that callers are released with an error when stop() gives up waiting."""
        context = StorageContext(session_factory)
        await context.start()
        never = asyncio.Event()
        ran = []

        async def blocking(session):
            await never.wait()

        async def queued_behind(session):
            ran.append(True)

        running = asyncio.create_task(context.run(blocking))
        waiting = asyncio.create_task(context.run(queued_behind))
        # Let the worker pick up the blocking operation
        await asyncio.sleep(0.01)

        await context.stop(timeout=0.05)

        with pytest.raises(RuntimeError, match="stopped while running"):
            await asyncio.wait_for(running, timeout=1)
        with pytest.raises(RuntimeError, match="stopped before running"):
            await asyncio.wait_for(waiting, timeout=1)
        assert ran == []
        assert context.is_running() is False
