"""Tests for the async helpers in app.py."""

import asyncio
import concurrent.futures
import threading

import pytest


class TestAsyncRunner:
    """Tests for the AsyncRunner class."""

    def test_initial_state(self):
        from read_it_later.app import AsyncRunner

        runner = AsyncRunner()
        assert runner._loop is None
        assert runner._thread is None

    def test_creates_loop_on_first_run(self):
        from read_it_later.app import AsyncRunner

        runner = AsyncRunner()

        async def simple():
            return "hello"

        assert runner.run(simple()) == "hello"
        assert runner._loop is not None
        assert runner._loop.is_running()
        assert runner._thread.name == "async-runner"

    def test_reuses_loop(self):
        from read_it_later.app import AsyncRunner

        runner = AsyncRunner()

        async def get_loop():
            return asyncio.get_running_loop()

        assert runner.run(get_loop()) is runner.run(get_loop())

    def test_concurrent_callers(self):
        """Parallel request threads share the loop without errors."""
        from read_it_later.app import AsyncRunner

        runner = AsyncRunner()
        results = []
        errors = []

        async def delayed_return(value):
            await asyncio.sleep(0.01)
            return value

        def thread_work(n):
            try:
                results.append(runner.run(delayed_return(n)))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=thread_work, args=(i,)) for i in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert sorted(results) == [0, 1, 2, 3, 4]

    def test_timeout(self):
        from read_it_later.app import AsyncRunner

        runner = AsyncRunner()

        async def slow():
            await asyncio.sleep(5)

        with pytest.raises(concurrent.futures.TimeoutError):
            runner.run(slow(), timeout=0.05)


class TestRunAsync:
    """Tests for the run_async helper."""

    def test_returns_result(self):
        from read_it_later.app import run_async

        async def awaiting_coro():
            await asyncio.sleep(0.01)
            return "done"

        assert run_async(awaiting_coro()) == "done"

    def test_propagates_exceptions(self):
        from read_it_later.app import run_async

        async def failing_coro():
            raise ValueError("test error")

        with pytest.raises(ValueError, match="test error"):
            run_async(failing_coro())

    def test_runs_text_snippet_parser(self, settings):
        from read_it_later.app import run_async
        from read_it_later.parsers import TextSnippetParser

        note = run_async(TextSnippetParser(settings).prepare_note("hello"))

        assert note.content == "hello"
