"""Flask application factory."""

import asyncio
import os
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar

import structlog
from flask import Flask

from .clipper import ReadItLater
from .config import Config, get_config
from .fetch import HttpxFetcher
from .logging import configure_logging
from .parsers import create_registry
from .routes import api_bp
from .vault import FileVaultRepository

log = structlog.get_logger()

T = TypeVar("T")


class AsyncRunner:
    """Runs coroutines on one persistent event loop in a background thread.

    Flask handlers are synchronous; parsers are coroutines. Keeping a single
    loop lets concurrent requests share it instead of each creating one.
    """

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def _ensure_loop(self) -> None:
        """Start the background event loop if it is not running."""
        with self._lock:
            if self._loop is None or not self._loop.is_running():
                self._loop = asyncio.new_event_loop()
                started = threading.Event()
                self._thread = threading.Thread(
                    target=self._run_loop, args=(started,), daemon=True, name="async-runner"
                )
                self._thread.start()
                started.wait()

    def _run_loop(self, started: threading.Event) -> None:
        assert self._loop is not None  # Set by _ensure_loop before thread starts
        asyncio.set_event_loop(self._loop)
        self._loop.call_soon(started.set)
        self._loop.run_forever()

    def run(self, coro: Coroutine[Any, Any, T], timeout: float = 120) -> T:
        """Run a coroutine on the persistent event loop and wait for it.

        Args:
            coro: Coroutine to run.
            timeout: Seconds to wait for the result.

        Returns:
            Result of the coroutine.
        """
        self._ensure_loop()
        assert self._loop is not None  # Guaranteed by _ensure_loop
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result(timeout=timeout)


_async_runner = AsyncRunner()


def run_async(coro):
    """Run a coroutine from synchronous Flask code."""
    return _async_runner.run(coro)


def build_clipper(config: Config) -> ReadItLater:
    """Wire the clipper service from configuration."""
    fetcher = HttpxFetcher(timeout=config.http_timeout)
    registry = create_registry(config.note_settings, fetcher)
    vault = FileVaultRepository(config.vault_dir, config.inbox_dir)
    return ReadItLater(registry, vault)


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        test_config: Optional test configuration dict. A ``CLIPPER`` entry
            replaces the service built from the environment.

    Returns:
        Configured Flask application.
    """
    config = get_config()
    json_output = test_config is None and config.json_logging
    configure_logging(json_output=json_output, level=config.log_level)

    app = Flask(__name__)
    if test_config is not None:
        app.config.update(test_config)

    if "CLIPPER" not in app.config:
        app.config["CLIPPER"] = build_clipper(config)
    app.config["RUN_ASYNC"] = run_async

    log.info(
        "app_created",
        testing=app.config.get("TESTING", False),
        vault_dir=str(config.vault_dir),
    )

    @app.after_request
    def add_security_headers(response):
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    app.register_blueprint(api_bp)

    return app


def main() -> None:
    """Run the Flask development server."""
    app = create_app()
    port = int(os.environ.get("PORT", 5001))
    app.run(host="127.0.0.1", port=port, debug=False)


if __name__ == "__main__":
    main()
