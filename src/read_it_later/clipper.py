"""Clipboard-to-note service."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog

from .errors import InvalidInputError, ReadItLaterError, handle_error
from .parsers import ParserRegistry
from .vault import VaultRepository

log = structlog.get_logger()

Notifier = Callable[[str], None]


@dataclass
class ClipResult:
    """Outcome of turning one piece of clipboard content into a note."""

    success: bool
    filename: str | None = None
    path: Path | None = None
    error: str | None = None


class ReadItLater:
    """Resolve a parser for clipboard content and store the note it builds."""

    def __init__(
        self,
        registry: ParserRegistry,
        vault: VaultRepository,
        notifier: Notifier | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            registry: Parsers in priority order.
            vault: Storage the notes are written to.
            notifier: Called with a message whenever processing fails.
        """
        self._registry = registry
        self._vault = vault
        self._notifier = notifier

    async def process_clipboard(self, content: str, append: bool = False) -> ClipResult:
        """Turn clipboard content into a stored note.

        Errors are reported through ``handle_error`` and the notifier
        instead of being raised; nothing is stored when a step fails.

        Args:
            content: Raw clipboard text.
            append: Append to an existing note of the same name instead of
                creating a new one.

        Returns:
            ClipResult describing the stored note or the failure.
        """
        content = content.strip() if content else ""
        if not content:
            return self._fail(InvalidInputError("Clipboard is empty"))

        try:
            parser = await self._registry.resolve(content)
            log.info("processing_clipboard", parser=type(parser).__name__)

            note = await parser.prepare_note(content)
            if append:
                path = self._vault.append_to_existing_note(note)
            else:
                path = self._vault.save_note(note)
        except (ReadItLaterError, OSError) as e:
            return self._fail(e, content=content[:200])

        log.info("clipboard_processed", filename=note.filename, path=str(path))
        return ClipResult(success=True, filename=note.filename, path=path)

    def _fail(self, error: Exception, **context) -> ClipResult:
        message = handle_error(error, **context)
        if self._notifier is not None:
            self._notifier(message)
        return ClipResult(success=False, error=message)
