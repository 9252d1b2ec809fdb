"""Parser protocol, the Note value object and shared parser helpers."""

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import Protocol, runtime_checkable
from urllib.parse import urlparse

from ..config import NoteSettings
from ..dates import format_current_date
from ..template import TemplateEngine, TokenValue

# Extension appended to every rendered filename
NOTE_EXTENSION = ".md"


@dataclass(frozen=True)
class Note:
    """A rendered note ready to be stored."""

    filename: str
    content: str


@runtime_checkable
class Parser(Protocol):
    """Protocol for content parsers.

    A parser recognizes one shape of clipboard content and turns it into
    a Note. ``test`` may return an awaitable when matching needs I/O.
    """

    def test(self, content: str) -> bool | Awaitable[bool]:
        """Check whether this parser handles ``content``.

        Args:
            content: Raw clipboard text.

        Returns:
            True if this parser claims the content.
        """
        ...

    async def prepare_note(self, content: str) -> Note:
        """Build a note for ``content``.

        Args:
            content: Raw clipboard text.

        Returns:
            The rendered Note.

        Raises:
            InvalidInputError: If the parser does not handle ``content``.
            FetchError: If no remote data could be obtained.
            ParseError: If the remote data lacks the required structure.
        """
        ...


def is_valid_url(text: str) -> bool:
    """Check that ``text`` is an absolute URL with a scheme and a host."""
    if not text or any(c.isspace() for c in text.strip()):
        return False

    try:
        parsed = urlparse(text.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def render_note(
    engine: TemplateEngine,
    settings: NoteSettings,
    body_template: str,
    title_template: str,
    body_values: Mapping[str, TokenValue],
    title_values: Mapping[str, TokenValue],
) -> Note:
    """Render the body and filename passes of a note.

    Both passes get a ``date`` token; the body uses the content date
    format and the filename uses the title date format.
    """
    content = engine.render(
        body_template,
        {"date": partial(format_current_date, settings.date_content_fmt), **body_values},
    )
    filename = engine.render(
        title_template,
        {"date": partial(format_current_date, settings.date_title_fmt), **title_values},
    )
    return Note(filename=f"{filename}{NOTE_EXTENSION}", content=content)
