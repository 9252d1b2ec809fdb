"""Content parsers and the registry that picks one for a piece of content."""

import inspect
from collections.abc import Sequence

import structlog

from ..config import NoteSettings
from ..errors import NoParserMatchedError
from ..fetch import Fetcher
from ..template import TemplateEngine
from .base import NOTE_EXTENSION, Note, Parser, is_valid_url, render_note
from .text import TextSnippetParser
from .twitter import TwitterParser
from .website import WebsiteParser
from .youtube import YoutubeParser

__all__ = [
    "NOTE_EXTENSION",
    "Note",
    "Parser",
    "ParserRegistry",
    "TextSnippetParser",
    "TwitterParser",
    "WebsiteParser",
    "YoutubeParser",
    "create_registry",
    "is_valid_url",
    "render_note",
]

log = structlog.get_logger()

# Registered parsers in priority order
_PARSERS: list[type] = [
    YoutubeParser,
    TwitterParser,
    WebsiteParser,  # any other http(s) URL
    TextSnippetParser,  # catch-all, must stay last
]


class ParserRegistry:
    """Ordered parsers; the first one whose ``test`` succeeds wins."""

    def __init__(self, parsers: Sequence[Parser]) -> None:
        self._parsers = list(parsers)

    @property
    def parsers(self) -> list[Parser]:
        return list(self._parsers)

    async def resolve(self, content: str) -> Parser:
        """Find the parser responsible for ``content``.

        Args:
            content: Raw clipboard text.

        Returns:
            The first parser, in registration order, that claims the content.

        Raises:
            NoParserMatchedError: If no parser claims the content.
        """
        for parser in self._parsers:
            matched = parser.test(content)
            if inspect.isawaitable(matched):
                matched = await matched
            if matched:
                log.debug("parser_resolved", parser=type(parser).__name__)
                return parser
        raise NoParserMatchedError(content)


def create_registry(
    settings: NoteSettings,
    fetcher: Fetcher,
    engine: TemplateEngine | None = None,
) -> ParserRegistry:
    """Build the default registry.

    Args:
        settings: Note settings snapshot shared by all parsers.
        fetcher: HTTP fetch capability for parsers that need one.
        engine: Template engine shared by all parsers.

    Returns:
        A registry with every built-in parser in priority order.
    """
    engine = engine or TemplateEngine()
    available = {"settings": settings, "fetcher": fetcher, "engine": engine}
    parsers = [
        parser_cls(**{k: v for k, v in available.items() if k in _get_init_params(parser_cls)})
        for parser_cls in _PARSERS
    ]
    return ParserRegistry(parsers)


def _get_init_params(cls: type) -> set[str]:
    """Get parameter names for a class's __init__ method."""
    sig = inspect.signature(cls.__init__)
    return {p.name for p in sig.parameters.values() if p.name != "self"}
