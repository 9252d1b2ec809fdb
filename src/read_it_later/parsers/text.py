"""Catch-all parser for plain text."""

from ..config import NoteSettings
from ..models import TextSnippet
from ..template import TemplateEngine
from .base import Note, render_note


class TextSnippetParser:
    """Save any content verbatim. Always matches, so register it last."""

    def __init__(self, settings: NoteSettings, engine: TemplateEngine | None = None) -> None:
        self._settings = settings
        self._engine = engine or TemplateEngine()

    def test(self, content: str) -> bool:
        return True

    async def prepare_note(self, content: str) -> Note:
        snippet = TextSnippet(content=content)
        return render_note(
            self._engine,
            self._settings,
            body_template=self._settings.text_snippet_note,
            title_template=self._settings.text_snippet_note_title,
            body_values=snippet.tokens(),
            title_values={},
        )
