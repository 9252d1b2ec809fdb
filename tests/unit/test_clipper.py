"""Tests for clipper.py - Clipboard-to-note service."""

from unittest.mock import MagicMock

import pytest

from read_it_later.errors import FetchError
from read_it_later.parsers.base import Note


class StubParser:
    def __init__(self, note=None, error=None):
        self.note = note
        self.error = error
        self.seen = []

    def test(self, content):
        return True

    async def prepare_note(self, content):
        self.seen.append(content)
        if self.error is not None:
            raise self.error
        return self.note


@pytest.fixture
def vault(tmp_vault_dir):
    from read_it_later.vault import FileVaultRepository

    return FileVaultRepository(tmp_vault_dir, inbox_dir="Inbox")


def _clipper(parser, vault, notifier=None):
    from read_it_later.clipper import ReadItLater
    from read_it_later.parsers import ParserRegistry

    return ReadItLater(ParserRegistry([parser]), vault, notifier=notifier)


class TestProcessClipboard:
    """Tests for ReadItLater.process_clipboard."""

    @pytest.mark.asyncio
    async def test_saves_note(self, vault, tmp_vault_dir):
        parser = StubParser(note=Note(filename="Saved.md", content="Body"))

        result = await _clipper(parser, vault).process_clipboard("  hello  ")

        assert result.success is True
        assert result.filename == "Saved.md"
        assert result.error is None
        assert result.path.read_text(encoding="utf-8") == "Body"
        assert parser.seen == ["hello"]

    @pytest.mark.asyncio
    async def test_append_mode(self, vault):
        parser = StubParser(note=Note(filename="Daily.md", content="entry"))
        clipper = _clipper(parser, vault)

        await clipper.process_clipboard("one")
        result = await clipper.process_clipboard("two", append=True)

        assert result.success is True
        assert result.path.read_text(encoding="utf-8") == "entry\n\nentry"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   ", None])
    async def test_empty_clipboard(self, vault, content):
        parser = StubParser(note=Note(filename="x.md", content="x"))
        notifier = MagicMock()

        result = await _clipper(parser, vault, notifier).process_clipboard(content)

        assert result.success is False
        assert result.error == "ReadItLater: Clipboard is empty"
        notifier.assert_called_once_with("ReadItLater: Clipboard is empty")
        assert parser.seen == []

    @pytest.mark.asyncio
    async def test_empty_clipboard_logged_as_ordinary_failure(self, vault):
        from unittest.mock import patch

        parser = StubParser(note=Note(filename="x.md", content="x"))

        with patch("read_it_later.errors.log") as mock_log:
            await _clipper(parser, vault).process_clipboard("")

        args, kwargs = mock_log.error.call_args
        assert args == ("note_creation_failed",)
        assert kwargs["error_type"] == "InvalidInputError"
        assert "exc_info" not in kwargs

    @pytest.mark.asyncio
    async def test_parser_error_is_reported(self, vault, tmp_vault_dir):
        parser = StubParser(error=FetchError("Failed to fetch URL: 500"))
        notifier = MagicMock()

        result = await _clipper(parser, vault, notifier).process_clipboard("https://example.com")

        assert result.success is False
        assert result.error == "ReadItLater: Failed to fetch URL: 500"
        notifier.assert_called_once_with(result.error)
        assert not (tmp_vault_dir / "Inbox").exists()

    @pytest.mark.asyncio
    async def test_no_parser_matched(self, vault):
        from read_it_later.clipper import ReadItLater
        from read_it_later.parsers import ParserRegistry

        clipper = ReadItLater(ParserRegistry([]), vault)

        result = await clipper.process_clipboard("hello")

        assert result.success is False
        assert "No parser matched" in result.error

    @pytest.mark.asyncio
    async def test_duplicate_note_is_reported(self, vault):
        parser = StubParser(note=Note(filename="Same.md", content="x"))
        clipper = _clipper(parser, vault)

        await clipper.process_clipboard("first")
        result = await clipper.process_clipboard("second")

        assert result.success is False
        assert "already exists" in result.error

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, vault):
        parser = StubParser(error=RuntimeError("bug"))

        with pytest.raises(RuntimeError):
            await _clipper(parser, vault).process_clipboard("hello")

    @pytest.mark.asyncio
    async def test_works_without_notifier(self, vault):
        parser = StubParser(error=FetchError("offline"))

        result = await _clipper(parser, vault).process_clipboard("hello")

        assert result.error == "ReadItLater: offline"
