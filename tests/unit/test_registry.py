"""Tests for the parser registry in parsers/__init__.py."""

import pytest


class StubParser:
    """Parser that claims content starting with a prefix."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def test(self, content: str) -> bool:
        return content.startswith(self.prefix)

    async def prepare_note(self, content: str):
        from read_it_later.parsers.base import Note

        return Note(filename=f"{self.prefix}.md", content=content)


class AsyncTestParser(StubParser):
    """Parser whose test is a coroutine."""

    async def test(self, content: str) -> bool:
        return content.startswith(self.prefix)


class TestParserRegistry:
    """Tests for ParserRegistry.resolve."""

    @pytest.mark.asyncio
    async def test_first_match_wins(self):
        from read_it_later.parsers import ParserRegistry

        first = StubParser("a")
        second = StubParser("ab")
        registry = ParserRegistry([first, second])

        assert await registry.resolve("abc") is first

    @pytest.mark.asyncio
    async def test_skips_non_matching(self):
        from read_it_later.parsers import ParserRegistry

        first = StubParser("x")
        second = StubParser("a")
        registry = ParserRegistry([first, second])

        assert await registry.resolve("abc") is second

    @pytest.mark.asyncio
    async def test_awaits_async_test(self):
        from read_it_later.parsers import ParserRegistry

        never = AsyncTestParser("zzz")
        matching = AsyncTestParser("a")
        registry = ParserRegistry([never, matching])

        assert await registry.resolve("abc") is matching

    @pytest.mark.asyncio
    async def test_no_match_raises(self):
        from read_it_later.errors import NoParserMatchedError
        from read_it_later.parsers import ParserRegistry

        registry = ParserRegistry([StubParser("x")])

        with pytest.raises(NoParserMatchedError) as exc_info:
            await registry.resolve("abc")
        assert exc_info.value.content == "abc"

    @pytest.mark.asyncio
    async def test_empty_registry_raises(self):
        from read_it_later.errors import NoParserMatchedError
        from read_it_later.parsers import ParserRegistry

        with pytest.raises(NoParserMatchedError):
            await ParserRegistry([]).resolve("abc")

    def test_parsers_returns_copy(self):
        from read_it_later.parsers import ParserRegistry

        parser = StubParser("a")
        registry = ParserRegistry([parser])

        registry.parsers.clear()
        assert registry.parsers == [parser]


class TestCreateRegistry:
    """Tests for create_registry and the default priority order."""

    def test_default_order(self, settings, make_fetcher):
        from read_it_later.parsers import (
            TextSnippetParser,
            TwitterParser,
            WebsiteParser,
            YoutubeParser,
            create_registry,
        )

        registry = create_registry(settings, make_fetcher())

        assert [type(p) for p in registry.parsers] == [
            YoutubeParser,
            TwitterParser,
            WebsiteParser,
            TextSnippetParser,
        ]

    def test_shares_engine(self, settings, make_fetcher):
        from read_it_later.parsers import create_registry
        from read_it_later.template import TemplateEngine

        engine = TemplateEngine()
        registry = create_registry(settings, make_fetcher(), engine=engine)

        assert all(p._engine is engine for p in registry.parsers)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content, expected",
        [
            ("https://youtu.be/abc123", "YoutubeParser"),
            ("https://www.youtube.com/watch?v=abc123", "YoutubeParser"),
            ("https://x.com/jack/status/20", "TwitterParser"),
            ("https://twitter.com/jack/status/20", "TwitterParser"),
            ("https://example.com/article", "WebsiteParser"),
            ("https://www.youtube.com/@somechannel", "WebsiteParser"),
            ("https://x.com/jack", "WebsiteParser"),
            ("hello world", "TextSnippetParser"),
            ("see https://example.com", "TextSnippetParser"),
        ],
    )
    async def test_resolves_content(self, settings, make_fetcher, content, expected):
        from read_it_later.parsers import create_registry

        registry = create_registry(settings, make_fetcher())

        parser = await registry.resolve(content)
        assert type(parser).__name__ == expected

    def test_get_init_params(self):
        from read_it_later.parsers import TextSnippetParser, YoutubeParser, _get_init_params

        assert _get_init_params(YoutubeParser) == {"settings", "fetcher", "engine"}
        assert _get_init_params(TextSnippetParser) == {"settings", "engine"}
