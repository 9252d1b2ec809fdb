"""Shared pytest fixtures."""

import pytest

from read_it_later.errors import FetchError


class FakeFetcher:
    """In-memory Fetcher returning canned bodies keyed by URL substring."""

    def __init__(self, responses: dict[str, str | Exception] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[dict] = []

    async def request(self, url, method="GET", headers=None, content_type=None):
        self.calls.append(
            {"url": url, "method": method, "headers": headers, "content_type": content_type}
        )
        for key, body in self.responses.items():
            if key in url:
                if isinstance(body, Exception):
                    raise body
                return body
        raise FetchError(f"No stubbed response for {url}", url=url)


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def settings():
    """Note settings with deterministic, date-free templates."""
    from read_it_later.config import NoteSettings

    return NoteSettings(
        youtube_note="%videoTitle%|%channelName%|%videoURL%",
        youtube_note_title="%title%",
        twitter_note="%tweetAuthorName%|%tweetURL%|%tweetPublishDate%\n%tweetContent%",
        twitter_note_title="Tweet from %tweetAuthorName%",
        parsable_article_note="# %articleTitle%\n%articleAuthor%|%articlePublishDate%\n%articleContent%",
        parsable_article_note_title="%title%",
        not_parsable_article_note="[%articleURL%](%articleURL%)",
        not_parsable_article_note_title="Article",
        text_snippet_note="%content%",
        text_snippet_note_title="Notice",
        date_title_fmt="%Y-%m-%d %H-%M-%S",
        date_content_fmt="%Y-%m-%d",
    )


@pytest.fixture
def youtube_page_html():
    """Watch page with schema.org microdata for video abc123."""
    return """
    <html>
    <head><meta property="og:image" content="https://i.ytimg.com/vi/abc123/maxresdefault.jpg"></head>
    <body>
      <div itemscope itemtype="http://schema.org/VideoObject">
        <meta itemprop="name" content="Sample">
        <meta itemprop="description" content="A sample video">
        <meta itemprop="identifier" content="abc123">
        <meta itemprop="channelId" content="UC123">
        <meta itemprop="duration" content="PT4M13S">
        <meta itemprop="uploadDate" content="2024-03-05">
        <meta itemprop="interactionCount" content="1234">
        <span itemprop="author" itemscope itemtype="http://schema.org/Person">
          <link itemprop="url" href="http://www.youtube.com/@samplechannel">
          <link itemprop="name" content="Sample Channel">
        </span>
      </div>
    </body>
    </html>
    """


@pytest.fixture
def tmp_vault_dir(tmp_path):
    """Create a temporary vault directory."""
    vault_dir = tmp_path / "vault"
    vault_dir.mkdir()
    return vault_dir
