"""Twitter/X post parser using the public oEmbed endpoint."""

import re
from urllib.parse import urlencode

import orjson
import structlog
from bs4 import BeautifulSoup

from ..config import NoteSettings
from ..converters import html_to_markdown
from ..dates import reformat_date
from ..errors import InvalidInputError, ParseError
from ..fetch import Fetcher
from ..models import Tweet
from ..template import TemplateEngine
from .base import Note, is_valid_url, render_note

log = structlog.get_logger()


class TwitterParser:
    """Build notes for tweets.

    x.com links are rewritten to twitter.com before the oEmbed lookup so
    both domains resolve to the same post.
    """

    # URL patterns for Twitter/X
    TWITTER_URL_PATTERN = re.compile(
        r"^https?://(?:www\.|mobile\.)?(twitter\.com|x\.com)/(\w+)/status(?:es)?/(\d+)",
        re.IGNORECASE,
    )

    CANONICAL_DOMAIN = "twitter.com"

    OEMBED_URL = "https://publish.twitter.com/oembed"

    def __init__(
        self,
        settings: NoteSettings,
        fetcher: Fetcher,
        engine: TemplateEngine | None = None,
    ) -> None:
        self._settings = settings
        self._fetcher = fetcher
        self._engine = engine or TemplateEngine()

    def test(self, content: str) -> bool:
        """Check if content is a Twitter/X status URL."""
        return is_valid_url(content) and bool(self.TWITTER_URL_PATTERN.match(content.strip()))

    def canonical_url(self, url: str) -> str:
        """Rewrite a status URL onto twitter.com.

        Raises:
            InvalidInputError: If ``url`` is not a status URL.
        """
        match = self.TWITTER_URL_PATTERN.match(url.strip())
        if not match:
            raise InvalidInputError(f"Invalid Twitter URL: {url}")

        username, tweet_id = match.group(2), match.group(3)
        return f"https://{self.CANONICAL_DOMAIN}/{username}/status/{tweet_id}"

    async def prepare_note(self, content: str) -> Note:
        """Fetch the tweet through oEmbed and render the tweet note.

        Raises:
            InvalidInputError: If content is not a Twitter/X status URL.
            FetchError: If the oEmbed request fails.
            ParseError: If the oEmbed response has no embeddable HTML.
        """
        tweet = await self.fetch_tweet(self.canonical_url(content))

        log.info("tweet_resolved", author=tweet.author_name, url=tweet.url)

        return render_note(
            self._engine,
            self._settings,
            body_template=self._settings.twitter_note,
            title_template=self._settings.twitter_note_title,
            body_values=tweet.tokens(),
            title_values={"tweetAuthorName": tweet.author_name},
        )

    async def fetch_tweet(self, url: str) -> Tweet:
        """Resolve a canonical status URL into a Tweet record."""
        log.info("fetching_tweet", url=url)

        body = await self._fetcher.request(
            f"{self.OEMBED_URL}?{urlencode({'url': url})}",
            content_type="application/json",
        )
        try:
            response = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise ParseError(f"oEmbed returned invalid JSON for {url}", url=url) from e

        if not isinstance(response, dict) or not response.get("html"):
            raise ParseError(f"oEmbed response for {url} has no tweet HTML", url=url)

        html = response["html"]
        return Tweet(
            author_name=response.get("author_name") or "",
            url=response.get("url") or "",
            content=html_to_markdown(self._strip_scripts(html)),
            published=self._published_date(html),
        )

    def _published_date(self, html: str) -> str:
        """Read the date link that closes the embedded blockquote."""
        soup = BeautifulSoup(html, "lxml")
        date_link = soup.select_one("blockquote > a")
        if date_link is None:
            return ""
        return reformat_date(date_link.get_text(strip=True), self._settings.date_content_fmt)

    @staticmethod
    def _strip_scripts(html: str) -> str:
        soup = BeautifulSoup(html, "lxml")
        for tag in soup.find_all("script"):
            tag.decompose()
        body = soup.body
        return body.decode_contents() if body else str(soup)
