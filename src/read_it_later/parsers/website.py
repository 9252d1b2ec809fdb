"""Generic web page parser."""

import re
from datetime import datetime
from urllib.parse import urlparse

import structlog
from bs4 import BeautifulSoup, Tag

from ..config import NoteSettings
from ..converters import html_to_markdown
from ..dates import format_date, parse_date
from ..errors import InvalidInputError
from ..fetch import Fetcher
from ..models import Article
from ..template import TemplateEngine
from .base import Note, is_valid_url, render_note

log = structlog.get_logger()


class WebsiteParser:
    """Build notes from arbitrary web pages.

    Pages with a recognizable article body become a full article note;
    anything else becomes a bookmark-style note with just the link.
    """

    # Common article content selectors (in order of preference)
    CONTENT_SELECTORS = [
        "article",
        '[role="article"]',
        ".post-content",
        ".article-content",
        ".entry-content",
        ".content",
        "main",
        ".post",
        "#content",
    ]

    TITLE_SELECTORS = [
        "h1.post-title",
        "h1.entry-title",
        "h1.article-title",
        "article h1",
        "main h1",
        "h1",
    ]

    AUTHOR_SELECTORS = [
        '[rel="author"]',
        ".author",
        ".byline",
        'meta[name="author"]',
        ".post-author",
    ]

    DATE_SELECTORS = [
        "time",
        ".date",
        ".published",
        ".post-date",
        'meta[property="article:published_time"]',
    ]

    # Elements never part of the article body
    NOISE_TAGS = ["script", "style", "nav", "header", "footer", "aside", "noscript"]
    NOISE_SELECTORS = [".comments", ".sidebar", ".advertisement", ".ad", ".share"]

    # Minimum HTML length for a selector match to count as the article body
    MIN_CONTENT_LENGTH = 100

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
        """Check if content is an HTTP(S) URL with a host."""
        if not is_valid_url(content):
            return False
        parsed = urlparse(content.strip())
        return parsed.scheme in ("http", "https") and bool(parsed.hostname)

    async def prepare_note(self, content: str) -> Note:
        """Fetch the page and render an article or link note.

        Raises:
            InvalidInputError: If content is not an HTTP(S) URL.
            FetchError: If the page cannot be fetched.
        """
        if not self.test(content):
            raise InvalidInputError(f"Not a web URL: {content}")

        url = content.strip()
        log.info("fetching_web_article", url=url)

        html = await self._fetcher.request(url, headers={"Accept": "text/html,application/xhtml+xml"})
        article = self.parse_article(html, url)

        if not article.content:
            log.info("web_article_not_parsable", url=url)
            return render_note(
                self._engine,
                self._settings,
                body_template=self._settings.not_parsable_article_note,
                title_template=self._settings.not_parsable_article_note_title,
                body_values={"articleURL": url},
                title_values={},
            )

        log.info(
            "web_article_fetched",
            url=url,
            title=article.title,
            author=article.author,
            content_length=len(article.content),
        )
        return render_note(
            self._engine,
            self._settings,
            body_template=self._settings.parsable_article_note,
            title_template=self._settings.parsable_article_note_title,
            body_values=article.tokens(),
            title_values={"title": article.title},
        )

    def parse_article(self, html: str, url: str) -> Article:
        """Extract an Article from page HTML; content is empty if none found."""
        soup = BeautifulSoup(html, "lxml")

        published = self._extract_date(soup)
        return Article(
            url=url,
            title=self._extract_title(soup, url),
            author=self._extract_author(soup, url),
            published=format_date(published, self._settings.date_content_fmt) if published else "",
            content=html_to_markdown(self._extract_content(soup), base_url=url),
        )

    def _extract_title(self, soup: BeautifulSoup, url: str) -> str:
        og_title = soup.find("meta", property="og:title")
        if og_title and og_title.get("content"):
            return og_title["content"].strip()

        for selector in self.TITLE_SELECTORS:
            element = soup.select_one(selector)
            if element and element.get_text(strip=True):
                return element.get_text(strip=True)

        if soup.title and soup.title.string:
            return soup.title.string.strip()

        return urlparse(url).netloc

    def _extract_author(self, soup: BeautifulSoup, url: str) -> str:
        meta_author = soup.find("meta", attrs={"name": "author"})
        if meta_author and meta_author.get("content"):
            return meta_author["content"].strip()

        for selector in self.AUTHOR_SELECTORS:
            element = soup.select_one(selector)
            if element:
                if element.name == "meta":
                    content = element.get("content", "")
                    if isinstance(content, str):
                        return content.strip()
                    continue
                text = element.get_text(strip=True)
                if text:
                    return re.sub(r"^(by|author:?)\s*", "", text, flags=re.IGNORECASE)

        return urlparse(url).netloc

    def _extract_date(self, soup: BeautifulSoup) -> datetime | None:
        meta_date = soup.find("meta", property="article:published_time")
        if meta_date and meta_date.get("content"):
            return parse_date(meta_date["content"])

        time_elem = soup.find("time")
        if time_elem:
            datetime_attr = time_elem.get("datetime")
            if isinstance(datetime_attr, str):
                return parse_date(datetime_attr)
            return parse_date(time_elem.get_text(strip=True))

        for selector in self.DATE_SELECTORS:
            element = soup.select_one(selector)
            if element:
                content = element.get("content")
                text = content if isinstance(content, str) else element.get_text(strip=True)
                parsed = parse_date(text)
                if parsed:
                    return parsed

        return None

    def _extract_content(self, soup: BeautifulSoup) -> str:
        """Return the article body HTML, or "" if the page has no text."""
        for tag in soup.find_all(self.NOISE_TAGS):
            tag.decompose()

        for selector in self.NOISE_SELECTORS:
            for elem in soup.select(selector):
                elem.decompose()

        for selector in self.CONTENT_SELECTORS:
            content = soup.select_one(selector)
            if content:
                html = self._clean_content(content)
                if len(html) > self.MIN_CONTENT_LENGTH:
                    return html

        body = soup.find("body")
        if body and body.get_text(strip=True):
            return self._clean_content(body)

        return ""

    def _clean_content(self, element: Tag) -> str:
        for p in element.find_all("p"):
            if not p.get_text(strip=True):
                p.decompose()

        html = str(element)
        html = re.sub(r"\s+", " ", html)
        html = re.sub(r">\s+<", "><", html)
        return html.strip()
