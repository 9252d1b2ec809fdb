"""YouTube video parser."""

import re
from datetime import datetime
from typing import Any, TypedDict
from urllib.parse import parse_qs, urlencode, urlparse

import orjson
import structlog
from bs4 import BeautifulSoup, Tag

from ..config import NoteSettings
from ..dates import format_date, reformat_date
from ..duration import Duration, format_duration, parse_duration, to_seconds
from ..errors import FetchError, InvalidInputError, ParseError
from ..fetch import Fetcher
from ..models import Channel, Video
from ..template import TemplateEngine
from .base import Note, is_valid_url, render_note

log = structlog.get_logger()


class Thumbnail(TypedDict, total=False):
    url: str


class VideoSnippet(TypedDict, total=False):
    title: str
    description: str
    channelId: str
    publishedAt: str
    thumbnails: dict[str, Thumbnail]
    tags: list[str]


class VideoResource(TypedDict, total=False):
    """The parts of a YouTube Data API video resource that are used."""

    id: str
    snippet: VideoSnippet
    contentDetails: dict[str, str]
    statistics: dict[str, str]


class ChannelResource(TypedDict, total=False):
    id: str
    snippet: dict[str, Any]


class YoutubeParser:
    """Build notes for YouTube videos.

    Uses the YouTube Data API when an API key is configured, otherwise
    scrapes the schema.org microdata embedded in the watch page.
    """

    HOSTS = ("youtube.com", "www.youtube.com", "m.youtube.com", "youtu.be", "www.youtu.be")

    # Path prefixes that carry the video id as the next path segment
    ID_PATH_PREFIXES = ("shorts", "embed", "live")

    VIDEO_ID_PATTERN = re.compile(r"^[\w-]+$")

    API_URL = "https://www.googleapis.com/youtube/v3"

    SCRAPER_USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/114.0.0.0 Safari/537.36"
    )

    # (field, itemprop, attribute) read from the VideoObject scope
    VIDEO_SCHEMA_FIELDS = [
        ("id", "identifier", "content"),
        ("title", "name", "content"),
        ("description", "description", "content"),
        ("channel_id", "channelId", "content"),
        ("duration", "duration", "content"),
        ("upload_date", "uploadDate", "content"),
        ("views_count", "interactionCount", "content"),
    ]

    # (field, itemprop, attribute) read from the nested Person scope
    PERSON_SCHEMA_FIELDS = [
        ("channel_url", "url", "href"),
        ("channel_name", "name", "content"),
    ]

    # Characters stripped from API tags before they become hashtags
    TAG_STRIP_PATTERN = re.compile(r"[\s:\-_.]")

    def __init__(
        self,
        settings: NoteSettings,
        fetcher: Fetcher,
        engine: TemplateEngine | None = None,
    ) -> None:
        """Initialize the parser.

        Args:
            settings: Note templates and formatting options.
            fetcher: HTTP fetch capability.
            engine: Template engine; a default one is created if omitted.
        """
        self._settings = settings
        self._fetcher = fetcher
        self._engine = engine or TemplateEngine()

    def test(self, content: str) -> bool:
        """Check if content is a YouTube video URL."""
        return is_valid_url(content) and self.extract_video_id(content) is not None

    def extract_video_id(self, url: str) -> str | None:
        """Get the video id from any supported YouTube URL form.

        Returns:
            The video id, or None if ``url`` is not a video URL.
        """
        parsed = urlparse(url.strip())
        host = parsed.netloc.lower().split(":")[0]
        if host not in self.HOSTS:
            return None

        segments = [s for s in parsed.path.split("/") if s]
        video_id = None
        if host.endswith("youtu.be"):
            video_id = segments[0] if segments else None
        elif segments == ["watch"]:
            video_id = parse_qs(parsed.query).get("v", [None])[0]
        elif len(segments) >= 2 and segments[0] in self.ID_PATH_PREFIXES:
            video_id = segments[1]

        if video_id and self.VIDEO_ID_PATTERN.match(video_id):
            return video_id
        return None

    @staticmethod
    def canonical_url(video_id: str) -> str:
        """Watch page URL on the primary domain."""
        return f"https://www.youtube.com/watch?v={video_id}"

    async def prepare_note(self, content: str) -> Note:
        """Fetch video metadata and render the YouTube note.

        Raises:
            InvalidInputError: If content is not a YouTube video URL.
            FetchError: If the video or its channel cannot be fetched.
            ParseError: If the response lacks the expected structure.
        """
        video_id = self.extract_video_id(content) if is_valid_url(content) else None
        if video_id is None:
            raise InvalidInputError(f"Not a YouTube video URL: {content}")

        url = self.canonical_url(video_id)
        if self._settings.youtube_api_key:
            video = await self._fetch_from_api(video_id, url)
        else:
            video = await self._fetch_from_page(video_id, url)

        log.info(
            "youtube_video_resolved",
            video_id=video.id,
            title=video.title,
            channel=video.channel.name,
        )

        return render_note(
            self._engine,
            self._settings,
            body_template=self._settings.youtube_note,
            title_template=self._settings.youtube_note_title,
            body_values=video.tokens(),
            title_values={"title": video.title},
        )

    async def _fetch_from_api(self, video_id: str, url: str) -> Video:
        """Resolve a video and then its channel through the Data API."""
        log.info("fetching_youtube_video", video_id=video_id, strategy="api")

        videos = await self._api_request(
            "videos",
            part="contentDetails,snippet,statistics,status,topicDetails",
            id=video_id,
        )
        if not videos:
            raise FetchError(f"Video ({url}) cannot be fetched from API", url=url)
        video: VideoResource = videos[0]
        snippet = video.get("snippet", {})

        channel_id = snippet.get("channelId", "")
        channels = await self._api_request(
            "channels", part="snippet,contentDetails,statistics", id=channel_id
        )
        if not channels:
            raise FetchError(f"Channel ({channel_id}) cannot be fetched from API", url=url)
        channel: ChannelResource = channels[0]

        duration = self._parse_duration(video.get("contentDetails", {}).get("duration"))
        resolved_id = video.get("id") or video_id

        return Video(
            id=resolved_id,
            url=url,
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            thumbnail=self._best_thumbnail(snippet.get("thumbnails", {})),
            duration=to_seconds(duration),
            duration_formatted=format_duration(duration),
            published=self._format_published(snippet.get("publishedAt")),
            views_count=self._as_int(video.get("statistics", {}).get("viewCount")),
            tags=self._normalize_tags(snippet.get("tags")),
            player=self._embed_player(resolved_id),
            channel=Channel(
                id=channel.get("id", ""),
                url=f"https://www.youtube.com/channel/{channel.get('id', '')}",
                name=channel.get("snippet", {}).get("title", ""),
            ),
        )

    async def _api_request(self, resource: str, **params: str) -> list[dict[str, Any]]:
        query = urlencode({**params, "key": self._settings.youtube_api_key})
        body = await self._fetcher.request(
            f"{self.API_URL}/{resource}?{query}",
            headers={"Accept": "application/json"},
        )
        try:
            payload = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise ParseError(f"YouTube API returned invalid JSON for {resource}") from e

        if not isinstance(payload, dict):
            raise ParseError(f"YouTube API returned an unexpected {resource} payload")
        return payload.get("items") or []

    async def _fetch_from_page(self, video_id: str, url: str) -> Video:
        """Scrape schema.org microdata from the public watch page."""
        log.info("fetching_youtube_video", video_id=video_id, strategy="page")

        html = await self._fetcher.request(url, headers={"User-Agent": self.SCRAPER_USER_AGENT})
        soup = BeautifulSoup(html, "lxml")

        video_scope = soup.select_one('[itemtype*="schema.org/VideoObject"]')
        if video_scope is None:
            raise ParseError("Unable to find Schema.org element in HTML.", url=url)

        fields = self._read_schema_fields(video_scope, self.VIDEO_SCHEMA_FIELDS)
        person_scope = video_scope.select_one('[itemtype*="schema.org/Person"]')
        if person_scope is not None:
            fields.update(self._read_schema_fields(person_scope, self.PERSON_SCHEMA_FIELDS))

        og_image = soup.find("meta", property="og:image")
        thumbnail = og_image.get("content", "") if og_image else ""

        duration = self._parse_duration(fields.get("duration"))
        schema_id = fields.get("id", "")

        return Video(
            id=schema_id,
            url=url,
            title=fields.get("title", ""),
            description=fields.get("description", ""),
            thumbnail=thumbnail,
            duration=to_seconds(duration),
            duration_formatted=format_duration(duration),
            published=reformat_date(fields.get("upload_date"), self._settings.date_content_fmt),
            views_count=self._as_int(fields.get("views_count")),
            player=self._embed_player(schema_id),
            channel=Channel(
                id=fields.get("channel_id", ""),
                url=fields.get("channel_url", ""),
                name=fields.get("channel_name", ""),
            ),
        )

    @staticmethod
    def _read_schema_fields(scope: Tag, spec: list[tuple[str, str, str]]) -> dict[str, str]:
        """Read itemprops that belong directly to ``scope``.

        Properties of nested itemtypes are skipped so the video's name is
        not confused with its author's name. Missing fields are omitted.
        """
        values: dict[str, str] = {}
        for field_name, itemprop, attribute in spec:
            for element in scope.select(f'[itemprop="{itemprop}"]'):
                if element.find_parent(attrs={"itemtype": True}) is not scope:
                    continue
                value = element.get(attribute)
                if isinstance(value, str):
                    values[field_name] = value.strip()
                break
        return values

    def _embed_player(self, video_id: str) -> str:
        domain = (
            "youtube-nocookie.com"
            if self._settings.youtube_use_privacy_enhanced_embed
            else "youtube.com"
        )
        return (
            f'<iframe width="{self._settings.youtube_embed_width}" '
            f'height="{self._settings.youtube_embed_height}" '
            f'src="https://www.{domain}/embed/{video_id}" title="YouTube video player" '
            'frameborder="0" allow="accelerometer; autoplay; clipboard-write; '
            'encrypted-media; gyroscope; picture-in-picture" allowfullscreen></iframe>'
        )

    def _format_published(self, published_at: str | None) -> str:
        if not published_at:
            return ""
        try:
            published = datetime.fromisoformat(published_at.replace("Z", "+00:00"))
        except ValueError:
            return ""
        return format_date(published, self._settings.date_content_fmt)

    def _normalize_tags(self, tags: list[str] | None) -> tuple[str, ...]:
        if not tags:
            return ()
        return tuple("#" + self.TAG_STRIP_PATTERN.sub("", tag) for tag in tags)

    @staticmethod
    def _best_thumbnail(thumbnails: dict[str, Thumbnail]) -> str:
        for size in ("maxres", "medium", "default"):
            url = thumbnails.get(size, {}).get("url")
            if url:
                return url
        return ""

    @staticmethod
    def _parse_duration(value: str | None) -> Duration:
        if not value:
            return Duration()
        try:
            return parse_duration(value)
        except ValueError:
            log.warning("youtube_duration_unparsable", duration=value)
            return Duration()

    @staticmethod
    def _as_int(value: str | int | None) -> int:
        try:
            return int(value or 0)
        except (TypeError, ValueError):
            return 0
