"""Content records produced by the parsers.

Every field has a default so a record is always complete, and
``tokens()`` returns the full token map for the family's body template.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Channel:
    """A video channel."""

    id: str = ""
    url: str = ""
    name: str = ""


@dataclass(frozen=True)
class Video:
    """A video resolved from a video platform."""

    id: str = ""
    url: str = ""
    title: str = ""
    description: str = ""
    thumbnail: str = ""
    duration: int = 0  # seconds
    duration_formatted: str = ""
    published: str = ""
    views_count: int = 0
    tags: tuple[str, ...] = ()
    player: str = ""
    channel: Channel = field(default_factory=Channel)

    def tokens(self) -> dict[str, str]:
        return {
            "videoTitle": self.title,
            "videoId": self.id,
            "videoDescription": self.description,
            "videoThumbnail": self.thumbnail,
            "videoDuration": str(self.duration),
            "videoDurationFormatted": self.duration_formatted,
            "videoPublishDate": self.published,
            "videoViewsCount": str(self.views_count),
            "videoURL": self.url,
            "channelId": self.channel.id,
            "channelName": self.channel.name,
            "channelURL": self.channel.url,
            "videoTags": " ".join(self.tags),
            "videoPlayer": self.player,
        }


@dataclass(frozen=True)
class Tweet:
    """A social media post resolved through oEmbed."""

    author_name: str = ""
    url: str = ""
    content: str = ""  # Markdown
    published: str = ""

    def tokens(self) -> dict[str, str]:
        return {
            "tweetAuthorName": self.author_name,
            "tweetURL": self.url,
            "tweetContent": self.content,
            "tweetPublishDate": self.published,
        }


@dataclass(frozen=True)
class Article:
    """A generic web page."""

    url: str = ""
    title: str = ""
    author: str = ""
    published: str = ""
    content: str = ""  # Markdown

    def tokens(self) -> dict[str, str]:
        return {
            "articleTitle": self.title,
            "articleURL": self.url,
            "articleAuthor": self.author,
            "articlePublishDate": self.published,
            "articleContent": self.content,
        }


@dataclass(frozen=True)
class TextSnippet:
    """Plain text that matched no richer content family."""

    content: str = ""

    def tokens(self) -> dict[str, str]:
        return {"content": self.content}
