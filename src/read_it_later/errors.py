"""Error taxonomy and the central error handler."""

import structlog

log = structlog.get_logger()


class ReadItLaterError(Exception):
    """Base class for errors raised while turning content into a note."""


class InvalidInputError(ReadItLaterError):
    """Raised when a parser is handed content it does not recognize."""


class FetchError(ReadItLaterError):
    """Raised when remote data could not be obtained."""

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class ParseError(ReadItLaterError):
    """Raised when fetched data lacks the structure a parser requires."""

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class NoParserMatchedError(ReadItLaterError):
    """Raised when no registered parser claims the content."""

    def __init__(self, content: str) -> None:
        self.content = content
        preview = content if len(content) <= 80 else content[:77] + "..."
        super().__init__(f"No parser matched content: {preview!r}")


def handle_error(error: BaseException, **context) -> str:
    """Log an error and return the message to show the user.

    Args:
        error: The exception to report.
        **context: Extra fields bound to the log event.

    Returns:
        A user-facing notification message.
    """
    if isinstance(error, ReadItLaterError):
        log.error("note_creation_failed", error_type=type(error).__name__, error=str(error), **context)
    else:
        log.error(
            "note_creation_crashed",
            error_type=type(error).__name__,
            error=str(error),
            exc_info=error,
            **context,
        )

    message = str(error) or type(error).__name__
    return f"ReadItLater: {message}"
