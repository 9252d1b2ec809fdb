"""structlog setup for the note service."""

import logging
import sys

import orjson
import structlog


def configure_logging(json_output: bool = True, level: str = "INFO") -> None:
    """Set up structlog for the API process.

    Events below ``level`` are dropped before any processor runs. JSON
    lines are written as bytes; the console renderer is only used when
    JSON is off and stderr is a terminal.

    Args:
        json_output: Emit one JSON object per event.
        level: Level name such as "DEBUG"; unknown names mean INFO.
    """
    use_json = json_output or not sys.stderr.isatty()
    processors, logger_factory = _output_chain(use_json)

    structlog.configure(
        processors=_event_processors() + processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )


def _event_processors() -> list[structlog.types.Processor]:
    """Processors that enrich every event: context, level, time, callsite."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
    ]


def _output_chain(
    use_json: bool,
) -> tuple[list[structlog.types.Processor], structlog.types.WrappedLogger]:
    if use_json:
        # Tracebacks from handle_error(exc_info=...) become a string field
        return (
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(serializer=orjson.dumps),
            ],
            structlog.BytesLoggerFactory(),
        )
    return [structlog.dev.ConsoleRenderer()], structlog.PrintLoggerFactory()


def _level_number(level: str) -> int:
    """Map a level name to its numeric value, defaulting to INFO."""
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO
