"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this installs the
single root handler whose structlog ``ProcessorFormatter`` renders each
record as text or as one JSON object per line, after scrubbing anything
that looks like a bearer token.
"""
import logging
import re
import sys
from typing import Any, Dict, List

import structlog

_JWT_RE = re.compile(r"\beyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\b")
_BEARER_RE = re.compile(r"(?i)\bBearer\s+[A-Za-z0-9_\-\.=]+")

REDACTED = "***REDACTED***"


def redact(message: str) -> str:
    """Replace JWTs and bearer credentials in a log message."""
    message = _BEARER_RE.sub(f"Bearer {REDACTED}", message)
    return _JWT_RE.sub(REDACTED, message)


def redact_event(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor scrubbing every string value of the event."""
    for key, value in list(event_dict.items()):
        if isinstance(value, str):
            event_dict[key] = redact(value)
    return event_dict


def build_formatter(log_format: str = "text") -> structlog.stdlib.ProcessorFormatter:
    """Formatter for stdlib records; redaction runs after exceptions are rendered."""
    pre_chain: List[Any] = [
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.format_exc_info,
        redact_event,
    ]
    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=pre_chain,
    )


def configure_logging(level: str = "INFO", log_format: str = "text") -> None:
    """
    Install the root handler.

    Safe to call more than once; the previous handler is replaced.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(log_format))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, '_authcore_handler', False):
            root.removeHandler(existing)
    handler._authcore_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level.upper())
