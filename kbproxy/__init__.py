"""
Backend package for the knowledge-base chat proxy.

This package contains the proxy components including:
- Flask application and API routes
- Client for the upstream knowledge-base service
- LLM integration and the grounded chat pipeline
- Data models for knowledge bases, uploads and retrieved chunks
- Configuration and logging setup
"""

import logging
import os
from typing import Optional


def resolve_log_level(value: Optional[str]) -> Optional[int]:
    """Map a LOG_LEVEL value (a level name or number) to a logging level.

    Returns:
        The level, or None if the value names no level
    """
    name = (value or "").strip().upper() or "INFO"
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else None


# Configure logging with clickable paths before anything else imports logging
_log_level = resolve_log_level(os.getenv("LOG_LEVEL", "INFO"))
logging.basicConfig(
    level=logging.INFO if _log_level is None else _log_level,
    format="%(levelname)s: %(pathname)s:%(lineno)d %(message)s",
)


class ClickablePathFilter(logging.Filter):
    """Filter to make file paths clickable in the terminal."""

    def filter(self, record: logging.LogRecord) -> bool:
        if hasattr(record, "pathname"):
            workspace_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
            try:
                record.pathname = os.path.relpath(record.pathname, workspace_root)
            except ValueError:
                # Different drive on Windows
                pass
        return True


# Filters on a logger are not inherited by child loggers, so attach to the handlers
for _handler in logging.getLogger().handlers:
    _handler.addFilter(ClickablePathFilter())

if _log_level is None:
    logging.getLogger(__name__).warning(
        f"Unknown LOG_LEVEL {os.getenv('LOG_LEVEL')!r}, using INFO"
    )
