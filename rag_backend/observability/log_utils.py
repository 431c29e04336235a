"""
Helpers for putting arbitrary values into log records.

Request payloads here carry embedding vectors and whole chunk texts;
these helpers keep them out of the logs in full.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render ``value`` as a bounded string suitable for ``extra=``.

    Sequences render as their size ("list(384 items)"), mappings as their
    key count. Anything longer than ``max_length`` is cut.
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple)):
        rendered = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        rendered = f"dict({len(value)} keys)"
    else:
        try:
            rendered = value if isinstance(value, str) else str(value)
        except Exception as e:
            # __str__ of third-party objects may raise; never let logging fail
            return f"<unrepresentable {type(value).__name__}: {type(e).__name__}>"

    if len(rendered) <= max_length:
        return rendered
    return f"{rendered[:max_length]}... (truncated, {len(rendered)} total)"


def preview_text(text: str, limit: int = 100) -> str:
    """First ``limit`` characters, with "..." appended only when cut."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def _sanitize(context: dict[str, Any]) -> dict[str, str]:
    return {key: safe_log_value(value) for key, value in context.items()}


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    """
    Emit ``message`` at ``level`` with every context value passed through safe_log_value.

    Example:
        log_with_context(logger, logging.INFO, "Saved chunk", bot_id=7, embedding=vec)
    """
    logger.log(level, message, extra=_sanitize(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context,
) -> None:
    """Log ``exc`` with traceback, its type and message added to the context."""
    extra = _sanitize(context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.exception(message, extra=extra)
