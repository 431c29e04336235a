"""
Per-request correlation id.

The id lives in a ContextVar so it follows the request through awaits and
into every log record emitted while handling it.

Dependencies: contextvars
System role: Request tracing
"""

import uuid
from contextvars import ContextVar

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind an id to the current context, minting a UUID4 when none is given.

    Returns:
        str: The id now in effect
    """
    if not correlation_id:
        correlation_id = uuid.uuid4().hex
    correlation_id_ctx.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    """Current id, or "" when no request is being handled."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")
