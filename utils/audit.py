from __future__ import annotations

from typing import Optional

from flask import current_app, g, has_request_context

from utils.access import AccessContext


def log_event(ctx: AccessContext, action: str, target: str | None = None, detail: str | None = None) -> None:
    """Record a write operation on the application log.

    One line per event, keyed by operator and request id so a change can be
    traced back to the request that made it.
    """
    request_id: Optional[str] = g.get("request_id") if has_request_context() else None
    current_app.logger.info(
        "audit action=%s target=%s operator=%s role=%s request_id=%s detail=%s",
        action,
        target or "-",
        ctx.operator_id,
        ctx.role,
        request_id or "-",
        detail or "-",
    )
