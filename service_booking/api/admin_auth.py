from __future__ import annotations

import hmac
import logging

from fastapi import Header, HTTPException

from service_booking.core.config import settings

logger = logging.getLogger(__name__)


def verify_admin_token(token: str | None, expected: str | None, env: str) -> bool:
    if not expected:
        if env.lower() in {"dev", "local"}:
            logger.warning("ADMIN_API_TOKEN not set; accepting admin request in dev mode")
            return True
        logger.error("ADMIN_API_TOKEN not set; rejecting admin request")
        return False
    if not token:
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def require_admin(x_admin_token: str | None = Header(None)) -> None:
    if not verify_admin_token(x_admin_token, settings.ADMIN_API_TOKEN, settings.ENV):
        raise HTTPException(status_code=403, detail="Admin access required")
