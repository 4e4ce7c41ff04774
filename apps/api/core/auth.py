"""
Shared-secret authorization for machine callers.

Provides FastAPI dependencies for:
- The scheduled QT trigger (Authorization: Bearer <CRON_SECRET>)
- The manual daily push endpoint (?secret=<PUSH_SEND_SECRET>)

End-user authentication is handled by the identity provider in front of
this service and is not wired here.
"""
import hmac
import logging
from typing import Optional

from fastapi import Header, Query

from core.config import settings
from core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


def _secrets_match(given: Optional[str], expected: str) -> bool:
    if given is None:
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def verify_cron_authorization(authorization: Optional[str]) -> None:
    """
    Check the cron bearer token.

    With CRON_SECRET unset the call is allowed through and a warning is
    logged, unless CRON_REQUIRE_SECRET is enabled.
    """
    secret = settings.CRON_SECRET
    if not secret:
        if settings.CRON_REQUIRE_SECRET:
            logger.error("CRON_SECRET is not configured and CRON_REQUIRE_SECRET is on; rejecting cron call")
            raise UnauthorizedError()
        logger.warning("CRON_SECRET is not configured; cron trigger is running unauthenticated")
        return

    if not _secrets_match(authorization, f"Bearer {secret}"):
        logger.warning("Cron trigger rejected: bad or missing Authorization header")
        raise UnauthorizedError()


def require_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """FastAPI dependency wrapper around verify_cron_authorization."""
    verify_cron_authorization(authorization)


def require_push_secret(secret: Optional[str] = Query(default=None)) -> None:
    """Gate for the manual push broadcast. No configured secret means no access."""
    expected = settings.PUSH_SEND_SECRET
    if not expected or not _secrets_match(secret, expected):
        raise UnauthorizedError()
