"""
Web Push delivery.

Sends JSON payloads to stored browser subscriptions with VAPID auth via
pywebpush. Broadcasts are best-effort: one failing device never stops the
rest, and subscriptions the push service reports as gone (404/410) are
removed.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pywebpush import webpush, WebPushException
from sqlalchemy.orm import Session

from core.config import settings
from models import PushSubscription

logger = logging.getLogger(__name__)

EXPIRED_STATUS_CODES = (404, 410)
MAX_ERROR_SAMPLES = 3


@dataclass
class BroadcastResult:
    sent: int = 0
    failed: int = 0
    pruned: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def error_samples(self) -> List[str]:
        """Distinct error messages, first MAX_ERROR_SAMPLES only."""
        seen: List[str] = []
        for message in self.errors:
            if message not in seen:
                seen.append(message)
        return seen[:MAX_ERROR_SAMPLES]


def build_payload(title: str, body: str, url: str = "/", user_id: Optional[str] = None) -> Dict[str, Any]:
    payload = {"title": title, "body": body, "url": url}
    if user_id:
        payload["user_id"] = user_id
    return payload


def push_configured() -> bool:
    return bool(settings.VAPID_PRIVATE_KEY)


def send_push(subscription: Dict[str, Any], payload: Dict[str, Any]) -> None:
    """Deliver one payload. Raises WebPushException on delivery failure."""
    webpush(
        subscription_info=subscription,
        data=json.dumps(payload, ensure_ascii=False),
        vapid_private_key=settings.VAPID_PRIVATE_KEY,
        vapid_claims={"sub": settings.VAPID_CLAIMS_EMAIL},
        ttl=settings.PUSH_TTL_S,
    )


def _status_code(exc: WebPushException) -> Optional[int]:
    response = getattr(exc, "response", None)
    return getattr(response, "status_code", None)


def broadcast(
    db: Session,
    payload_for: Callable[[PushSubscription], Dict[str, Any]],
    sender: Callable[[Dict[str, Any], Dict[str, Any]], None] = send_push,
) -> BroadcastResult:
    """
    Send a payload to every stored subscription.

    `payload_for` builds the per-recipient payload so the recipient id can be
    embedded. Delivery errors are counted and logged, never raised.
    """
    result = BroadcastResult()
    subscriptions = db.query(PushSubscription).all()
    if not subscriptions:
        return result

    expired_ids = []
    for sub in subscriptions:
        try:
            sender(sub.subscription, payload_for(sub))
            result.sent += 1
        except WebPushException as e:
            result.failed += 1
            result.errors.append(str(e))
            if _status_code(e) in EXPIRED_STATUS_CODES:
                expired_ids.append(sub.id)
            logger.warning(f"Push delivery failed for user {sub.user_id}: {e}")
        except Exception as e:
            result.failed += 1
            result.errors.append(str(e) or type(e).__name__)
            logger.warning(f"Push delivery failed for user {sub.user_id}: {e}")

    if expired_ids:
        try:
            db.query(PushSubscription).filter(PushSubscription.id.in_(expired_ids)).delete(
                synchronize_session=False
            )
            db.commit()
            result.pruned = len(expired_ids)
            logger.info(f"Removed {len(expired_ids)} expired push subscriptions")
        except Exception as e:
            db.rollback()
            logger.warning(f"Failed to remove expired push subscriptions: {e}")

    logger.info(
        f"Push broadcast finished: sent={result.sent} failed={result.failed} pruned={result.pruned}",
        extra={"extra_fields": {"sent": result.sent, "failed": result.failed, "pruned": result.pruned}},
    )
    return result
