"""
Daily QT fan-out.

Runs after the day's QT row is committed:
  - push the day's reference to every stored device subscription
  - add one unread `daily_qt` notification per member profile

Both steps are fire-and-forget with a logged outcome. Nothing here raises
into the caller; a published QT stays published whatever happens below.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from models import Notification, Profile, PushSubscription
from services import push_service

logger = logging.getLogger(__name__)

NOTIFICATION_TYPE = "daily_qt"
PUSH_TITLE = "오늘의 큐티말씀이 도착했습니다 🐑"
PUSH_URL = "/?view=qt"


def qt_label(day: date, reference: str) -> str:
    return f"{day.isoformat()} {reference}"


@dataclass
class FanoutOutcome:
    pushed: int = 0
    push_failed: int = 0
    feed_rows: int = 0
    errors: List[str] = field(default_factory=list)


class QTNotifier:
    def __init__(self, push_sender: Optional[Callable[[Dict[str, Any], Dict[str, Any]], None]] = None):
        self.push_sender = push_sender

    def announce(self, db: Session, day: date, reference: str) -> FanoutOutcome:
        outcome = FanoutOutcome()
        label = qt_label(day, reference)

        try:
            self._push(db, label, outcome)
        except Exception as e:
            db.rollback()
            outcome.errors.append(f"push: {e}")
            logger.warning(f"Daily QT push fan-out failed for {day}: {e}", exc_info=True)

        try:
            outcome.feed_rows = self._insert_feed(db, label)
        except Exception as e:
            db.rollback()
            outcome.errors.append(f"feed: {e}")
            logger.warning(f"Daily QT notification insert failed for {day}: {e}", exc_info=True)

        logger.info(
            f"Daily QT fan-out for {day}: pushed={outcome.pushed} "
            f"push_failed={outcome.push_failed} feed_rows={outcome.feed_rows}",
            extra={
                "extra_fields": {
                    "qt_date": day.isoformat(),
                    "pushed": outcome.pushed,
                    "push_failed": outcome.push_failed,
                    "feed_rows": outcome.feed_rows,
                    "errors": outcome.errors,
                }
            },
        )
        return outcome

    def _push(self, db: Session, label: str, outcome: FanoutOutcome) -> None:
        sender = self.push_sender
        if sender is None:
            if not push_service.push_configured():
                logger.warning("VAPID_PRIVATE_KEY not set; skipping daily QT push")
                return
            sender = push_service.send_push

        def payload_for(sub: PushSubscription) -> Dict[str, Any]:
            return push_service.build_payload(
                title=PUSH_TITLE,
                body=f"오늘의 본문: {label}",
                url=PUSH_URL,
                user_id=str(sub.user_id),
            )

        result = push_service.broadcast(db, payload_for, sender=sender)
        outcome.pushed = result.sent
        outcome.push_failed = result.failed

    def _insert_feed(self, db: Session, label: str) -> int:
        profile_ids = [row.id for row in db.query(Profile.id).all()]
        if not profile_ids:
            return 0

        db.add_all(
            Notification(
                user_id=profile_id,
                type=NOTIFICATION_TYPE,
                actor_name=label,
                is_read=False,
            )
            for profile_id in profile_ids
        )
        db.commit()
        return len(profile_ids)


def get_qt_notifier() -> QTNotifier:
    """FastAPI dependency (overridden in tests)."""
    return QTNotifier()
