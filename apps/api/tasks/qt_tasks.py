"""
Daily QT Celery Task

Beat-scheduled counterpart of GET /api/cron/daily-qt. Same pipeline, same
single-attempt contract: no autoretry. A failed run leaves no row, so the
next trigger regenerates from scratch.
"""

import logging
from datetime import date
from typing import Dict, Optional

from celery import Task
from sqlalchemy.orm import Session

from tasks import celery_app
from core.database import get_db_sync
from services.daily_qt_pipeline import run_daily_qt
from services.qt_generator import QTContentGenerator
from services.qt_notifier import QTNotifier

logger = logging.getLogger(__name__)


@celery_app.task(name="tasks.generate_daily_qt", bind=True)
def generate_daily_qt_task(self: Task, target_date: Optional[str] = None) -> Dict:
    """
    Generate today's QT (KST) or the ISO date given in `target_date`.
    """
    db: Optional[Session] = None
    try:
        db = get_db_sync()
        day = date.fromisoformat(target_date) if target_date else None
        result = run_daily_qt(db, QTContentGenerator(), QTNotifier(), day=day)

        if not result.created:
            return {"status": "skipped", "reason": "already_exists", "date": result.date.isoformat()}

        return {
            "status": "success",
            "date": result.date.isoformat(),
            "reference": result.reference,
            "pushed": result.fanout.pushed if result.fanout else 0,
            "feed_rows": result.fanout.feed_rows if result.fanout else 0,
        }
    except Exception as e:
        logger.error(f"Daily QT task failed: {e}", exc_info=True)
        return {"status": "error", "error": str(e)}
    finally:
        if db:
            db.close()
