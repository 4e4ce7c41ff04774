"""
Scheduled trigger endpoints.

GET /api/cron/daily-qt is hit once a day by the platform scheduler (the
Celery beat task runs the same pipeline). Repeated hits on the same KST
day are no-ops.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from core.auth import require_cron_secret
from core.database import get_db
from services.daily_qt_pipeline import run_daily_qt
from services.qt_generator import QTContentGenerator, get_qt_generator
from services.qt_notifier import QTNotifier, get_qt_notifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cron", tags=["Cron"])

ALREADY_EXISTS_MESSAGE = "오늘 큐티가 이미 존재합니다."
CREATED_MESSAGE = "오늘의 큐티가 자동 생성되었습니다! 🐑"


@router.get("/daily-qt", dependencies=[Depends(require_cron_secret)])
def trigger_daily_qt(
    db: Session = Depends(get_db),
    generator: QTContentGenerator = Depends(get_qt_generator),
    notifier: QTNotifier = Depends(get_qt_notifier),
):
    """Generate and publish today's QT unless it already exists."""
    try:
        result = run_daily_qt(db, generator, notifier)
    except Exception as e:
        logger.exception(f"Cron QT generation error: {e}")
        return JSONResponse(status_code=500, content={"error": str(e) or type(e).__name__})

    if not result.created:
        return {"message": ALREADY_EXISTS_MESSAGE, "date": result.date.isoformat()}

    return {
        "success": True,
        "date": result.date.isoformat(),
        "reference": result.reference,
        "message": CREATED_MESSAGE,
    }
