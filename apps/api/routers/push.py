"""
Web Push API

    POST /api/push-subscribe   - store a browser subscription (one per user)
    GET  /api/push-send-daily  - push today's QT reference to everyone
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.auth import require_push_secret
from core.database import get_db, upsert_statement
from models import PushSubscription
from services import push_service
from services.qt_notifier import PUSH_TITLE, PUSH_URL
from services.qt_publisher import find_daily_qt
from services.reading_plan import today_kst

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Push"])

FALLBACK_BODY = "오늘의 말씀을 묵상하며 하루를 시작해 보세요."


class PushSubscribeRequest(BaseModel):
    user_id: Optional[UUID] = None
    subscription: Optional[Dict[str, Any]] = None


@router.post("/push-subscribe")
def push_subscribe(request: PushSubscribeRequest, db: Session = Depends(get_db)):
    """Keep only the latest subscription per user."""
    if not request.user_id or not request.subscription:
        return JSONResponse(
            status_code=400,
            content={"error": "User ID and subscription are required"},
        )

    stmt = upsert_statement(
        db,
        PushSubscription,
        {
            "user_id": request.user_id,
            "subscription": request.subscription,
            "updated_at": datetime.now(timezone.utc),
        },
        ["user_id"],
        ["subscription", "updated_at"],
    )
    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Push subscription upsert failed for user {request.user_id}: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    logger.info(f"Push subscription stored for user {request.user_id}")
    return {"success": True}


@router.get("/push-send-daily", dependencies=[Depends(require_push_secret)])
def push_send_daily(db: Session = Depends(get_db)):
    today = today_kst()
    qt = find_daily_qt(db, today)
    body = f"오늘의 본문: {qt.reference}" if qt else FALLBACK_BODY

    if db.query(PushSubscription.id).first() is None:
        return {"success": True, "sentCount": 0}

    if not push_service.push_configured():
        return JSONResponse(status_code=503, content={"error": "Push is not configured"})

    result = push_service.broadcast(
        db,
        lambda sub: push_service.build_payload(PUSH_TITLE, body, PUSH_URL, user_id=str(sub.user_id)),
    )
    return {
        "success": True,
        "sentCount": result.sent,
        "failedCount": result.failed,
        "errorSamples": result.error_samples,
        "today": today.isoformat(),
    }
