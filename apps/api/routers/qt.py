"""
Daily QT API

    GET  /api/qt            - QT for a date (default: today, KST)
    POST /api/qt            - admin save / override, upsert by date
    GET  /api/qt/history    - a member's completed QTs, newest first
    POST /api/qt-generate   - draft interpretation/questions/prayer for a
                              passage the admin is editing
"""

import datetime as dt
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import PublishError, ResponseParseError
from models import DailyQT, QtCompletion
from services.qt_generator import QTContentGenerator, get_qt_generator
from services.qt_passage import split_passage
from services.qt_publisher import find_daily_qt, publish_daily_qt
from services.reading_plan import today_kst

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Daily QT"])


# =============================================================================
# SCHEMAS
# =============================================================================

class DailyQTResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    date: dt.date
    reference: str
    passage: str
    question1: Optional[str] = None
    question2: Optional[str] = None
    question3: Optional[str] = None
    prayer: Optional[str] = None
    ai_generated: bool = False
    created_at: Optional[dt.datetime] = None
    # passage split on the "|||" marker
    scripture: str = ""
    interpretation: str = ""


class QTSaveRequest(BaseModel):
    date: Optional[dt.date] = None
    reference: Optional[str] = None
    passage: Optional[str] = None
    question1: Optional[str] = None
    question2: Optional[str] = None
    question3: Optional[str] = None
    prayer: Optional[str] = None
    ai_generated: Optional[bool] = False


class QTGenerateRequest(BaseModel):
    reference: Optional[str] = None
    passage: Optional[str] = None


def qt_to_dict(row: DailyQT) -> Dict[str, Any]:
    out = DailyQTResponse.model_validate(row)
    out.scripture, out.interpretation = split_passage(row.passage)
    return out.model_dump(mode="json")


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/qt")
def get_qt(
    date: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    """QT for `date`, or `{"qt": null}` when none has been published or the date is malformed."""
    if date:
        try:
            day = dt.date.fromisoformat(date)
        except ValueError:
            logger.info(f"Ignoring malformed QT date: {date!r}")
            return {"qt": None}
    else:
        day = today_kst()

    row = find_daily_qt(db, day)
    if row is None:
        return {"qt": None}
    return {"qt": qt_to_dict(row)}


@router.post("/qt")
def save_qt(request: QTSaveRequest, db: Session = Depends(get_db)):
    """Manual save or override of a day's QT."""
    if not request.date or not request.reference or not request.passage:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "날짜, 성경구절, 본문은 필수입니다."},
        )

    try:
        publish_daily_qt(db, request.model_dump())
    except PublishError as e:
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})
    return {"success": True}


@router.get("/qt/history")
def get_qt_history(
    user_id: Optional[UUID] = Query(default=None),
    db: Session = Depends(get_db),
) -> Any:
    if user_id is None:
        return JSONResponse(status_code=400, content={"error": "User ID is required"})

    completions: List[QtCompletion] = (
        db.query(QtCompletion)
        .filter(QtCompletion.user_id == user_id)
        .order_by(QtCompletion.completed_date.desc())
        .all()
    )
    return [
        {
            "completed_date": c.completed_date.isoformat(),
            "answers": c.answers,
            "daily_qt": qt_to_dict(c.daily_qt) if c.daily_qt else None,
        }
        for c in completions
    ]


@router.post("/qt-generate")
def generate_qt_draft(
    request: QTGenerateRequest,
    generator: QTContentGenerator = Depends(get_qt_generator),
):
    """Interpretation, three questions and a prayer for the given passage."""
    if not request.reference or not request.passage:
        return JSONResponse(status_code=400, content={"error": "성경 구절과 본문이 필요합니다."})

    try:
        return generator.generate_devotional(request.reference, request.passage)
    except ResponseParseError as e:
        logger.error(f"AI QT generation returned unparseable output: {e}")
        return JSONResponse(status_code=500, content={"error": "AI 응답 형식 오류"})
    except Exception as e:
        logger.exception(f"AI QT generation error: {e}")
        return JSONResponse(status_code=500, content={"error": "AI 생성 중 오류가 발생했습니다."})
