"""
In-app notification feed.

    GET   /api/notifications?user_id=  - latest 20, newest first
    PATCH /api/notifications           - mark one as read
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import NotFoundError
from models import Notification

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])

FEED_LIMIT = 20


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    type: str
    actor_name: Optional[str] = None
    post_id: Optional[UUID] = None
    is_read: bool
    created_at: Optional[datetime] = None


class MarkReadRequest(BaseModel):
    id: Optional[UUID] = None


@router.get("")
def list_notifications(
    user_id: Optional[UUID] = Query(default=None),
    db: Session = Depends(get_db),
):
    if user_id is None:
        return JSONResponse(status_code=400, content={"error": "User ID is required"})

    rows = (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(FEED_LIMIT)
        .all()
    )
    return [NotificationResponse.model_validate(r).model_dump(mode="json") for r in rows]


@router.patch("")
def mark_notification_read(request: MarkReadRequest, db: Session = Depends(get_db)):
    if request.id is None:
        return JSONResponse(status_code=400, content={"error": "ID is required"})

    notification = db.query(Notification).filter(Notification.id == request.id).first()
    if notification is None:
        raise NotFoundError("Notification", str(request.id))

    notification.is_read = True
    db.commit()
    return {"success": True}
