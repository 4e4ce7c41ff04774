"""
Daily QT persistence: the existence check that makes the cron trigger
idempotent, and the date-keyed upsert.

There is no lock between the check and the write. Two concurrent runs can
both pass the check; the unique constraint on `date` plus ON CONFLICT keeps
a single well-formed row, and the last writer's content wins.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.database import upsert_statement
from core.exceptions import PublishError
from models import DailyQT

logger = logging.getLogger(__name__)

QT_FIELDS = (
    "date",
    "reference",
    "passage",
    "question1",
    "question2",
    "question3",
    "prayer",
    "ai_generated",
)


def find_daily_qt(db: Session, day: date) -> Optional[DailyQT]:
    return db.query(DailyQT).filter(DailyQT.date == day).first()


def publish_daily_qt(db: Session, record: Dict[str, Any]) -> None:
    """
    Upsert one daily QT row keyed by date and commit.

    Raises PublishError on any database error; the session is rolled back.
    """
    values = {field: record.get(field) for field in QT_FIELDS}
    values["ai_generated"] = bool(values["ai_generated"])
    values["updated_at"] = datetime.now(timezone.utc)

    update_columns = [field for field in QT_FIELDS if field != "date"] + ["updated_at"]
    stmt = upsert_statement(db, DailyQT, values, ["date"], update_columns)

    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Daily QT upsert failed for {values['date']}: {e}")
        raise PublishError(str(e)) from e

    logger.info(f"Daily QT published for {values['date']} ({values['reference']})")
