"""
Daily QT Pipeline

Strictly sequential, single attempt:

    existence check -> reading -> scripture call -> devotional call
    -> combine -> upsert (commit) -> fan-out

Everything up to and including the upsert is fatal: the exception
propagates and nothing is saved for the day, so the next trigger starts
from scratch. The fan-out runs only after the commit and cannot fail the run.

Used by the cron endpoint and by the Celery beat task.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from sqlalchemy.orm import Session

from services.qt_generator import QTContentGenerator
from services.qt_notifier import FanoutOutcome, QTNotifier
from services.qt_passage import combine_passage
from services.qt_publisher import find_daily_qt, publish_daily_qt
from services.reading_plan import get_today_reading, today_kst

logger = logging.getLogger(__name__)


@dataclass
class DailyQTResult:
    created: bool
    date: date
    reference: str
    fanout: Optional[FanoutOutcome] = None


def run_daily_qt(
    db: Session,
    generator: QTContentGenerator,
    notifier: QTNotifier,
    day: Optional[date] = None,
    reading_for: Optional[Callable[[date], str]] = None,
) -> DailyQTResult:
    day = day or today_kst()
    reading_for = reading_for or get_today_reading

    existing = find_daily_qt(db, day)
    if existing is not None:
        logger.info(f"Daily QT for {day} already exists; skipping generation")
        return DailyQTResult(created=False, date=day, reference=existing.reference)

    reference = reading_for(day)
    logger.info(f"Generating daily QT for {day}: {reference}")

    content = generator.generate(reference)

    publish_daily_qt(
        db,
        {
            "date": day,
            "reference": reference,
            "passage": combine_passage(content.scripture, content.interpretation),
            "question1": content.question1,
            "question2": content.question2,
            "question3": content.question3,
            "prayer": content.prayer,
            "ai_generated": True,
        },
    )

    fanout = None
    try:
        fanout = notifier.announce(db, day, reference)
    except Exception as e:
        logger.warning(f"Daily QT fan-out raised for {day}; publish kept: {e}", exc_info=True)
    return DailyQTResult(created=True, date=day, reference=reference, fanout=fanout)
