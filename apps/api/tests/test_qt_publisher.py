"""
Daily QT upsert tests.
"""
from datetime import date

from models import DailyQT
from services.qt_publisher import find_daily_qt, publish_daily_qt

DAY = date(2024, 6, 1)


def _record(**overrides):
    record = {
        "date": DAY,
        "reference": "시편 23",
        "passage": "1 여호와는 나의 목자시니|||해설",
        "question1": "q1",
        "question2": "q2",
        "question3": "q3",
        "prayer": "아멘",
        "ai_generated": True,
    }
    record.update(overrides)
    return record


def test_find_returns_none_for_missing_day(db_session):
    assert find_daily_qt(db_session, DAY) is None


def test_publish_inserts_row(db_session):
    publish_daily_qt(db_session, _record())

    row = find_daily_qt(db_session, DAY)
    assert row is not None
    assert row.reference == "시편 23"
    assert row.ai_generated is True
    assert row.updated_at is not None


def test_second_publish_for_same_day_overwrites(db_session):
    publish_daily_qt(db_session, _record())
    publish_daily_qt(db_session, _record(reference="시편 24", passage="새 본문|||새 해설", ai_generated=False))

    db_session.expire_all()
    rows = db_session.query(DailyQT).all()
    assert len(rows) == 1
    assert rows[0].reference == "시편 24"
    assert rows[0].passage == "새 본문|||새 해설"
    assert rows[0].ai_generated is False


def test_missing_optional_fields_are_null(db_session):
    publish_daily_qt(db_session, {"date": DAY, "reference": "요한복음 3", "passage": "본문"})

    row = find_daily_qt(db_session, DAY)
    assert row.question1 is None
    assert row.prayer is None
    assert row.ai_generated is False


def test_different_days_are_separate_rows(db_session):
    publish_daily_qt(db_session, _record())
    publish_daily_qt(db_session, _record(date=date(2024, 6, 2)))

    assert db_session.query(DailyQT).count() == 2
