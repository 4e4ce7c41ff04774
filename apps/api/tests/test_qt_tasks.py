"""
Tests for the beat-scheduled daily QT task.
"""
from datetime import date
from unittest.mock import patch

import pytest

from celerybeat_schedule import beat_schedule
from models import DailyQT
from services.qt_generator import QTContentGenerator
from services.qt_notifier import QTNotifier
from tasks import celery_app
from tasks.qt_tasks import generate_daily_qt_task
from tests.qt_fakes import FakeOpenAI, PushRecorder, scripture_response


@pytest.fixture
def task_deps(db_session):
    def _patch(model_client):
        return (
            patch("tasks.qt_tasks.get_db_sync", return_value=db_session),
            patch("tasks.qt_tasks.QTContentGenerator", return_value=QTContentGenerator(client=model_client)),
            patch("tasks.qt_tasks.QTNotifier", return_value=QTNotifier(push_sender=PushRecorder())),
        )
    return _patch


def _run(patches, **kwargs):
    db_patch, gen_patch, notifier_patch = patches
    with db_patch, gen_patch, notifier_patch, \
            patch("services.daily_qt_pipeline.get_today_reading", return_value="시편 23:1-3"):
        return generate_daily_qt_task(**kwargs)


def test_task_is_registered_and_scheduled():
    assert "tasks.generate_daily_qt" in celery_app.tasks
    entry = beat_schedule["generate-daily-qt"]
    assert entry["task"] == "tasks.generate_daily_qt"
    assert entry["schedule"].hour == {20}
    assert entry["schedule"].minute == {0}


def test_success(db_session, fake_openai, task_deps):
    result = _run(task_deps(fake_openai), target_date="2024-06-01")

    assert result["status"] == "success"
    assert result["date"] == "2024-06-01"
    assert result["reference"] == "시편 23:1-3"
    assert db_session.query(DailyQT).filter(DailyQT.date == date(2024, 6, 1)).count() == 1


def test_skips_existing_day(db_session, task_deps):
    db_session.add(DailyQT(date=date(2024, 6, 1), reference="창세기 1", passage="본문"))
    db_session.commit()
    model = FakeOpenAI([])

    result = _run(task_deps(model), target_date="2024-06-01")

    assert result == {"status": "skipped", "reason": "already_exists", "date": "2024-06-01"}
    assert model.calls == []


def test_failure_is_reported_not_raised(db_session, task_deps):
    model = FakeOpenAI([scripture_response(), ConnectionError("connection reset")])

    result = _run(task_deps(model), target_date="2024-06-01")

    assert result["status"] == "error"
    assert "connection reset" in result["error"]
    assert db_session.query(DailyQT).count() == 0
