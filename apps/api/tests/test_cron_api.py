"""
Tests for GET /api/cron/daily-qt: authorization and the run outcomes.
"""
from datetime import date
from unittest.mock import patch

import pytest

from core.config import settings
from models import DailyQT, Profile
from services.qt_generator import QTContentGenerator, get_qt_generator
from tests.qt_fakes import FakeOpenAI, devotional_response, scripture_response

URL = "/api/cron/daily-qt"
DAY = date(2024, 6, 1)
REFERENCE = "시편 23:1-3"


@pytest.fixture
def fixed_day():
    with patch("services.daily_qt_pipeline.today_kst", return_value=DAY), \
            patch("services.daily_qt_pipeline.get_today_reading", return_value=REFERENCE):
        yield DAY


class TestAuthorization:

    def test_missing_header_with_secret_set(self, client, fake_openai, monkeypatch):
        monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")

        response = client.get(URL)

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert fake_openai.calls == []

    def test_wrong_bearer(self, client, fake_openai, monkeypatch):
        monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")

        response = client.get(URL, headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert fake_openai.calls == []

    def test_secret_without_bearer_prefix(self, client, monkeypatch):
        monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")

        response = client.get(URL, headers={"Authorization": "s3cret"})

        assert response.status_code == 401

    def test_correct_bearer(self, client, fixed_day, monkeypatch):
        monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")

        response = client.get(URL, headers={"Authorization": "Bearer s3cret"})

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_unset_secret_allows_call(self, client, fixed_day):
        response = client.get(URL)

        assert response.status_code == 200

    def test_unset_secret_rejected_when_required(self, client, fake_openai, monkeypatch):
        monkeypatch.setattr(settings, "CRON_REQUIRE_SECRET", True)

        response = client.get(URL)

        assert response.status_code == 401
        assert fake_openai.calls == []


class TestRun:

    def test_creates_todays_qt(self, client, db_session, fixed_day):
        response = client.get(URL)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "date": "2024-06-01",
            "reference": REFERENCE,
            "message": "오늘의 큐티가 자동 생성되었습니다! 🐑",
        }
        row = db_session.query(DailyQT).one()
        assert row.date == DAY
        assert row.reference == REFERENCE

    def test_existing_day(self, client, db_session, fake_openai, fixed_day):
        db_session.add(DailyQT(date=DAY, reference="창세기 1", passage="본문"))
        db_session.commit()

        response = client.get(URL)

        assert response.status_code == 200
        assert response.json() == {"message": "오늘 큐티가 이미 존재합니다.", "date": "2024-06-01"}
        assert fake_openai.calls == []

    def test_second_call_same_day_is_no_op(self, client, db_session, fake_openai, fixed_day):
        assert client.get(URL).json()["success"] is True
        assert client.get(URL).json()["message"] == "오늘 큐티가 이미 존재합니다."
        assert len(fake_openai.calls) == 2
        assert db_session.query(DailyQT).count() == 1

    def test_model_failure_returns_500_and_retry_succeeds(self, client, db_session, fixed_day):
        from main import app

        failing = FakeOpenAI([scripture_response(), ConnectionError("connection reset")])
        app.dependency_overrides[get_qt_generator] = lambda: QTContentGenerator(client=failing)

        response = client.get(URL)

        assert response.status_code == 500
        assert "connection reset" in response.json()["error"]
        assert db_session.query(DailyQT).count() == 0

        retry = FakeOpenAI([scripture_response(), devotional_response()])
        app.dependency_overrides[get_qt_generator] = lambda: QTContentGenerator(client=retry)

        response = client.get(URL)

        assert response.status_code == 200
        assert response.json()["reference"] == REFERENCE
        assert db_session.query(DailyQT).count() == 1

    def test_missing_api_key_is_500(self, client, db_session, fixed_day):
        from main import app

        app.dependency_overrides[get_qt_generator] = lambda: QTContentGenerator()

        response = client.get(URL)

        assert response.status_code == 500
        assert "OPENAI_API_KEY" in response.json()["error"]

    def test_fanout_failure_does_not_change_response(self, client, db_session, fixed_day, push_recorder):
        db_session.add(Profile(name="성도"))
        db_session.commit()
        push_recorder.fail_with = RuntimeError("push down")

        with patch("services.qt_notifier.QTNotifier._insert_feed", side_effect=RuntimeError("feed down")):
            response = client.get(URL)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert db_session.query(DailyQT).count() == 1
