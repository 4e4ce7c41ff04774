"""
Tests for the in-app notification feed endpoints.
"""
import uuid
from datetime import datetime, timedelta, timezone

from models import Notification

URL = "/api/notifications"


def _notify(db, user_id, count, start=None):
    start = start or datetime(2024, 6, 1, tzinfo=timezone.utc)
    rows = [
        Notification(
            user_id=user_id,
            type="daily_qt",
            actor_name=f"2024-06-01 시편 {i}",
            created_at=start + timedelta(minutes=i),
        )
        for i in range(count)
    ]
    db.add_all(rows)
    db.commit()
    return rows


def test_requires_user_id(client):
    response = client.get(URL)

    assert response.status_code == 400
    assert response.json() == {"error": "User ID is required"}


def test_newest_first_limited_to_20(client, db_session):
    user_id = uuid.uuid4()
    _notify(db_session, user_id, 25)
    _notify(db_session, uuid.uuid4(), 3)

    response = client.get(URL, params={"user_id": str(user_id)})

    assert response.status_code == 200
    feed = response.json()
    assert len(feed) == 20
    assert feed[0]["actor_name"] == "2024-06-01 시편 24"
    assert feed[-1]["actor_name"] == "2024-06-01 시편 5"
    assert all(item["user_id"] == str(user_id) for item in feed)
    assert all(item["is_read"] is False for item in feed)


def test_mark_read(client, db_session):
    row = _notify(db_session, uuid.uuid4(), 1)[0]

    response = client.patch(URL, json={"id": str(row.id)})

    assert response.status_code == 200
    assert response.json() == {"success": True}
    db_session.refresh(row)
    assert row.is_read is True


def test_mark_read_requires_id(client):
    response = client.patch(URL, json={})

    assert response.status_code == 400
    assert response.json() == {"error": "ID is required"}


def test_mark_read_unknown_id(client):
    response = client.patch(URL, json={"id": str(uuid.uuid4())})

    assert response.status_code == 404
    assert "not found" in response.json()["error"]
