"""
Celery Beat Schedule Configuration

Defines periodic tasks that run on a schedule.
"""

from celery.schedules import crontab

# Schedule configuration
beat_schedule = {
    # Daily QT - 20:00 UTC is 05:00 KST, ahead of morning devotions.
    # Safe to run more than once a day: an existing row short-circuits.
    'generate-daily-qt': {
        'task': 'tasks.generate_daily_qt',
        'schedule': crontab(hour=20, minute=0),
    },
}
