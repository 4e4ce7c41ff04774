"""
Reading Plan

Maps a calendar day to the scripture range read that day.

The plan walks the 1,189 chapters of the Protestant canon in order over a
365-day cycle. Day N (0-based day of year) reads chapters
[N * 1189 // 365, (N + 1) * 1189 // 365), i.e. three or four chapters a
day. Leap-year Dec 31 wraps back to the first day's reading.

"Today" is the calendar day at a fixed UTC offset (KST, UTC+9), matching
the key used for `daily_qt.date`.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

from core.config import settings

PLAN_DAYS = 365

# (Korean book name, chapter count), canonical order
BOOKS: List[Tuple[str, int]] = [
    ("창세기", 50), ("출애굽기", 40), ("레위기", 27), ("민수기", 36), ("신명기", 34),
    ("여호수아", 24), ("사사기", 21), ("룻기", 4), ("사무엘상", 31), ("사무엘하", 24),
    ("열왕기상", 22), ("열왕기하", 25), ("역대상", 29), ("역대하", 36), ("에스라", 10),
    ("느헤미야", 13), ("에스더", 10), ("욥기", 42), ("시편", 150), ("잠언", 31),
    ("전도서", 12), ("아가", 8), ("이사야", 66), ("예레미야", 52), ("예레미야애가", 5),
    ("에스겔", 48), ("다니엘", 12), ("호세아", 14), ("요엘", 3), ("아모스", 9),
    ("오바댜", 1), ("요나", 4), ("미가", 7), ("나훔", 3), ("하박국", 3),
    ("스바냐", 3), ("학개", 2), ("스가랴", 14), ("말라기", 4),
    ("마태복음", 28), ("마가복음", 16), ("누가복음", 24), ("요한복음", 21), ("사도행전", 28),
    ("로마서", 16), ("고린도전서", 16), ("고린도후서", 13), ("갈라디아서", 6), ("에베소서", 6),
    ("빌립보서", 4), ("골로새서", 4), ("데살로니가전서", 5), ("데살로니가후서", 3), ("디모데전서", 6),
    ("디모데후서", 4), ("디도서", 3), ("빌레몬서", 1), ("히브리서", 13), ("야고보서", 5),
    ("베드로전서", 5), ("베드로후서", 3), ("요한일서", 5), ("요한이서", 1), ("요한삼서", 1),
    ("유다서", 1), ("요한계시록", 22),
]

TOTAL_CHAPTERS = sum(count for _, count in BOOKS)


def today_kst(now: Optional[datetime] = None) -> date:
    """Calendar day at the configured fixed offset (default UTC+9)."""
    tz = timezone(timedelta(hours=settings.QT_UTC_OFFSET_HOURS))
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz).date()


def _locate(chapter_index: int) -> Tuple[str, int]:
    """0-based global chapter index -> (book, 1-based chapter)."""
    remaining = chapter_index
    for book, count in BOOKS:
        if remaining < count:
            return book, remaining + 1
        remaining -= count
    raise IndexError(f"chapter index out of range: {chapter_index}")


def chapters_for_day(day: date) -> List[Tuple[str, int]]:
    """All (book, chapter) pairs read on `day`, in order."""
    day_index = (day - date(day.year, 1, 1)).days % PLAN_DAYS
    start = day_index * TOTAL_CHAPTERS // PLAN_DAYS
    end = (day_index + 1) * TOTAL_CHAPTERS // PLAN_DAYS
    return [_locate(i) for i in range(start, end)]


def format_reference(chapters: List[Tuple[str, int]]) -> str:
    """
    Collapse consecutive chapters per book: "민수기 1-2", "시편 23",
    "창세기 50, 출애굽기 1-2".
    """
    segments: List[Tuple[str, int, int]] = []
    for book, chapter in chapters:
        if segments and segments[-1][0] == book and segments[-1][2] == chapter - 1:
            segments[-1] = (book, segments[-1][1], chapter)
        else:
            segments.append((book, chapter, chapter))

    parts = []
    for book, first, last in segments:
        parts.append(f"{book} {first}" if first == last else f"{book} {first}-{last}")
    return ", ".join(parts)


def get_today_reading(day: Optional[date] = None) -> str:
    """Reference string for `day` (defaults to today in KST)."""
    if day is None:
        day = today_kst()
    return format_reference(chapters_for_day(day))
