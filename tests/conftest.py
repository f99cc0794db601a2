"""Shared fixtures for freecal tests.

Provides iCalendar sample text and a helper to write .ics files into a
temporary directory:

    def test_something(write_ics):
        path = write_ics("meetings.ics", SOME_TEXT)
"""

from collections.abc import Callable
from pathlib import Path

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Sample Calendars
# ─────────────────────────────────────────────────────────────────────────────

MORNING_ICS = """\
BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//RDU Software//NONSGML HandCal//EN
BEGIN:VTIMEZONE
TZID:America/New_York
BEGIN:STANDARD
DTSTART:19981025T020000
TZOFFSETFROM:-0400
TZOFFSETTO:-0500
TZNAME:EST
END:STANDARD
END:VTIMEZONE
BEGIN:VEVENT
DTSTAMP:19980309T231000Z
UID:guid-1.example.com
SUMMARY:XYZ Project Review
DTSTART;TZID=America/New_York:20240101T083000
DTEND;TZID=America/New_York:20240101T093000
LOCATION:1CP Conference Room 4350
END:VEVENT
END:VCALENDAR
"""

AFTERNOON_ICS = """\
BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Nobugs Club//freecal 1.0.0//EN
BEGIN:VEVENT
SUMMARY:Lunch
DTSTART:20240101T120000
DTEND:20240101T130000
END:VEVENT
BEGIN:VEVENT
SUMMARY:Planning
DTSTART:20240101T140000
DTEND:20240101T150000
BEGIN:VALARM
ACTION:DISPLAY
TRIGGER:-PT15M
END:VALARM
END:VEVENT
END:VCALENDAR
"""

BROKEN_ICS = """\
BEGIN:VCALENDAR
VERSION:2.0
BEGIN:VEVENT
SUMMARY:No end
DTSTART:20240101T100000
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def morning_ics() -> str:
    return MORNING_ICS


@pytest.fixture
def afternoon_ics() -> str:
    return AFTERNOON_ICS


@pytest.fixture
def broken_ics() -> str:
    return BROKEN_ICS


@pytest.fixture
def write_ics(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write iCalendar text to a file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
