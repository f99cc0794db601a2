"""
Tests for emitting free time and for whole find-free-time sessions.
"""

from datetime import datetime, timedelta

from icalendar import Calendar

from main import (
    DegenerateInterval,
    FreeSlot,
    FreeTimeReport,
    FreeTimeSlots,
    MalformedRecord,
    build_availability_calendar,
    emit_free_slots,
    find_free_time,
    parse_calendar_text,
)

# ============================================================
# Emitter Tests
# ============================================================


class TestEmitFreeSlots:
    """Test turning free time slots into (date, start, end) triples."""

    def test_emits_in_start_order(self):
        slots = FreeTimeSlots([(150000, 235959), (0, 90000), (100000, 140000)])
        assert list(emit_free_slots(slots, "20240101")) == [
            FreeSlot("20240101", 0, 90000),
            FreeSlot("20240101", 100000, 140000),
            FreeSlot("20240101", 150000, 235959),
        ]

    def test_fully_booked_day_emits_nothing(self):
        assert list(emit_free_slots(FreeTimeSlots([]), "20240101")) == []

    def test_emission_does_not_change_slots(self):
        slots = FreeTimeSlots()
        list(emit_free_slots(slots, "20240101"))
        assert list(emit_free_slots(slots, "20240101")) == [FreeSlot("20240101", 0, 235959)]


class TestBuildAvailabilityCalendar:
    """Test rendering free slots as a calendar."""

    def test_one_event_per_slot(self):
        calendar = build_availability_calendar([
            FreeSlot("20240101", 0, 83000),
            FreeSlot("20240101", 93000, 235959),
        ])
        events = calendar.walk("VEVENT")

        assert calendar["VERSION"] == "2.0"
        assert len(events) == 2
        assert events[0]["SUMMARY"] == "Free"
        assert events[0]["TRANSP"] == "TRANSPARENT"
        assert events[0]["DTSTART"].dt == datetime(2024, 1, 1, 0, 0, 0)
        assert events[0]["DTEND"].dt == datetime(2024, 1, 1, 8, 30, 0)
        assert events[1]["DTEND"].dt == datetime(2024, 1, 1, 23, 59, 59)

    def test_uids_are_stable(self):
        first = build_availability_calendar([FreeSlot("20240101", 93000, 235959)])
        second = build_availability_calendar([FreeSlot("20240101", 93000, 235959)])
        assert first.walk("VEVENT")[0]["UID"] == second.walk("VEVENT")[0]["UID"]

    def test_tzid_parameter(self):
        calendar = build_availability_calendar([FreeSlot("20240101", 0, 83000)], tzid="America/New_York")
        text = calendar.to_ical().decode("utf-8")

        assert "DTSTART;TZID=America/New_York:20240101T000000" in text
        assert "DTEND;TZID=America/New_York:20240101T083000" in text

    def test_timezone_block(self):
        calendar = build_availability_calendar([FreeSlot("20240115", 0, 83000)], tzid="America/New_York")
        timezones = calendar.walk("VTIMEZONE")

        assert len(timezones) == 1
        assert timezones[0]["TZID"] == "America/New_York"
        assert timezones[0].walk("STANDARD")[0]["TZOFFSETTO"].td == timedelta(hours=-5)

    def test_no_timezone_block_without_tzid(self):
        calendar = build_availability_calendar([FreeSlot("20240115", 0, 83000)])
        assert calendar.walk("VTIMEZONE") == []

    def test_timezone_block_on_fully_booked_day(self):
        calendar = build_availability_calendar([], tzid="Europe/Paris", day="20240701")

        assert calendar.walk("VEVENT") == []
        standard = calendar.walk("VTIMEZONE")[0].walk("STANDARD")[0]
        assert standard["TZOFFSETTO"].td == timedelta(hours=2)

    def test_empty_calendar(self):
        calendar = build_availability_calendar([])
        assert calendar.walk("VEVENT") == []

    def test_output_can_be_read_back(self):
        slots = [FreeSlot("20240101", 0, 83000), FreeSlot("20240101", 93000, 235959)]
        text = build_availability_calendar(slots, tzid="Europe/Paris").to_ical().decode("utf-8")

        events = parse_calendar_text(text)

        assert [(event.date, event.start_time, event.end_time) for event in events] == [
            tuple(slot) for slot in slots
        ]
        assert all(event.tzid == "Europe/Paris" for event in events)


# ============================================================
# Session Tests
# ============================================================


class TestFindFreeTime:
    """Test complete sessions over several sources."""

    def test_single_source(self, morning_ics):
        report = find_free_time("20240101", "America/New_York", [("morning.ics", morning_ics)])

        assert report.errors == []
        assert report.slots.intervals == ((0, 83000), (93000, 235959))
        assert not report.is_fully_booked

    def test_sources_are_concatenated(self, morning_ics, afternoon_ics):
        report = find_free_time(
            "20240101",
            None,
            [("morning.ics", morning_ics), ("afternoon.ics", afternoon_ics)],
        )

        assert list(report.free_slots()) == [
            FreeSlot("20240101", 0, 83000),
            FreeSlot("20240101", 93000, 120000),
            FreeSlot("20240101", 130000, 140000),
            FreeSlot("20240101", 150000, 235959),
        ]

    def test_malformed_source_does_not_stop_others(self, morning_ics, broken_ics):
        report = find_free_time(
            "20240101",
            None,
            [("broken.ics", broken_ics), ("morning.ics", morning_ics)],
        )

        assert len(report.errors) == 1
        assert isinstance(report.errors[0], MalformedRecord)
        assert report.errors[0].source == "broken.ics"
        assert report.slots.intervals == ((0, 83000), (93000, 235959))

    def test_degenerate_event_is_reported(self):
        text = (
            "BEGIN:VEVENT\nDTSTART:20240101T100000\nDTEND:20240101T100000\nEND:VEVENT\n"
            "BEGIN:VEVENT\nDTSTART:20240101T110000\nDTEND:20240101T120000\nEND:VEVENT\n"
        )
        report = find_free_time("20240101", None, [("events.ics", text)])

        assert len(report.errors) == 1
        assert isinstance(report.errors[0], DegenerateInterval)
        assert report.slots.intervals == ((0, 110000), (120000, 235959))

    def test_fully_booked_day(self):
        text = "BEGIN:VEVENT\nDTSTART;VALUE=DATE:20240101\nDTEND;VALUE=DATE:20240102\nEND:VEVENT\n"
        report = find_free_time("20240101", None, [("holiday.ics", text)])

        assert report.errors == []
        assert report.is_fully_booked
        assert list(report.free_slots()) == []
        assert report.to_calendar().walk("VEVENT") == []

    def test_no_sources(self):
        report = find_free_time("20240101", None, [])
        assert report.slots == FreeTimeSlots()

    def test_report_calendar(self, morning_ics):
        report = find_free_time("20240101", "America/New_York", [("morning.ics", morning_ics)])
        calendar = Calendar.from_ical(report.to_calendar().to_ical())
        assert len(calendar.walk("VEVENT")) == 2
        assert calendar.walk("VTIMEZONE")[0]["TZID"] == "America/New_York"


class TestFreeTimeReport:
    """Test the report object."""

    def test_defaults_to_whole_day(self):
        report = FreeTimeReport("20240101")
        assert report.slots == FreeTimeSlots()
        assert report.tzid is None
        assert report.errors == []

    def test_keeps_empty_slots(self):
        report = FreeTimeReport("20240101", slots=FreeTimeSlots([]))
        assert report.is_fully_booked
