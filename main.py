#!/usr/bin/env python
'''
@File    :   main.py
@Time    :   2026/10/19 09:12:40
@Author  :   hongyu zhang
@Version :   1.0
@Desc    :   ICS Free Time Finder and Event Builder
'''
import argparse
import importlib
import importlib.util
import json
import logging
import os
import re
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple, Protocol

import dateutil.parser
import dateutil.tz
from icalendar import Calendar, Event, Timezone, TimezoneStandard
from icalendar.parser import Contentlines, Parameters


VERSION = '1.0.0'
PRODID = f'-//Nobugs Club//freecal {VERSION}//EN'

DAY_START = 0
DAY_END = 235959

CLASSIFICATIONS = ('PUBLIC', 'PRIVATE', 'CONFIDENTIAL')

TIME_OF_DAY_PATTERN = re.compile(r'^([0-9]{2})([0-9]{2})([0-9]{2})$')
DATE_PATTERN = re.compile(r'^[0-9]{8}$')

Interval = tuple[int, int]


class BaseHandler(Protocol):
    def __call__(self, calendar: Calendar) -> None: ...


class FreecalError(Exception):
    """Base class for errors raised while reading events or folding them."""


class MalformedRecord(FreecalError, ValueError):
    """A calendar source breaks the BEGIN/DTSTART/DTEND/END event structure."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class DegenerateInterval(FreecalError, ValueError):
    """An interval whose start is not strictly before its end."""

    def __init__(self, start: int, end: int):
        self.start = start
        self.end = end
        super().__init__(
            f"Interval {format_time_of_day(start)}-{format_time_of_day(end)} does not end after it starts"
        )


def format_time_of_day(value: int) -> str:
    return f'{value:06d}'


def parse_time_of_day(text: str) -> int:
    """Parse an HHMMSS string into its integer time-of-day value.

    Args:
        text: Six digits, hours 00-23, minutes and seconds 00-59

    Returns:
        Integer in the range [0, 235959]

    Raises:
        ValueError: If the text is not a valid time of day
    """
    match = TIME_OF_DAY_PATTERN.match(text)
    if not match:
        raise ValueError(f"Invalid time of day: {text}. Expected format: HHMMSS")

    hours, minutes, seconds = (int(group) for group in match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"Time of day out of range: {text}")

    return int(text)


def validate_date(text: str) -> str:
    """Check that text is a real calendar date written as YYYYMMDD."""
    if not DATE_PATTERN.match(text):
        raise ValueError(f"Invalid date: {text}. Expected format: YYYYMMDD")
    datetime.strptime(text, '%Y%m%d')
    return text


def to_datetime(day: str, time_of_day: int) -> datetime:
    return datetime.strptime(day + format_time_of_day(time_of_day), '%Y%m%d%H%M%S')


class EventRecord(NamedTuple):
    """A busy interval on one date, as read from a VEVENT."""

    date: str
    start_time: int
    end_time: int
    end_date: str | None = None
    tzid: str | None = None

    @property
    def interval(self) -> Interval:
        return (self.start_time, self.end_time)


class FreeSlot(NamedTuple):
    date: str
    start: int
    end: int


# =========================================================================
# Calendar text parsing
# =========================================================================

def iter_property_pairs(text: str, source: str | None = None) -> Iterator[tuple[str, str]]:
    """Split iCalendar text into (property, value) pairs.

    Folded lines are joined and every content line is split at its value
    separator. Property parameters stay attached to the name, e.g.
    ('DTSTART;TZID=America/New_York', '19980312T083000').

    Args:
        text: iCalendar text
        source: Name of the source, used in error messages

    Yields:
        (property, value) tuples in order of appearance

    Raises:
        MalformedRecord: If a content line cannot be split
    """
    try:
        lines = Contentlines.from_ical(text)
    except ValueError as e:
        raise MalformedRecord(str(e), source) from e

    for line in lines:
        if not line:
            continue
        try:
            name, params, value = line.parts()
        except ValueError as e:
            raise MalformedRecord(str(e), source) from e

        if params:
            name = f"{name};{params.to_ical().decode('utf-8')}"
        yield name, value


def split_date_time(value: str) -> tuple[str, int | None]:
    """Split a DATE-TIME value at its 'T' separator.

    Accepts 'YYYYMMDDTHHMMSS', the UTC form with a trailing 'Z' and
    date-only 'YYYYMMDD' values, for which the time is None.

    Raises:
        ValueError: If the date or the time is not valid
    """
    date_part, separator, time_part = value.strip().upper().partition('T')
    day = validate_date(date_part)
    if not separator:
        return day, None

    if time_part.endswith('Z'):
        time_part = time_part[:-1]
    return day, parse_time_of_day(time_part)


def _close_record(draft: dict[str, tuple[str, int | None, str | None]], source: str | None) -> EventRecord:
    missing = [prop for prop in ('DTSTART', 'DTEND') if prop not in draft]
    if missing:
        raise MalformedRecord(f"Event closed without {' and '.join(missing)}", source)

    start_day, start_time, tzid = draft['DTSTART']
    end_day, end_time, _ = draft['DTEND']

    # Date-only values mark an all-day event
    if start_time is None:
        start_time = DAY_START
    if end_time is None:
        end_time = DAY_END

    return EventRecord(
        date=start_day,
        start_time=start_time,
        end_time=end_time,
        end_date=end_day,
        tzid=tzid,
    )


def parse_events(pairs: Iterable[tuple[str, str]], source: str | None = None) -> list[EventRecord]:
    """Build event records from a sequence of (property, value) pairs.

    Only BEGIN, END, DTSTART and DTEND are interpreted; everything else is
    ignored. DTSTART and DTEND inside components other than VEVENT (e.g. the
    STANDARD block of a VTIMEZONE) are skipped.

    Args:
        pairs: (property, value) tuples, property names may carry parameters
        source: Name of the source, used in error messages

    Returns:
        Event records in order of appearance

    Raises:
        MalformedRecord: If the pairs do not describe well-formed events
    """
    events: list[EventRecord] = []
    components: list[str] = []
    current: dict[str, tuple[str, int | None, str | None]] | None = None

    for key, value in pairs:
        name, _, raw_params = key.partition(';')
        name = name.strip().upper()

        if name == 'BEGIN':
            component = value.strip().upper()
            if component == 'VEVENT':
                if current is not None:
                    raise MalformedRecord("BEGIN:VEVENT inside an event that was never closed", source)
                current = {}
            components.append(component)

        elif name == 'END':
            component = value.strip().upper()
            if not components or components[-1] != component:
                raise MalformedRecord(f"END:{component} does not close the open component", source)
            components.pop()
            if component == 'VEVENT':
                events.append(_close_record(current, source))
                logging.debug(f"Parsed event {events[-1]}")
                current = None

        elif name in ('DTSTART', 'DTEND'):
            if not components or components[-1] == 'VCALENDAR':
                raise MalformedRecord(f"{name} outside of an event", source)
            if components[-1] != 'VEVENT':
                continue

            try:
                day, time_of_day = split_date_time(value)
                params = Parameters.from_ical(raw_params) if raw_params else Parameters()
            except ValueError as e:
                raise MalformedRecord(f"Invalid {name} value '{value}': {e}", source) from e

            current[name] = (day, time_of_day, params.get('TZID'))

    if current is not None:
        raise MalformedRecord("Event was never closed", source)

    return events


def parse_calendar_text(text: str, source: str | None = None) -> list[EventRecord]:
    return parse_events(iter_property_pairs(text, source), source)


# =========================================================================
# Free time slots
# =========================================================================

def subtract_interval(free: Interval, busy: Interval) -> list[Interval]:
    """Remove a busy interval from one free interval.

    Boundary-equal values consume the boundary, so no zero-length
    remainder is ever produced.

    Returns:
        Zero, one or two free intervals, in ascending order
    """
    free_start, free_end = free
    start, end = busy

    # No overlap
    if end <= free_start or start >= free_end:
        return [free]

    #   |---------free---------|
    #         |--busy--|
    if free_start < start and end < free_end:
        return [(free_start, start), (end, free_end)]

    #      |----free----|
    #   |-------busy-------|
    if start <= free_start and end >= free_end:
        return []

    #        |-----free-----|
    #   |----busy----|
    if start <= free_start:
        return [(end, free_end)]

    #   |-----free-----|
    #           |----busy----|
    return [(free_start, start)]


class FreeTimeSlots:
    """Sorted, disjoint free intervals of one day.

    Starts out as the whole day, (000000, 235959), and shrinks as busy
    intervals are folded in.
    """

    def __init__(self, intervals: Iterable[Interval] | None = None):
        if intervals is None:
            self._intervals: list[Interval] = [(DAY_START, DAY_END)]
        else:
            self._intervals = sorted(tuple(interval) for interval in intervals)
            self.check_invariants()

    def __iter__(self) -> Iterator[Interval]:
        return iter(list(self._intervals))

    def __len__(self) -> int:
        return len(self._intervals)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FreeTimeSlots):
            return NotImplemented
        return self._intervals == other._intervals

    def __repr__(self) -> str:
        return f"FreeTimeSlots({self._intervals!r})"

    @property
    def intervals(self) -> tuple[Interval, ...]:
        return tuple(self._intervals)

    @property
    def is_empty(self) -> bool:
        return not self._intervals

    def check_invariants(self) -> None:
        """Raise ValueError unless the intervals are valid, in bounds, sorted and disjoint."""
        previous_end = None
        for start, end in self._intervals:
            if start >= end:
                raise ValueError(f"Zero or negative length free interval: ({start}, {end})")
            if start < DAY_START or end > DAY_END:
                raise ValueError(f"Free interval out of day bounds: ({start}, {end})")
            if previous_end is not None and start < previous_end:
                raise ValueError(f"Free intervals overlap or are out of order at {start}")
            previous_end = end

    def fold(self, busy: EventRecord | Interval) -> None:
        """Subtract one busy interval from the free intervals.

        Every free interval is checked against the busy interval and the
        resulting intervals replace the current ones in a single step.

        Args:
            busy: An event record or a (start, end) pair

        Raises:
            DegenerateInterval: If start is not before end; nothing changes
        """
        start, end = busy.interval if isinstance(busy, EventRecord) else busy
        if start >= end:
            raise DegenerateInterval(start, end)

        remaining: list[Interval] = []
        for free in self._intervals:
            remaining.extend(subtract_interval(free, (start, end)))
        self._intervals = remaining


def fold_events(slots: FreeTimeSlots, events: Iterable[EventRecord]) -> list[DegenerateInterval]:
    """Fold events into slots in order, skipping and collecting degenerate ones."""
    rejected: list[DegenerateInterval] = []
    for event in events:
        try:
            slots.fold(event)
        except DegenerateInterval as e:
            logging.warning(f"Rejected event on {event.date}: {e}")
            rejected.append(e)
    return rejected


def emit_free_slots(slots: FreeTimeSlots, day: str) -> Iterator[FreeSlot]:
    for start, end in slots:
        yield FreeSlot(day, start, end)


def build_availability_calendar(
    free_slots: Iterable[FreeSlot],
    tzid: str | None = None,
    day: str | None = None,
) -> Calendar:
    """Render free slots as a calendar with one transparent VEVENT per slot.

    Args:
        free_slots: Slots to render
        tzid: Optional time zone label, written as the TZID parameter and
              described by a VTIMEZONE
        day: Date the VTIMEZONE offset is taken at (default: first slot's date)

    Returns:
        Calendar object, empty of events for a fully booked day
    """
    free_slots = list(free_slots)
    parameters = {'TZID': tzid} if tzid else None

    calendar = Calendar()
    calendar.add('VERSION', '2.0')
    calendar.add('PRODID', PRODID)

    reference_day = day or (free_slots[0].date if free_slots else None)
    if tzid and reference_day:
        calendar.add_component(build_timezone(tzid, to_datetime(reference_day, DAY_START)))

    for slot in free_slots:
        event = Event()
        event.add('UID', f"free-{slot.date}T{format_time_of_day(slot.start)}@freecal")
        event.add('SUMMARY', 'Free')
        event.add('TRANSP', 'TRANSPARENT')
        event.add('DTSTART', to_datetime(slot.date, slot.start), parameters=parameters)
        event.add('DTEND', to_datetime(slot.date, slot.end), parameters=parameters)
        calendar.add_component(event)
    return calendar


class FreeTimeReport:
    """Outcome of one find-free-time session for a single day."""

    def __init__(self, day: str, tzid: str | None = None, slots: FreeTimeSlots | None = None):
        self.date = day
        self.tzid = tzid
        self.slots = slots if slots is not None else FreeTimeSlots()
        self.errors: list[FreecalError] = []

    @property
    def is_fully_booked(self) -> bool:
        return self.slots.is_empty

    def free_slots(self) -> Iterator[FreeSlot]:
        return emit_free_slots(self.slots, self.date)

    def to_calendar(self) -> Calendar:
        return build_availability_calendar(self.free_slots(), self.tzid, day=self.date)


def find_free_time(day: str, tzid: str | None, sources: Iterable[tuple[str, str]]) -> FreeTimeReport:
    """Compute the free time left on a day after importing events.

    Each source is parsed on its own. A malformed source is reported and its
    events are dropped; the remaining sources are still used. Events are then
    folded in the order they were read.

    Args:
        day: Date of the events, YYYYMMDD
        tzid: Time zone label, passed through to the output
        sources: (name, iCalendar text) tuples

    Returns:
        FreeTimeReport with the remaining slots and the collected errors
    """
    report = FreeTimeReport(day, tzid)
    events: list[EventRecord] = []

    for name, text in sources:
        try:
            parsed = parse_calendar_text(text, source=name)
        except MalformedRecord as e:
            logging.warning(f"Skipped source: {e}")
            report.errors.append(e)
            continue
        logging.info(f"Read {len(parsed)} events from {name}")
        events.extend(parsed)

    for event in events:
        if event.date != day:
            logging.warning(f"Event dated {event.date} is folded into {day}")

    report.errors.extend(fold_events(report.slots, events))
    logging.info(f"{len(report.slots)} free slots left on {day} after {len(events)} events")
    return report


# =========================================================================
# Event creation
# =========================================================================

def build_timezone(tzid: str, reference: datetime) -> Timezone:
    """Build a VTIMEZONE holding the offset the zone has at reference."""
    tz = dateutil.tz.gettz(tzid)
    if tz is None:
        raise ValueError(f"Unknown time zone: {tzid}")

    offset = tz.utcoffset(reference)

    standard = TimezoneStandard()
    standard.add('DTSTART', datetime(1970, 1, 1))
    standard.add('TZOFFSETFROM', offset)
    standard.add('TZOFFSETTO', offset)
    tzname = tz.tzname(reference)
    if tzname:
        standard.add('TZNAME', tzname)

    vtimezone = Timezone()
    vtimezone.add('TZID', tzid)
    vtimezone.add_component(standard)
    return vtimezone


class EventSpec(NamedTuple):
    """Fields of one event to write with the create command."""

    date: str
    start_time: int
    end_time: int
    end_date: str | None = None
    summary: str = ''
    location: str = ''
    classification: str = 'PUBLIC'
    priority: int = 0


def check_event_spec(spec: EventSpec) -> EventSpec:
    """Validate an event and fill in its defaults.

    Raises:
        DegenerateInterval: If the event does not end after it starts
        ValueError: If a field is invalid
    """
    end_date = spec.end_date or spec.date
    validate_date(spec.date)
    validate_date(end_date)
    if end_date < spec.date:
        raise ValueError(f"End date {end_date} is before start date {spec.date}")
    if end_date == spec.date and spec.start_time >= spec.end_time:
        raise DegenerateInterval(spec.start_time, spec.end_time)

    classification = spec.classification.upper()
    if classification not in CLASSIFICATIONS:
        raise ValueError(f"Invalid classification: {classification}. Choose from {', '.join(CLASSIFICATIONS)}")
    if not 0 <= spec.priority <= 9:
        raise ValueError(f"Invalid priority: {spec.priority}. Choose from 0-9")

    return spec._replace(end_date=end_date, classification=classification)


def add_event(calendar: Calendar, spec: EventSpec, tzid: str | None = None) -> Event:
    """Append one VEVENT to calendar; spec must already be checked."""
    parameters = {'TZID': tzid} if tzid else None

    event = Event()
    event.add('UID', f"{uuid.uuid4()}@freecal")
    event.add('DTSTAMP', datetime.now(timezone.utc))
    event.add('CLASS', spec.classification)
    event.add('LOCATION', spec.location)
    event.add('PRIORITY', spec.priority)
    event.add('SUMMARY', spec.summary)
    event.add('DTSTART', to_datetime(spec.date, spec.start_time), parameters=parameters)
    event.add('DTEND', to_datetime(spec.end_date, spec.end_time), parameters=parameters)
    calendar.add_component(event)
    return event


def build_event_calendar(events: Iterable[EventSpec], tzid: str | None = None) -> Calendar:
    """Create an iCalendar 2.0 calendar holding the given events.

    All events share the calendar's VERSION, PRODID and, when tzid is given,
    a single VTIMEZONE whose offset is taken at the first event's start.

    Args:
        events: Events to write, in order
        tzid: Time zone identifier; adds a VTIMEZONE and TZID parameters

    Returns:
        Calendar object

    Raises:
        DegenerateInterval: If an event does not end after it starts
        ValueError: If there are no events or a field is invalid
    """
    specs = [check_event_spec(spec) for spec in events]
    if not specs:
        raise ValueError("At least one event is required")

    calendar = Calendar()
    calendar.add('VERSION', '2.0')
    calendar.add('PRODID', PRODID)
    if tzid:
        calendar.add_component(build_timezone(tzid, to_datetime(specs[0].date, specs[0].start_time)))

    for spec in specs:
        add_event(calendar, spec, tzid)

    return calendar


EVENT_OPTION_KEYS = ('date', 'start', 'end', 'end-date', 'summary', 'location', 'class', 'priority')


def parse_event_option(items: list[str]) -> EventSpec:
    """Turn the KEY=VALUE items of one --event option into an EventSpec.

    Example:
        ['date=2024-01-01', 'start=090000', 'end=100000', 'summary=Team sync']

    Raises:
        ValueError: If a key is unknown or missing, or a value is invalid
    """
    fields: dict[str, str] = {}
    for item in items:
        key, separator, value = item.partition('=')
        key = key.strip().lower()
        if not separator or key not in EVENT_OPTION_KEYS:
            raise ValueError(f"Invalid event field: {item}. Use KEY=VALUE with KEY in {', '.join(EVENT_OPTION_KEYS)}")
        fields[key] = value

    missing = [key for key in ('date', 'start', 'end') if key not in fields]
    if missing:
        raise ValueError(f"Event is missing {', '.join(missing)}")

    try:
        priority = int(fields.get('priority', '0'))
    except ValueError:
        raise ValueError(f"Invalid priority: {fields['priority']}") from None

    return EventSpec(
        date=parse_day(fields['date']),
        start_time=parse_time_of_day(fields['start']),
        end_time=parse_time_of_day(fields['end']),
        end_date=parse_day(fields['end-date']) if fields.get('end-date') else None,
        summary=fields.get('summary', ''),
        location=fields.get('location', ''),
        classification=fields.get('class', 'PUBLIC'),
        priority=priority,
    )


# =========================================================================
# Sources and handlers
# =========================================================================

def _read_source(path: Path) -> Iterator[tuple[str, str]]:
    try:
        with path.open('r', encoding='utf-8') as f:
            content = f.read().strip()
    except (OSError, UnicodeDecodeError) as e:
        logging.warning(f"Error reading file {path}: {e}")
        return

    if content:
        yield str(path), content
    else:
        logging.warning(f"No content in file {path}, skipped.")


def load_sources(input_paths: list[str]) -> Iterator[tuple[str, str]]:
    """Read ICS sources from files, directories, or stdin.

    Args:
        input_paths: List of file paths or directories containing .ics files.
                     If empty, reads from stdin.

    Yields:
        (source name, iCalendar text) tuples
    """
    if not input_paths:
        try:
            content = sys.stdin.read().strip()
        except (OSError, UnicodeDecodeError) as e:
            logging.warning(f"Error reading stdin: {e}")
            content = ''
        if content:
            yield '<stdin>', content
        else:
            logging.warning("No content read from stdin.")

    for path_str in input_paths:
        path = Path(path_str)

        if not path.exists():
            logging.warning(f"Path '{path}' does not exist, skipped.")
            continue

        if path.is_file():
            yield from _read_source(path)

        elif path.is_dir():
            for ics_file in sorted(path.rglob('*.ics')):
                if ics_file.is_file():
                    yield from _read_source(ics_file)


def load_handler(handler_name: str, handler_params: dict | None = None) -> BaseHandler:
    """Load and instantiate an output handler module.

    Args:
        handler_name: Module name or path to handler script
        handler_params: Optional parameters to pass to handler constructor

    Returns:
        Callable handler instance
    """
    handler_file = Path(handler_name)
    if handler_file.is_file() and handler_file.suffix == '.py':
        spec = importlib.util.spec_from_file_location(handler_file.stem, handler_name)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load handler from {handler_name}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    else:
        try:
            module = importlib.import_module(f'handlers.{handler_name}')
        except ImportError:
            module = importlib.import_module(handler_name)

    handler_class = getattr(module, 'Handler')

    if handler_params:
        return handler_class(**handler_params)
    else:
        return handler_class()


def parse_day(text: str) -> str:
    """Normalize a user supplied date (e.g. '2024-01-01', '20240101') to YYYYMMDD."""
    return dateutil.parser.parse(text).strftime('%Y%m%d')


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)

    common.add_argument(
        '-z', '--timezone',
        type=str,
        help='time zone identifier of the events (e.g., "America/New_York"); omitted means floating local times'
    )

    common.add_argument(
        '-m', '--module',
        type=str,
        help='output handler module name (default: console)'
    )

    common.add_argument(
        '-p', '--params',
        type=str,
        help='handler initialization parameters in JSON format'
    )

    parser = argparse.ArgumentParser(
        description='ICS Free Time Finder and Event Builder'
    )

    parser.add_argument(
        '-l', '--log-level',
        type=str.upper,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='INFO',
        help='set the logging level (default: INFO)'
    )

    parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'freecal {VERSION}',
        help='show program version and exit'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    free_parser = subparsers.add_parser(
        'free',
        parents=[common],
        help='import events and list the free time left on a day'
    )

    free_parser.add_argument(
        'path',
        nargs='*',
        help='path to .ics file or directory containing .ics files; if omitted, reads from stdin'
    )

    free_parser.add_argument(
        '-d', '--date',
        type=str,
        help='date of the events (e.g., "20240101" or "2024-01-01"); defaults to today'
    )

    create_parser = subparsers.add_parser(
        'create',
        parents=[common],
        help='create an iCalendar file holding one or more events'
    )

    create_parser.add_argument('-d', '--date', type=str, help='start date of the first event')
    create_parser.add_argument('-s', '--start', type=str, help='start time of the first event, HHMMSS (24-hour)')
    create_parser.add_argument('-e', '--end', type=str, help='end time of the first event, HHMMSS (24-hour)')
    create_parser.add_argument('--end-date', type=str, help='end date of the first event (default: its start date)')
    create_parser.add_argument('--summary', type=str, default='', help='event summary')
    create_parser.add_argument('--location', type=str, default='', help='event location')
    create_parser.add_argument(
        '--class',
        dest='classification',
        type=str.upper,
        choices=list(CLASSIFICATIONS),
        default='PUBLIC',
        help='event classification (default: PUBLIC)'
    )
    create_parser.add_argument(
        '--priority',
        type=int,
        choices=range(10),
        default=0,
        metavar='{0-9}',
        help='1 highest, 9 lowest, 0 undefined (default: 0)'
    )
    create_parser.add_argument(
        '--event',
        dest='events',
        action='append',
        nargs='+',
        metavar='KEY=VALUE',
        default=[],
        help='add another event; repeatable. Keys: date, start, end (required), end-date, summary, location, class, priority'
    )

    return parser


def main(argv: list[str] | None = None):
    """Main entry point for the free time finder and event builder."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if args.params:
        try:
            params = json.loads(args.params)
        except json.JSONDecodeError as e:
            logging.error(f"Invalid JSON format for handler parameters: {e}")
            sys.exit(1)
        if not isinstance(params, dict):
            logging.error("Params must be a JSON object (dict)")
            sys.exit(1)
    else:
        params = None

    try:
        handler = load_handler(args.module or 'console', params)
    except Exception as e:
        logging.error(f"Error loading handler module: {e}")
        sys.exit(1)

    if args.timezone and dateutil.tz.gettz(args.timezone) is None:
        logging.error(f"Unknown time zone: {args.timezone}")
        sys.exit(1)

    if args.command == 'create':
        first_event = (args.date, args.start, args.end)
        if any(first_event) and not all(first_event):
            logging.error("--date, --start and --end must be given together")
            sys.exit(1)
        if not any(first_event) and not args.events:
            logging.error("No event given; use --date/--start/--end or --event")
            sys.exit(1)

        try:
            specs: list[EventSpec] = []
            if all(first_event):
                specs.append(EventSpec(
                    date=parse_day(args.date),
                    start_time=parse_time_of_day(args.start),
                    end_time=parse_time_of_day(args.end),
                    end_date=parse_day(args.end_date) if args.end_date else None,
                    summary=args.summary,
                    location=args.location,
                    classification=args.classification,
                    priority=args.priority,
                ))
            specs.extend(parse_event_option(items) for items in args.events)

            calendar = build_event_calendar(specs, tzid=args.timezone)
        except (ValueError, OverflowError) as e:
            logging.error(f"Error creating event: {e}")
            sys.exit(1)

        logging.info(f"Created calendar with {len(specs)} events")

        handler(calendar)
        return

    if args.date:
        try:
            day = parse_day(args.date)
        except (ValueError, OverflowError) as e:
            logging.error(f"Error parsing date: {e}")
            sys.exit(1)
    else:
        day = datetime.now(dateutil.tz.tzlocal()).strftime('%Y%m%d')

    if not args.path and sys.stdin.isatty():
        parser.print_help()
        sys.exit(1)

    report = find_free_time(day, args.timezone, load_sources(args.path))

    if report.errors:
        logging.warning(f"{len(report.errors)} sources or events were skipped")
    if report.is_fully_booked:
        logging.info(f"No free time on {day}")

    handler(report.to_calendar())
    return


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(file=sys.stderr)
        sys.exit(130)
    except BrokenPipeError:
        sys.stderr = open(os.devnull, 'w')
        sys.exit(1)
