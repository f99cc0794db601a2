from datetime import datetime

from icalendar import Calendar


def _format_time(value: object) -> str:
    if isinstance(value, datetime):
        return value.strftime('%H:%M:%S')
    return 'N/A'


class Handler:
    """Handler class for a readable listing of free time slots"""

    def __call__(self, calendar: Calendar) -> None:
        print(f"\n{'='*80}")
        print(f"🕒  FREE TIME")
        print(f"{'='*80}\n")

        count = 0
        current_day = None
        for component in calendar.walk('VEVENT'):
            dtstart = component.get('DTSTART')
            dtend = component.get('DTEND')
            start = dtstart.dt if dtstart is not None else None
            end = dtend.dt if dtend is not None else None

            day = start.strftime('%Y-%m-%d') if isinstance(start, datetime) else 'Unknown date'
            if day != current_day:
                tzid = dtstart.params.get('TZID') if dtstart is not None else None
                print(f"📅  {day}" + (f"  ({tzid})" if tzid else ""))
                print(f"{'─' * 80}")
                current_day = day

            count += 1
            summary = component.get('SUMMARY', 'Free')
            print(f"  [{count:02d}] {_format_time(start)} – {_format_time(end)}  {summary}")

        print(flush=True)

        if count == 0:
            print("No free time. The day is fully booked.", flush=True)
