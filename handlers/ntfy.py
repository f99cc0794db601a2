"""
Ntfy handler
"""
import logging
from datetime import datetime

import requests
from icalendar import Calendar, Component


class Handler:
    """Handler class for sending free time slots to an Ntfy webhook"""

    def __init__(
        self,
        url: str = "https://ntfy.sh/calendar",
        headers: dict | None = None,
        priority: int = 3,
        timeout: int = 10,
    ):
        """
        Initialize Ntfy webhook handler

        Args:
            url: Ntfy webhook URL
            headers: Custom headers for the request
            priority: Ntfy message priority, 1 (min) to 5 (max)
            timeout: Request timeout in seconds
        """
        self.url = url
        self.headers = headers or {}
        self.priority = max(1, min(5, int(priority)))
        self.timeout = timeout

    def __call__(self, calendar: Calendar) -> None:
        """
        Send the free time slots to the Ntfy webhook as one message

        Args:
            calendar: icalendar Calendar object
        """
        slots: list[tuple[datetime, datetime]] = []

        for component in calendar.walk('VEVENT'):
            component: Component
            dtstart = component.get('DTSTART')
            dtend = component.get('DTEND')
            if dtstart is None or dtend is None:
                continue
            slots.append((dtstart.dt, dtend.dt))

        self._send_slots(slots)

    def _build_message(self, slots: list[tuple[datetime, datetime]]) -> str:
        if not slots:
            return "No free time. The day is fully booked."

        lines = []
        for start, end in slots:
            lines.append(f"🟢 {start:%Y-%m-%d} {start:%H:%M:%S} – {end:%H:%M:%S}")
        return "\n".join(lines)

    def _send_slots(self, slots: list[tuple[datetime, datetime]]) -> None:
        """
        Send the slot list to the webhook

        Args:
            slots: (start, end) pairs of free time
        """
        message = self._build_message(slots)

        headers = {
            "Content-Type": "text/plain; charset=utf-8",
            "Title": f"Free Time ({len(slots)} slots)",
            "Tags": "calendar",
            "Priority": str(self.priority),
        }
        headers.update(self.headers)

        try:
            response = requests.post(
                self.url,
                data=message.encode('utf-8'),
                headers=headers,
                timeout=self.timeout
            )

            if response.status_code == 200:
                logging.info(f"✅ Successfully sent {len(slots)} free slots to {self.url}")
            else:
                logging.error(f"❌ Failed to send: HTTP {response.status_code}, {response.text}")

        except requests.exceptions.RequestException as e:
            logging.error(f"❌ Error sending to webhook: {e}")
