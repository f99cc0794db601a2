"""
ICS format output handler
"""
from icalendar import Calendar


class Handler:
    """Console output handler class"""

    def __init__(self, line_endings: str = 'crlf'):
        """
        Initialize console output handler

        Args:
            line_endings: 'crlf' (default, as RFC 5545 requires) or 'lf'
        """
        if line_endings not in ('crlf', 'lf'):
            raise ValueError(f"Unsupported line endings: {line_endings}")
        self.line_endings = line_endings

    def __call__(self, calendar: Calendar) -> None:
        """
        Output ICS content to console

        Args:
            calendar: icalendar Calendar object
        """
        content = calendar.to_ical().decode('utf-8')
        if self.line_endings == 'lf':
            content = content.replace('\r\n', '\n')
        print(content, flush=True, end='')
