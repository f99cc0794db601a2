"""
File output handler
"""
import logging
from pathlib import Path

from icalendar import Calendar


class Handler:
    """File writer handler class"""

    def __init__(self, output_file: str = 'event.ics', overwrite: bool = True):
        """
        Initialize file output handler

        Args:
            output_file: Output file path, parent directories are created
            overwrite: Replace an existing file; if False, an existing file is left alone
        """
        self.output_file = Path(output_file)
        self.overwrite = overwrite

    def __call__(self, calendar: Calendar) -> None:
        """
        Write ICS content to file

        Args:
            calendar: icalendar Calendar object
        """
        if self.output_file.exists() and not self.overwrite:
            logging.error(f"File already exists, not overwritten: {self.output_file}")
            return

        try:
            self.output_file.parent.mkdir(parents=True, exist_ok=True)
            self.output_file.write_bytes(calendar.to_ical())
            logging.info(f"ICS content written to file: {self.output_file}")

        except OSError as e:
            logging.error(f"Failed to write file: {e}")
