"""
Clock-string and header formatting helpers.

Clock strings ("7:30 AM") are the stored form of an event's start and end.
Parsing is permissive: anything that does not look like a clock string
degrades to 0 instead of raising, which callers rely on.
"""

import re
from datetime import date, datetime
from typing import List, Optional, Tuple, Union

from timeblock.exceptions import TimeParseError

TIME_PATTERN = re.compile(r'(\d+):(\d+)\s*(AM|PM)', re.IGNORECASE)

MONTH_ABBREVIATIONS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']
MONTH_NAMES = ['January', 'February', 'March', 'April', 'May', 'June', 'July',
               'August', 'September', 'October', 'November', 'December']

DateLike = Union[date, datetime]


class ClockCodec:
    """Converts between 12-hour clock strings and 24-hour hours/minutes"""

    def _match(self, text: Optional[str]) -> Optional[Tuple[int, int, str]]:
        match = TIME_PATTERN.search(text or '')
        if not match:
            return None
        return int(match.group(1)), int(match.group(2)), match.group(3).upper()

    @staticmethod
    def _to_24_hour(hour: int, period: str) -> int:
        if period == 'PM' and hour != 12:
            return hour + 12
        if period == 'AM' and hour == 12:
            return 0
        return hour

    def parse_hour(self, text: Optional[str]) -> int:
        """Parse a time string (e.g. "7:30 AM") to the hour in 24-hour format"""
        parts = self._match(text)
        if parts is None:
            return 0
        hour, _minutes, period = parts
        return self._to_24_hour(hour, period)

    def parse_minutes(self, text: Optional[str]) -> int:
        """Parse a time string to total minutes since midnight"""
        parts = self._match(text)
        if parts is None:
            return 0
        hour, minutes, period = parts
        return self._to_24_hour(hour, period) * 60 + minutes

    def offset_fraction(self, text: Optional[str]) -> float:
        """Fraction of the hour past the top of the hour, for sub-hour positioning"""
        parts = self._match(text)
        if parts is None:
            return 0
        return parts[1] / 60

    def format(self, hour: int, minutes: int = 0) -> str:
        """
        Format a 24-hour hour and minutes as "H:MM AM/PM".

        Hours outside 0-23 wrap onto the clock of the day they land on,
        so 24 formats as "12:00 AM" and 25 as "1:00 AM".
        """
        hour = int(hour) % 24
        period = 'PM' if hour >= 12 else 'AM'
        if hour == 0:
            display_hour = 12
        elif hour > 12:
            display_hour = hour - 12
        else:
            display_hour = hour
        return f"{display_hour}:{int(minutes):02d} {period}"


class StrictClockCodec(ClockCodec):
    """Codec that rejects malformed strings and out-of-range clock values"""

    def _match(self, text: Optional[str]) -> Optional[Tuple[int, int, str]]:
        text = text or ''
        parts = super()._match(text)
        if parts is None:
            raise TimeParseError(text)
        hour, minutes, _period = parts
        if not 1 <= hour <= 12:
            raise TimeParseError(text, f"hour {hour} is not on a 12-hour clock")
        if not 0 <= minutes <= 59:
            raise TimeParseError(text, f"minute {minutes} is out of range")
        return parts


default_codec = ClockCodec()


def parse_time_to_hour(time_str: Optional[str]) -> int:
    """Parse a time string to the hour in 24-hour format, 0 when it does not match"""
    return default_codec.parse_hour(time_str)


def parse_time_to_minutes(time_str: Optional[str]) -> int:
    """Parse a time string to minutes since midnight, 0 when it does not match"""
    return default_codec.parse_minutes(time_str)


def calculate_event_offset(start_time: Optional[str]) -> float:
    """Fraction of an hour (0-1) used to position an event inside its hour row"""
    return default_codec.offset_fraction(start_time)


def format_time_from_hour(hour: int, minutes: int = 0) -> str:
    """Format hour and minutes into "H:MM AM/PM" """
    return default_codec.format(hour, minutes)


def format_hour_label(hour: int) -> str:
    """Label for an hour row of the day grid, e.g. "7 AM" """
    return format_time_from_hour(hour).replace(':00', '')


def hour_labels() -> List[str]:
    return [format_hour_label(hour) for hour in range(24)]


def format_header_date(value: DateLike) -> str:
    """Format a date for the header, e.g. "Apr 2, 2026" """
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.day}, {value.year}"
