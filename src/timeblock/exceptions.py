class TimeblockError(Exception):
    """Base class for timeblock errors"""


class TimeParseError(TimeblockError, ValueError):
    """Raised by the strict clock codec for text it refuses to parse"""

    def __init__(self, text: str, reason: str = "not a clock string"):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse {text!r}: {reason}")


class EventNotFoundError(TimeblockError, KeyError):
    """Raised when an event id is not in the calendar"""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Event not found: {event_id}")

    def __str__(self):
        return self.args[0]


class InvalidEventTypeError(TimeblockError, ValueError):
    """Raised for event type names outside the fixed palette"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown event type: {name}")


class IndicatorNotFoundError(TimeblockError, KeyError):
    """Raised when an indicator id is not on the home screen"""

    def __init__(self, indicator_id: str):
        self.indicator_id = indicator_id
        super().__init__(f"Indicator not found: {indicator_id}")

    def __str__(self):
        return self.args[0]
