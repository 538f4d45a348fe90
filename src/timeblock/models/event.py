import datetime as dt
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel

from timeblock.exceptions import InvalidEventTypeError
from timeblock.utils.time_utils import ClockCodec, default_codec


class Repeat(str, Enum):
    """Recurrence choice stored on an event; instances are not expanded"""
    NONE = 'Does not repeat'
    DAILY = 'Daily'
    WEEKLY = 'Weekly'
    MONTHLY = 'Monthly'
    YEARLY = 'Yearly'


class EventType(BaseModel):
    name: str
    color: str


EVENT_TYPES: List[EventType] = [
    EventType(name='Relax', color='bg-green-400'),
    EventType(name='School (Study)', color='bg-yellow-400'),
    EventType(name='School (Class)', color='bg-purple-300'),
    EventType(name='Gospel (Church)', color='bg-pink-400'),
    EventType(name='Gospel (Study)', color='bg-purple-500'),
    EventType(name='Gospel (Meeting)', color='bg-gray-300'),
    EventType(name='Work', color='bg-cyan-300'),
    EventType(name='Travel', color='bg-pink-300'),
    EventType(name='Meal', color='bg-orange-200'),
    EventType(name='Workout', color='bg-gray-400'),
    EventType(name='Other', color='bg-white'),
]


def get_event_type(name: str) -> EventType:
    """Look up an event type in the fixed palette"""
    for event_type in EVENT_TYPES:
        if event_type.name == name:
            return event_type
    raise InvalidEventTypeError(name)


class Event(BaseModel):
    """A scheduled calendar item.

    start_time/end_time are the source of truth; time and duration are caches
    kept in step by recompute_derived_fields.
    """
    id: str
    type: str
    color: str
    title: str
    notes: Optional[str] = None
    address: Optional[str] = None
    date: dt.date
    start_time: str
    end_time: str
    time: int = 0
    duration: float = 0
    repeat: Repeat = Repeat.NONE
    backup: bool = False
    created_at: dt.datetime
    updated_at: dt.datetime


class EventDraft(BaseModel):
    """Fields of the event form before they are saved onto an Event"""
    type: str = ''
    color: str = ''
    title: str = ''
    notes: str = ''
    date: dt.date
    start_time: str = '7:30 AM'
    end_time: str = '8:00 AM'
    repeat: Repeat = Repeat.NONE
    backup: bool = False
    address: str = ''


def recompute_derived_fields(event: Event, codec: Optional[ClockCodec] = None) -> Event:
    """Return a copy of the event with time and duration derived from its clock strings"""
    codec = codec or default_codec
    start_minutes = codec.parse_minutes(event.start_time)
    end_minutes = codec.parse_minutes(event.end_time)
    return event.model_copy(update={
        'time': codec.parse_hour(event.start_time),
        'duration': (end_minutes - start_minutes) / 60,
    })
