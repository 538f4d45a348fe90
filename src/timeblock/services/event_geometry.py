from typing import Optional
from pydantic import BaseModel

from timeblock.models.event import Event
from timeblock.utils.time_utils import ClockCodec, default_codec

# Layout unit shared with the drag engine
PIXELS_PER_HOUR = 64
# Half an hour; events never render shorter than this
MIN_EVENT_HEIGHT_PX = 32


class EventLayout(BaseModel):
    event_id: str
    top_px: float
    height_px: float


def calculate_event_duration(start_time: str, end_time: str, codec: Optional[ClockCodec] = None) -> float:
    """
    Duration in hours between two clock strings.

    Not wrapped across midnight: 11:00 PM to 1:00 AM is -22.
    """
    codec = codec or default_codec
    return (codec.parse_minutes(end_time) - codec.parse_minutes(start_time)) / 60


def top_position_px(event: Event, codec: Optional[ClockCodec] = None) -> float:
    codec = codec or default_codec
    return event.time * PIXELS_PER_HOUR + codec.offset_fraction(event.start_time) * PIXELS_PER_HOUR


def height_px(event: Event) -> float:
    return max(event.duration * PIXELS_PER_HOUR, MIN_EVENT_HEIGHT_PX)


def layout_event(event: Event, drag_offset_y: float = 0, codec: Optional[ClockCodec] = None) -> EventLayout:
    """Pixel box of an event in the day column; drag_offset_y is a render-only adjustment"""
    return EventLayout(
        event_id=event.id,
        top_px=top_position_px(event, codec) + drag_offset_y,
        height_px=height_px(event),
    )
