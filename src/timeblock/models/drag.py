import datetime as dt
from typing import Literal, Optional
from pydantic import BaseModel

from timeblock.models.event import Event


class PointerPosition(BaseModel):
    x: float
    y: float


class Viewport(BaseModel):
    """Size of the visible area the pointer coordinates are measured against"""
    width: float
    height: float


class DragSession(BaseModel):
    """State of an in-progress drag; absent whenever no drag is active"""
    event_snapshot: Event
    start: PointerPosition
    current: PointerPosition
    moved: bool = False
    started_at: float = 0.0

    @property
    def offset_y(self) -> float:
        return self.current.y - self.start.y


class DragFeedback(BaseModel):
    """What the view should do after a pointer move"""
    offset_y: float
    scroll_by: int = 0
    selected_date: dt.date
    day_shift: int = 0


class DragOutcome(BaseModel):
    """Result of releasing the pointer.

    kind is "tap" when the pointer never moved (the event should open),
    "moved" when the event was rescheduled.
    """
    kind: Literal['tap', 'moved']
    event: Event
    snapshot: Event
    message: Optional[str] = None
