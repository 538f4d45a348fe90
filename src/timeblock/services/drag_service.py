import math
import time
from datetime import date, datetime, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo
import logging

from ..config.manager import DEFAULT_TIMEZONE
from ..models.drag import DragFeedback, DragOutcome, DragSession, PointerPosition, Viewport
from ..models.event import Event, recompute_derived_fields
from ..utils.time_utils import ClockCodec, default_codec, format_header_date
from .event_geometry import PIXELS_PER_HOUR

logger = logging.getLogger(__name__)

SNAP_MINUTES = 15
# 11:45 PM, the last 15-minute slot of the day
LATEST_START_MINUTES = 23 * 60 + 45
LATEST_END_MINUTES = 23 * 60 + 59
AUTOSCROLL_EDGE_PX = 100
AUTOSCROLL_STEP_PX = 10
# About an inch from the side of the screen
DAY_SWITCH_EDGE_PX = 96


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def snap_minutes(total_minutes: float) -> int:
    """Round minutes since midnight to the nearest 15-minute grid line"""
    return _round_half_up(total_minutes / SNAP_MINUTES) * SNAP_MINUTES


def clamp_start_minutes(minutes: int) -> int:
    return max(0, min(LATEST_START_MINUTES, minutes))


class DragRescheduleEngine:
    """Tracks a pointer drag on an event and reschedules the event on release.

    Only one drag can be active. Moves and releases without an active drag
    are ignored, as is a second pointer-down while a drag is in progress.
    """

    def __init__(self, codec: Optional[ClockCodec] = None, timezone: str = DEFAULT_TIMEZONE,
                 timeout_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.codec = codec or default_codec
        self.timezone = ZoneInfo(timezone)
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self.session: Optional[DragSession] = None

    @property
    def is_dragging(self) -> bool:
        return self.session is not None

    def offset_for(self, event_id: str) -> float:
        """Live vertical offset to apply when rendering the given event"""
        if self.session is None or self.session.event_snapshot.id != event_id:
            return 0
        return self.session.offset_y

    def pointer_down(self, event: Event, x: float, y: float) -> bool:
        """Start dragging an event; returns False if a drag was already active"""
        if self.session is not None:
            logger.warning(
                f"Ignoring pointer down on {event.id}: already dragging {self.session.event_snapshot.id}"
            )
            return False

        position = PointerPosition(x=x, y=y)
        self.session = DragSession(
            event_snapshot=event.model_copy(),
            start=position,
            current=position,
            started_at=self.clock(),
        )
        logger.debug(f"Started dragging {event.id} at ({x}, {y})")
        return True

    def pointer_move(self, x: float, y: float, viewport: Viewport, selected_date: date) -> Optional[DragFeedback]:
        """Track the pointer, autoscroll near the top/bottom and switch day near the sides"""
        if self.session is None:
            return None

        position = PointerPosition(x=x, y=y)
        moved = self.session.moved or position != self.session.current

        scroll_by = 0
        if y > viewport.height - AUTOSCROLL_EDGE_PX:
            scroll_by = AUTOSCROLL_STEP_PX
        elif y < AUTOSCROLL_EDGE_PX:
            scroll_by = -AUTOSCROLL_STEP_PX

        day_shift = 0
        if x < DAY_SWITCH_EDGE_PX:
            day_shift = -1
        elif x > viewport.width - DAY_SWITCH_EDGE_PX:
            day_shift = 1
        if day_shift:
            moved = True
            logger.debug(f"Drag reached the {'left' if day_shift < 0 else 'right'} edge, switching day")

        self.session = self.session.model_copy(update={'current': position, 'moved': moved})
        return DragFeedback(
            offset_y=self.session.offset_y,
            scroll_by=scroll_by,
            selected_date=selected_date + timedelta(days=day_shift),
            day_shift=day_shift,
        )

    def pointer_up(self, y: float, selected_date: date, now: Optional[datetime] = None) -> Optional[DragOutcome]:
        """Finish the drag: a tap when the pointer never moved, otherwise a reschedule"""
        if self.session is None:
            return None

        session = self.session
        self.session = None
        snapshot = session.event_snapshot

        if not session.moved and y == session.start.y:
            logger.debug(f"Pointer released on {snapshot.id} without moving, treating as tap")
            return DragOutcome(kind='tap', event=snapshot, snapshot=snapshot)

        delta_y = y - session.start.y
        minutes_moved = _round_half_up(delta_y / PIXELS_PER_HOUR * 60)
        total_minutes = snapshot.time * 60 + self.codec.offset_fraction(snapshot.start_time) * 60 + minutes_moved

        start_minutes = clamp_start_minutes(snap_minutes(total_minutes))
        new_hour, new_minute = divmod(start_minutes, 60)
        new_start_time = self.codec.format(new_hour, new_minute)

        # Duration is preserved, not the end clock time
        duration_minutes = _round_half_up(snapshot.duration * 60)
        end_minutes = max(0, min(LATEST_END_MINUTES, start_minutes + duration_minutes))
        end_hour, end_minute = divmod(end_minutes, 60)
        new_end_time = self.codec.format(end_hour, end_minute)

        moved_event = snapshot.model_copy(update={
            'time': new_hour,
            'start_time': new_start_time,
            'end_time': new_end_time,
            'date': selected_date,
            'updated_at': now or datetime.now(self.timezone),
        })
        moved_event = recompute_derived_fields(moved_event, self.codec)

        message = f"Moved to {format_header_date(selected_date)}, {new_start_time}"
        logger.info(f"Moved event {snapshot.id} from {snapshot.date} {snapshot.start_time} "
                    f"to {selected_date} {new_start_time}")
        return DragOutcome(kind='moved', event=moved_event, snapshot=snapshot, message=message)

    def cancel(self) -> Optional[Event]:
        """Abandon the active drag without committing; returns the event that was being dragged"""
        if self.session is None:
            return None
        snapshot = self.session.event_snapshot
        self.session = None
        logger.info(f"Cancelled drag of {snapshot.id}")
        return snapshot

    def release_on_blur(self, selected_date: date, now: Optional[datetime] = None) -> Optional[DragOutcome]:
        """Release at the last known pointer position, e.g. when the window loses focus"""
        if self.session is None:
            return None
        logger.info(f"Releasing drag of {self.session.event_snapshot.id} without a pointer up")
        return self.pointer_up(self.session.current.y, selected_date, now)

    def release_if_stale(self, selected_date: date, now: Optional[datetime] = None) -> Optional[DragOutcome]:
        """Release a drag that has been active longer than the timeout"""
        if self.session is None:
            return None
        if self.clock() - self.session.started_at < self.timeout_seconds:
            return None
        return self.release_on_blur(selected_date, now)
