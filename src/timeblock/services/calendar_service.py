import asyncio
import time
import uuid
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo
import logging

from ..config.manager import ConfigManager
from ..exceptions import EventNotFoundError
from ..models.drag import DragFeedback, DragOutcome, Viewport
from ..models.event import Event, EventDraft, Repeat, get_event_type, recompute_derived_fields
from ..models.week_day import WeekDay
from ..utils.time_utils import ClockCodec, default_codec
from ..utils.week_utils import get_week_days
from .drag_service import DragRescheduleEngine
from .event_geometry import EventLayout, layout_event
from .undo_service import UndoManager, UndoOffer

logger = logging.getLogger(__name__)


class CalendarService:
    """In-memory state behind the week view.

    Holds the events and the selected day and routes form saves, pointer
    input and undo to the engine. Every mutation goes through
    recompute_derived_fields so time/duration never drift from the clock
    strings. Persisting the events is up to the caller.
    """

    def __init__(self, selected_date: date, events: Optional[List[Event]] = None,
                 config: Optional[ConfigManager] = None, codec: Optional[ClockCodec] = None,
                 clock: Callable[[], float] = time.monotonic,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.config = config or ConfigManager()
        self.codec = codec or default_codec
        self.timezone = ZoneInfo(self.config.get('app.timezone'))
        self.selected_date = selected_date
        self.selected_event: Optional[Event] = None
        self._events: List[Event] = [recompute_derived_fields(e, self.codec) for e in (events or [])]

        self.drag = DragRescheduleEngine(
            codec=self.codec,
            timezone=self.config.get('app.timezone'),
            timeout_seconds=self.config.get('drag.timeout_seconds', 30.0),
            clock=clock,
        )
        self.undo_manager = UndoManager(
            window_seconds=self.config.get('undo.window_seconds', 5.0),
            clock=clock,
            loop=loop,
        )

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def now(self) -> datetime:
        return datetime.now(self.timezone)

    def get_event(self, event_id: str) -> Event:
        for event in self._events:
            if event.id == event_id:
                return event
        raise EventNotFoundError(event_id)

    def _replace(self, event: Event) -> Event:
        event = recompute_derived_fields(event, self.codec)
        for index, existing in enumerate(self._events):
            if existing.id == event.id:
                self._events[index] = event
                return event
        raise EventNotFoundError(event.id)

    # Navigation

    def go_to_date(self, day: date):
        self.selected_date = day

    def next_day(self):
        self.selected_date = self.selected_date + timedelta(days=1)

    def previous_day(self):
        self.selected_date = self.selected_date - timedelta(days=1)

    def week_days(self) -> List[WeekDay]:
        return get_week_days(self.selected_date, self.selected_date)

    def events_for_date(self, day: date) -> List[Event]:
        return [event for event in self._events if event.date == day]

    def day_layout(self, day: Optional[date] = None) -> List[EventLayout]:
        """Pixel boxes for a day's events, including the event being dragged onto it"""
        day = day or self.selected_date
        events = self.events_for_date(day)
        session = self.drag.session
        if session is not None and day == self.selected_date:
            dragged_id = session.event_snapshot.id
            if not any(event.id == dragged_id for event in events):
                events.append(self.get_event(dragged_id))
        return [layout_event(event, self.drag.offset_for(event.id), self.codec) for event in events]

    # Event form

    def draft_for_slot(self, hour_index: int) -> EventDraft:
        """Draft for a tap on an empty hour slot; the type is chosen next"""
        return EventDraft(
            date=self.selected_date,
            start_time=self.codec.format(hour_index),
            end_time=self.codec.format(hour_index + 1),
        )

    def draft_for_plus_button(self) -> EventDraft:
        other = get_event_type('Other')
        return EventDraft(
            type=other.name,
            color=other.color,
            date=self.selected_date,
            start_time='12:00 PM',
            end_time='1:00 PM',
        )

    def choose_event_type(self, draft: EventDraft, type_name: str) -> EventDraft:
        event_type = get_event_type(type_name)
        return draft.model_copy(update={'type': event_type.name, 'color': event_type.color})

    def draft_for_edit(self, event_id: str) -> EventDraft:
        event = self.get_event(event_id)
        return EventDraft(
            type=event.type,
            color=event.color,
            title=event.title,
            notes=event.notes or '',
            date=event.date,
            start_time=event.start_time,
            end_time=event.end_time,
            repeat=event.repeat,
            backup=event.backup,
            address=event.address or '',
        )

    def save_event(self, draft: EventDraft, editing_id: Optional[str] = None) -> Event:
        """Create an event from the form, or update editing_id with it"""
        now = self.now()
        fields = {
            'type': draft.type,
            'color': draft.color,
            'title': draft.title or draft.type,
            'notes': draft.notes,
            'address': draft.address,
            'date': draft.date,
            'start_time': draft.start_time,
            'end_time': draft.end_time,
            'repeat': Repeat(draft.repeat),
            'backup': draft.backup,
            'updated_at': now,
        }

        if editing_id is not None:
            try:
                existing = self.get_event(editing_id)
            except EventNotFoundError:
                logger.error(f"Cannot save edits, event {editing_id} no longer exists")
                raise
            event = self._replace(existing.model_copy(update=fields))
            logger.info(f"Updated event {event.id}: {event.title} {event.start_time}-{event.end_time}")
            return event

        event = recompute_derived_fields(Event(id=str(uuid.uuid4()), created_at=now, **fields), self.codec)
        self._events.append(event)
        logger.info(f"Created event {event.id}: {event.title} on {event.date} {event.start_time}-{event.end_time}")
        return event

    def duplicate_event(self, event_id: str) -> Event:
        source = self.get_event(event_id)
        now = self.now()
        duplicate = source.model_copy(update={'id': str(uuid.uuid4()), 'created_at': now, 'updated_at': now})
        self._events.append(duplicate)
        logger.info(f"Duplicated event {event_id} as {duplicate.id}")
        return duplicate

    def delete_event(self, event_id: str) -> Event:
        event = self.get_event(event_id)
        self._events = [e for e in self._events if e.id != event_id]
        if self.drag.session is not None and self.drag.session.event_snapshot.id == event_id:
            self.drag.cancel()
        pending = self.undo_manager.pending
        if pending is not None and pending.snapshot.id == event_id:
            self.undo_manager.expire()
        if self.selected_event is not None and self.selected_event.id == event_id:
            self.selected_event = None
        logger.info(f"Deleted event {event_id}")
        return event

    def open_event(self, event_id: str) -> Event:
        self.selected_event = self.get_event(event_id)
        return self.selected_event

    # Dragging

    def default_viewport(self) -> Viewport:
        return Viewport(width=self.config.get('viewport.width', 390), height=self.config.get('viewport.height', 844))

    def pointer_down(self, event_id: str, x: float, y: float) -> bool:
        """Start dragging an event; a new drag ends any pending undo"""
        started = self.drag.pointer_down(self.get_event(event_id), x, y)
        if started:
            self.undo_manager.expire()
        return started

    def pointer_move(self, x: float, y: float, viewport: Optional[Viewport] = None) -> Optional[DragFeedback]:
        feedback = self.drag.pointer_move(x, y, viewport or self.default_viewport(), self.selected_date)
        if feedback is not None:
            self.selected_date = feedback.selected_date
        return feedback

    def pointer_up(self, y: float, now: Optional[datetime] = None) -> Optional[DragOutcome]:
        return self._apply_outcome(self.drag.pointer_up(y, self.selected_date, now or self.now()))

    def release_on_blur(self) -> Optional[DragOutcome]:
        return self._apply_outcome(self.drag.release_on_blur(self.selected_date, self.now()))

    def release_if_stale(self) -> Optional[DragOutcome]:
        return self._apply_outcome(self.drag.release_if_stale(self.selected_date, self.now()))

    def _apply_outcome(self, outcome: Optional[DragOutcome]) -> Optional[DragOutcome]:
        if outcome is None:
            return None
        if outcome.kind == 'tap':
            self.open_event(outcome.event.id)
            return outcome
        self._replace(outcome.event)
        self.undo_manager.offer(outcome.message, outcome.snapshot)
        return outcome

    @property
    def pending_undo(self) -> Optional[UndoOffer]:
        return self.undo_manager.pending

    def undo(self) -> Optional[Event]:
        """Restore the event as it was before the most recent drag"""
        snapshot = self.undo_manager.undo()
        if snapshot is None:
            return None
        return self._replace(snapshot)
