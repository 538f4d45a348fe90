from timeblock.models.event import Event, EventDraft, EventType, EVENT_TYPES, Repeat, get_event_type, recompute_derived_fields
from timeblock.models.week_day import WeekDay
from timeblock.models.indicator import Indicator
from timeblock.models.drag import DragFeedback, DragOutcome, DragSession, PointerPosition, Viewport

__all__ = [
    'Event', 'EventDraft', 'EventType', 'EVENT_TYPES', 'Repeat', 'get_event_type', 'recompute_derived_fields',
    'WeekDay', 'Indicator',
    'DragFeedback', 'DragOutcome', 'DragSession', 'PointerPosition', 'Viewport',
]
