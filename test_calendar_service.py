from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from timeblock.exceptions import EventNotFoundError, InvalidEventTypeError
from timeblock.models.drag import Viewport
from timeblock.models.event import Repeat
from timeblock.services.calendar_service import CalendarService

THURSDAY = date(2026, 4, 2)
VIEWPORT = Viewport(width=390, height=844)
RELEASED_AT = datetime(2026, 4, 2, 10, 30, tzinfo=ZoneInfo('America/Los_Angeles'))


@pytest.fixture
def service(config, fake_clock, make_event):
    return CalendarService(
        selected_date=THURSDAY,
        events=[make_event('7:00 AM', '8:00 AM', event_id='standup')],
        config=config,
        clock=fake_clock,
    )


def drag(service, event_id, delta_y, x=200, start_y=300):
    service.pointer_down(event_id, x, start_y)
    service.pointer_move(x, start_y + delta_y, VIEWPORT)
    return service.pointer_up(start_y + delta_y, now=RELEASED_AT)


def test_events_loaded_with_stale_caches_are_recomputed(config, make_event):
    stale = make_event('1:00 PM', '2:30 PM').model_copy(update={'time': 3, 'duration': 9})
    service = CalendarService(selected_date=THURSDAY, events=[stale], config=config)
    event = service.get_event(stale.id)
    assert event.time == 13
    assert event.duration == 1.5


def test_plus_button_creates_other_event(service):
    draft = service.draft_for_plus_button()
    assert (draft.type, draft.start_time, draft.end_time) == ('Other', '12:00 PM', '1:00 PM')
    event = service.save_event(draft)
    assert event.title == 'Other'
    assert event.color == 'bg-white'
    assert event.time == 12
    assert event.duration == 1
    assert event.date == THURSDAY
    assert event.created_at == event.updated_at
    assert event in service.events_for_date(THURSDAY)


def test_empty_slot_flow_uses_chosen_type(service):
    draft = service.draft_for_slot(15)
    assert (draft.start_time, draft.end_time) == ('3:00 PM', '4:00 PM')
    draft = service.choose_event_type(draft, 'Workout')
    event = service.save_event(draft.model_copy(update={'notes': 'legs', 'repeat': Repeat.WEEKLY}))
    assert event.title == 'Workout'
    assert event.color == 'bg-gray-400'
    assert event.notes == 'legs'
    assert event.repeat == Repeat.WEEKLY
    assert event.time == 15


def test_unknown_event_type_is_rejected(service):
    with pytest.raises(InvalidEventTypeError):
        service.choose_event_type(service.draft_for_slot(9), 'Napping')


def test_edit_recomputes_caches_and_keeps_identity(service):
    original = service.get_event('standup')
    draft = service.draft_for_edit('standup').model_copy(update={'start_time': '6:30 AM', 'end_time': '9:00 AM'})
    edited = service.save_event(draft, editing_id='standup')
    assert edited.id == 'standup'
    assert edited.created_at == original.created_at
    assert edited.updated_at != original.updated_at
    assert edited.time == 6
    assert edited.duration == 2.5
    assert len(service.events) == 1


def test_saving_edits_for_missing_event_raises(service):
    draft = service.draft_for_plus_button()
    with pytest.raises(EventNotFoundError):
        service.save_event(draft, editing_id='gone')


def test_duplicate_and_delete(service):
    copy = service.duplicate_event('standup')
    assert copy.id != 'standup'
    assert copy.start_time == '7:00 AM'
    assert len(service.events) == 2

    service.open_event('standup')
    service.delete_event('standup')
    assert service.selected_event is None
    with pytest.raises(EventNotFoundError):
        service.get_event('standup')
    assert [e.id for e in service.events] == [copy.id]


def test_week_strip_marks_selected_day(service):
    week = service.week_days()
    assert week[0].weekday_name == 'Wed'
    assert [d.is_selected for d in week] == [False, True, False, False, False, False, False]
    service.next_day()
    assert service.week_days()[2].is_selected
    service.previous_day()
    service.previous_day()
    assert service.week_days()[0].is_selected


def test_drag_then_undo_restores_exact_snapshot(service):
    before = service.get_event('standup')
    outcome = drag(service, 'standup', delta_y=128)
    moved = service.get_event('standup')
    assert (moved.start_time, moved.end_time, moved.time) == ('9:00 AM', '10:00 AM', 9)
    assert moved.updated_at == RELEASED_AT
    assert service.pending_undo.message == outcome.message == 'Moved to Apr 2, 2026, 9:00 AM'

    restored = service.undo()
    assert restored == before
    assert service.get_event('standup') == before
    assert service.pending_undo is None


def test_second_drag_discards_first_undo(service):
    drag(service, 'standup', delta_y=64)
    drag(service, 'standup', delta_y=64)
    restored = service.undo()
    assert restored.start_time == '8:00 AM'
    assert service.undo() is None


def test_undo_expires_after_five_seconds(service, fake_clock):
    drag(service, 'standup', delta_y=64)
    fake_clock.advance(5)
    assert service.pending_undo is None
    assert service.undo() is None
    assert service.get_event('standup').start_time == '8:00 AM'


def test_tap_opens_event_without_offering_undo(service):
    service.pointer_down('standup', 200, 300)
    outcome = service.pointer_up(300)
    assert outcome.kind == 'tap'
    assert service.selected_event.id == 'standup'
    assert service.pending_undo is None


def test_cross_day_drag_moves_event_to_adjacent_day(service):
    service.pointer_down('standup', 200, 300)
    service.pointer_move(30, 300, VIEWPORT)
    assert service.selected_date == date(2026, 4, 1)

    # While dragging, the event is drawn on the day it is being carried to
    assert [box.event_id for box in service.day_layout()] == ['standup']

    service.pointer_move(200, 364, VIEWPORT)
    service.pointer_up(364, now=RELEASED_AT)
    moved = service.get_event('standup')
    assert moved.date == date(2026, 4, 1)
    assert moved.start_time == '8:00 AM'
    assert service.events_for_date(THURSDAY) == []


def test_day_layout_applies_live_drag_offset(service):
    service.save_event(service.draft_for_plus_button())
    service.pointer_down('standup', 200, 300)
    service.pointer_move(200, 350, VIEWPORT)
    boxes = {box.event_id: box for box in service.day_layout()}
    assert boxes['standup'].top_px == 7 * 64 + 50
    other = next(box for event_id, box in boxes.items() if event_id != 'standup')
    assert other.top_px == 12 * 64
    # Nothing is written back until release
    assert service.get_event('standup').start_time == '7:00 AM'


def test_blur_releases_active_drag(service):
    service.pointer_down('standup', 200, 300)
    service.pointer_move(200, 428, VIEWPORT)
    outcome = service.release_on_blur()
    assert outcome.kind == 'moved'
    assert service.get_event('standup').start_time == '9:00 AM'
    assert not service.drag.is_dragging


def test_deleting_moved_event_drops_its_undo(service):
    drag(service, 'standup', delta_y=64)
    service.delete_event('standup')
    assert service.pending_undo is None
    assert service.undo() is None
    assert service.events == []


def test_deleting_event_mid_drag_cancels_the_drag(service):
    service.pointer_down('standup', 200, 300)
    service.pointer_move(200, 364, VIEWPORT)
    service.delete_event('standup')
    assert not service.drag.is_dragging
    assert service.pointer_up(364, now=RELEASED_AT) is None
    assert service.events == []
    assert service.pending_undo is None


def test_starting_a_new_drag_ends_pending_undo(service):
    service.save_event(service.draft_for_plus_button())
    other_id = next(e.id for e in service.events if e.id != 'standup')
    drag(service, 'standup', delta_y=64)
    assert service.pending_undo is not None

    assert service.pointer_down(other_id, 200, 500)
    assert service.pending_undo is None
    assert service.undo() is None
    assert service.get_event('standup').start_time == '8:00 AM'


def test_tap_after_a_move_ends_pending_undo(service):
    drag(service, 'standup', delta_y=64)
    service.pointer_down('standup', 200, 300)
    service.pointer_up(300)
    assert service.pending_undo is None
    assert service.get_event('standup').start_time == '8:00 AM'
