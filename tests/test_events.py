# tests/test_events.py
import pytest

from saconnect import models, schemas
from saconnect.errors import Forbidden, NotFound, ValidationError
from saconnect.services import EventService


@pytest.fixture
def events(db_session):
    return EventService(db_session)


def new_event(user_id, **overrides):
    data = {
        "user_id": user_id,
        "title": "Playground meetup",
        "description": "Bring snacks",
        "date": "2026-11-07",
        "time": "10:00",
        "location": "Cornwall Park",
        "category": "playdate",
    }
    data.update(overrides)
    return schemas.EventCreate(**data)


def test_create_event(events, make_user):
    """
    Тест створення події.
    """
    owner = make_user()
    event = events.create(new_event(owner.id))
    assert event.title == "Playground meetup"
    assert event.user_id == owner.id
    assert event.attendee_count == 0


@pytest.mark.parametrize("field", ["title", "date", "location", "category"])
def test_create_event_requires_fields(events, make_user, field):
    owner = make_user()
    with pytest.raises(ValidationError):
        events.create(new_event(owner.id, **{field: ""}))


def test_create_event_unknown_owner(events):
    with pytest.raises(NotFound):
        events.create(new_event("missing"))


def test_attend_is_idempotent(events, make_user, db_session):
    owner, guest = make_user(), make_user()
    event = events.create(new_event(owner.id))

    first = events.attend(event.id, guest.id)
    second = events.attend(event.id, guest.id)
    assert first.id == second.id
    assert db_session.query(models.EventAttendee).count() == 1

    db_session.expire_all()
    assert events.get_event(event.id).attendee_count == 1
    assert [a.user.id for a in events.list_attendees(event.id)] == [guest.id]


def test_unattend_is_idempotent(events, make_user):
    owner, guest = make_user(), make_user()
    event = events.create(new_event(owner.id))
    events.attend(event.id, guest.id)

    events.unattend(event.id, guest.id)
    events.unattend(event.id, guest.id)
    assert events.list_attendees(event.id) == []


def test_only_owner_updates(events, make_user):
    owner, other = make_user(), make_user()
    event = events.create(new_event(owner.id))

    with pytest.raises(Forbidden):
        events.update(event.id, schemas.EventUpdate(user_id=other.id, title="Hijacked"))

    updated = events.update(event.id, schemas.EventUpdate(user_id=owner.id, title="Picnic"))
    assert updated.title == "Picnic"
    assert updated.location == "Cornwall Park"


def test_only_owner_deletes(events, make_user, db_session):
    owner, other = make_user(), make_user()
    event = events.create(new_event(owner.id))
    events.attend(event.id, other.id)

    with pytest.raises(Forbidden):
        events.delete(event.id, other.id)

    events.delete(event.id, owner.id)
    with pytest.raises(NotFound):
        events.get_event(event.id)
    assert db_session.query(models.EventAttendee).count() == 0


def test_list_events_newest_first(events, make_user):
    owner = make_user()
    first = events.create(new_event(owner.id, title="First"))
    second = events.create(new_event(owner.id, title="Second"))
    assert [e.id for e in events.list_events()] == [second.id, first.id]
