# saconnect/services/events.py
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from .. import models, schemas
from ..errors import Forbidden, NotFound, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_EVENT_FIELDS = ("title", "date", "location", "category")


class EventService:
    """Події спільноти та список учасників."""

    def __init__(self, db: Session):
        self.db = db

    def list_events(self) -> List[models.Event]:
        return self.db.query(models.Event).options(
            joinedload(models.Event.user),
            selectinload(models.Event.attendees),
        ).order_by(models.Event.created_at.desc()).all()

    def get_event(self, event_id: str) -> models.Event:
        event = self.db.get(models.Event, event_id)
        if event is None:
            raise NotFound("Event not found")
        return event

    def create(self, event: schemas.EventCreate) -> models.Event:
        """
        Створює подію.

        Args:
            event (schemas.EventCreate): Дані події.

        Returns:
            models.Event: Створена подія.

        Raises:
            ValidationError: Якщо не вказано title, date, location або category.
            NotFound: Якщо власника не існує.
        """
        data = event.model_dump()
        missing = [field for field in REQUIRED_EVENT_FIELDS if not (data.get(field) or "").strip()]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if self.db.get(models.User, event.user_id) is None:
            raise NotFound("User not found")

        db_event = models.Event(**data)
        self.db.add(db_event)
        self.db.commit()
        self.db.refresh(db_event)
        logger.info("User %s created event %s", event.user_id, db_event.id)
        return db_event

    def update(self, event_id: str, changes: schemas.EventUpdate) -> models.Event:
        """
        Оновлює подію. Змінювати може лише власник.

        Raises:
            NotFound: Подію не знайдено.
            Forbidden: Користувач не є власником.
        """
        event = self.get_event(event_id)
        if event.user_id != changes.user_id:
            raise Forbidden("Only the organiser can change this event")
        for key, value in changes.model_dump(exclude_unset=True, exclude={"user_id"}).items():
            if key in REQUIRED_EVENT_FIELDS and value is None:
                continue
            setattr(event, key, value)
        self.db.commit()
        self.db.refresh(event)
        return event

    def delete(self, event_id: str, user_id: str) -> None:
        event = self.get_event(event_id)
        if event.user_id != user_id:
            raise Forbidden("Only the organiser can delete this event")
        self.db.delete(event)
        self.db.commit()
        logger.info("Event %s deleted by %s", event_id, user_id)

    def _find_attendee(self, event_id: str, user_id: str) -> Optional[models.EventAttendee]:
        return self.db.query(models.EventAttendee).filter(
            models.EventAttendee.event_id == event_id,
            models.EventAttendee.user_id == user_id,
        ).first()

    def attend(self, event_id: str, user_id: str) -> models.EventAttendee:
        """
        Додає користувача до списку учасників. Повторний виклик не дублює запис.

        Returns:
            models.EventAttendee: Запис учасника.
        """
        self.get_event(event_id)
        if self.db.get(models.User, user_id) is None:
            raise NotFound("User not found")

        existing = self._find_attendee(event_id, user_id)
        if existing:
            return existing

        attendee = models.EventAttendee(event_id=event_id, user_id=user_id)
        self.db.add(attendee)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return self._find_attendee(event_id, user_id)
        self.db.refresh(attendee)
        return attendee

    def unattend(self, event_id: str, user_id: str) -> None:
        self.db.query(models.EventAttendee).filter(
            models.EventAttendee.event_id == event_id,
            models.EventAttendee.user_id == user_id,
        ).delete(synchronize_session=False)
        self.db.commit()

    def list_attendees(self, event_id: str) -> List[models.EventAttendee]:
        self.get_event(event_id)
        return self.db.query(models.EventAttendee).options(
            joinedload(models.EventAttendee.user)
        ).filter(
            models.EventAttendee.event_id == event_id
        ).order_by(models.EventAttendee.created_at).all()
