# saconnect/routers/events.py
from typing import List

from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..dependencies import get_event_service
from ..services import EventService

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=List[schemas.EventWithOwner])
def read_events(service: EventService = Depends(get_event_service)):
    """
    Повертає події спільноти, найновіші першими.

    Returns:
        List[schemas.EventWithOwner]: Події з організатором та кількістю учасників.
    """
    return service.list_events()


@router.post("", response_model=schemas.EventOut)
def create_event(event: schemas.EventCreate, service: EventService = Depends(get_event_service)):
    """
    Створює подію.

    Args:
        event (schemas.EventCreate): Дані події.
        service (EventService): Сервіс подій.

    Returns:
        schemas.EventOut: Створена подія.

    Raises:
        ValidationError: Якщо не вказано title, date, location або category.
    """
    return service.create(event)


@router.get("/{event_id}", response_model=schemas.EventWithOwner)
def read_event(event_id: str, service: EventService = Depends(get_event_service)):
    return service.get_event(event_id)


@router.put("/{event_id}", response_model=schemas.EventOut)
def update_event(event_id: str, changes: schemas.EventUpdate, service: EventService = Depends(get_event_service)):
    return service.update(event_id, changes)


@router.delete("/{event_id}", response_model=schemas.SuccessResponse)
def delete_event(event_id: str, user_id: str = Query(..., alias="userId"),
                 service: EventService = Depends(get_event_service)):
    service.delete(event_id, user_id)
    return {"success": True}


@router.post("/{event_id}/attend", response_model=schemas.AttendeeOut)
def attend_event(event_id: str, data: schemas.AttendRequest, service: EventService = Depends(get_event_service)):
    """
    Додає користувача до учасників події.

    Args:
        event_id (str): Ідентифікатор події.
        data (schemas.AttendRequest): userId.
        service (EventService): Сервіс подій.

    Returns:
        schemas.AttendeeOut: Запис учасника (повторний виклик повертає той самий).
    """
    return service.attend(event_id, data.user_id)


@router.delete("/{event_id}/attend/{user_id}", response_model=schemas.SuccessResponse)
def unattend_event(event_id: str, user_id: str, service: EventService = Depends(get_event_service)):
    service.unattend(event_id, user_id)
    return {"success": True}


@router.get("/{event_id}/attendees", response_model=List[schemas.AttendeeWithUser])
def read_attendees(event_id: str, service: EventService = Depends(get_event_service)):
    return service.list_attendees(event_id)
