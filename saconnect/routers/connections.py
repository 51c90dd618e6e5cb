# saconnect/routers/connections.py
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends

from .. import schemas
from ..dependencies import get_connection_service
from ..notifications import NotificationSink, get_notifier
from ..services import ConnectionService
from ..services.connections import CONNECTED

router = APIRouter(prefix="/api/connections", tags=["connections"])


@router.get("/{user_id}", response_model=List[schemas.ConnectionView])
def read_connections(user_id: str, service: ConnectionService = Depends(get_connection_service)):
    """
    Повертає всі зв'язки користувача (надіслані, отримані, активні).

    Args:
        user_id (str): Ідентифікатор користувача.
        service (ConnectionService): Сервіс зв'язків.

    Returns:
        List[schemas.ConnectionView]: Зв'язки зі статусом та id співрозмовника.
    """
    return [
        schemas.ConnectionView.model_validate(listing.connection).model_copy(
            update={"other_user_id": listing.other_user_id, "direction": listing.direction}
        )
        for listing in service.list_for(user_id)
    ]


@router.post("", response_model=schemas.ConnectionOut)
def create_connection(data: schemas.ConnectionCreate, background_tasks: BackgroundTasks,
                      service: ConnectionService = Depends(get_connection_service),
                      notifier: NotificationSink = Depends(get_notifier)):
    """
    Надсилає запит на зв'язок.

    Args:
        data (schemas.ConnectionCreate): userId (ініціатор) та targetUserId.
        background_tasks (BackgroundTasks): Черга для сповіщення адресата.
        service (ConnectionService): Сервіс зв'язків.
        notifier (NotificationSink): Приймач сповіщень.

    Returns:
        schemas.ConnectionOut: Запит зі статусом pending.

    Raises:
        Conflict: Якщо зв'язок уже існує або між користувачами є блокування.
    """
    connection = service.request(data.user_id, data.target_user_id)
    background_tasks.add_task(
        notifier.send, [connection.target_user_id], "New connection request",
        "A family would like to connect with you", {"type": "connection", "connectionId": connection.id},
    )
    return connection


@router.put("/{connection_id}", response_model=schemas.ConnectionOut)
def respond_to_connection(connection_id: str, data: schemas.ConnectionRespond, background_tasks: BackgroundTasks,
                          service: ConnectionService = Depends(get_connection_service),
                          notifier: NotificationSink = Depends(get_notifier)):
    """
    Приймає (connected) або відхиляє (rejected) запит.

    Raises:
        Forbidden: Відповідає не адресат.
        InvalidTransition: Запит уже не в статусі pending.
    """
    connection = service.respond(connection_id, data.status, data.user_id)
    if connection.status == CONNECTED:
        background_tasks.add_task(
            notifier.send, [connection.user_id], "Connection accepted",
            "Your connection request was accepted", {"type": "connection", "connectionId": connection.id},
        )
    return connection
