# saconnect/routers/messaging.py
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends

from .. import schemas
from ..dependencies import get_messaging_service
from ..notifications import NotificationSink, get_notifier
from ..services import MessagingService

router = APIRouter(prefix="/api", tags=["messaging"])

PREVIEW_LENGTH = 100


@router.get("/threads/{user_id}", response_model=List[schemas.ThreadSummary])
def read_threads(user_id: str, service: MessagingService = Depends(get_messaging_service)):
    """
    Повертає розмови користувача, найсвіжіші першими.

    Args:
        user_id (str): Ідентифікатор користувача.
        service (MessagingService): Сервіс листування.

    Returns:
        List[schemas.ThreadSummary]: Розмови з otherUser та unreadCount.
    """
    return [
        schemas.ThreadSummary.model_validate(listing.thread).model_copy(update={
            "other_user": schemas.UserPublic.model_validate(listing.other_user),
            "unread_count": listing.unread_count,
        })
        for listing in service.list_threads(user_id)
    ]


@router.post("/threads", response_model=schemas.ThreadOut)
def create_thread(data: schemas.ThreadCreate, service: MessagingService = Depends(get_messaging_service)):
    """
    Повертає наявну розмову пари або створює нову.

    Args:
        data (schemas.ThreadCreate): userId1 та userId2 у будь-якому порядку.
        service (MessagingService): Сервіс листування.

    Returns:
        schemas.ThreadOut: Розмова.
    """
    return service.get_or_create_thread(data.user_id1, data.user_id2)


@router.put("/threads/{thread_id}/read", response_model=schemas.MarkReadResponse)
def mark_thread_read(thread_id: str, data: schemas.MarkReadRequest,
                     service: MessagingService = Depends(get_messaging_service)):
    updated = service.mark_thread_read(thread_id, data.user_id)
    return {"success": True, "updated": updated}


@router.get("/threads/{thread_id}/unread/{user_id}", response_model=schemas.UnreadCountOut)
def read_unread_count(thread_id: str, user_id: str, service: MessagingService = Depends(get_messaging_service)):
    return {"thread_id": thread_id, "user_id": user_id, "count": service.unread_count_for(thread_id, user_id)}


@router.get("/messages/{thread_id}", response_model=List[schemas.MessageOut])
def read_messages(thread_id: str, service: MessagingService = Depends(get_messaging_service)):
    return service.list_messages(thread_id)


@router.post("/messages", response_model=schemas.MessageOut)
def send_message(data: schemas.MessageCreate, background_tasks: BackgroundTasks,
                 service: MessagingService = Depends(get_messaging_service),
                 notifier: NotificationSink = Depends(get_notifier)):
    """
    Надсилає повідомлення в розмову.

    Args:
        data (schemas.MessageCreate): threadId, senderId, text.
        background_tasks (BackgroundTasks): Черга для сповіщення співрозмовника.
        service (MessagingService): Сервіс листування.
        notifier (NotificationSink): Приймач сповіщень.

    Returns:
        schemas.MessageOut: Збережене повідомлення.

    Raises:
        ValidationError: Порожній текст.
        Forbidden: Відправник не учасник розмови.
    """
    message = service.send(data.thread_id, data.sender_id, data.text)
    recipient_id = service.get_thread(message.thread_id).other_participant(message.sender_id)
    background_tasks.add_task(
        notifier.send, [recipient_id], "New message", message.text[:PREVIEW_LENGTH],
        {"type": "message", "threadId": message.thread_id},
    )
    return message
