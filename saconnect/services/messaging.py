# saconnect/services/messaging.py
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..errors import Conflict, Forbidden, NotFound, ValidationError
from .moderation import blocked_user_ids, is_blocked

logger = logging.getLogger(__name__)


@dataclass
class ThreadListing:
    thread: models.MessageThread
    other_user: models.User
    unread_count: int


class MessagingService:
    """
    Розмови та повідомлення.

    Розмова зберігається з user1_id < user2_id, тож на пару є рівно одна
    розмова, а повторне створення повертає наявну.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_thread(self, thread_id: str) -> models.MessageThread:
        thread = self.db.get(models.MessageThread, thread_id)
        if thread is None:
            raise NotFound("Thread not found")
        return thread

    def _find_thread(self, user1_id: str, user2_id: str) -> Optional[models.MessageThread]:
        return self.db.query(models.MessageThread).filter(
            models.MessageThread.user1_id == user1_id,
            models.MessageThread.user2_id == user2_id,
        ).first()

    def get_or_create_thread(self, user_id_a: str, user_id_b: str) -> models.MessageThread:
        """
        Повертає розмову пари або створює її.

        Args:
            user_id_a (str): Перший учасник.
            user_id_b (str): Другий учасник (порядок аргументів не важливий).

        Returns:
            models.MessageThread: Єдина розмова цієї пари.

        Raises:
            ValidationError: Розмова з самим собою.
            NotFound: Якщо когось із користувачів не існує.
            Conflict: Між користувачами є блокування.
        """
        if user_id_a == user_id_b:
            raise ValidationError("Cannot start a thread with yourself")
        for uid in (user_id_a, user_id_b):
            if self.db.get(models.User, uid) is None:
                raise NotFound("User not found")
        if is_blocked(self.db, user_id_a, user_id_b):
            raise Conflict("Messaging is not available between these users")

        user1_id, user2_id = models.ordered_pair(user_id_a, user_id_b)
        thread = self._find_thread(user1_id, user2_id)
        if thread:
            return thread

        thread = models.MessageThread(user1_id=user1_id, user2_id=user2_id)
        self.db.add(thread)
        try:
            self.db.commit()
        except IntegrityError:
            # Паралельний запит уже створив розмову
            self.db.rollback()
            existing = self._find_thread(user1_id, user2_id)
            if existing is None:
                raise
            return existing
        self.db.refresh(thread)
        logger.info("Created thread %s", thread.id)
        return thread

    def list_messages(self, thread_id: str) -> List[models.Message]:
        self.get_thread(thread_id)
        return self.db.query(models.Message).filter(
            models.Message.thread_id == thread_id
        ).order_by(models.Message.timestamp, models.Message.id).all()

    def send(self, thread_id: str, sender_id: str, text: str) -> models.Message:
        """
        Додає повідомлення до розмови.

        Повідомлення та поля last_message/last_message_at розмови
        зберігаються одним комітом.

        Args:
            thread_id (str): Ідентифікатор розмови.
            sender_id (str): Відправник.
            text (str): Текст повідомлення.

        Returns:
            models.Message: Нове непрочитане повідомлення.

        Raises:
            ValidationError: Порожній текст.
            NotFound: Розмову не знайдено.
            Forbidden: Відправник не учасник розмови або є блокування.
        """
        if not text or not text.strip():
            raise ValidationError("Message text is required")
        thread = self.get_thread(thread_id)
        if not thread.has_participant(sender_id):
            raise Forbidden("Sender is not a participant of this thread")
        if is_blocked(self.db, sender_id, thread.other_participant(sender_id)):
            raise Forbidden("Messaging is not available between these users")

        now = models.utcnow()
        message = models.Message(
            thread_id=thread.id,
            sender_id=sender_id,
            text=text,
            read=False,
            timestamp=now,
        )
        thread.last_message = text
        thread.last_message_at = now
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def mark_thread_read(self, thread_id: str, reader_id: str) -> int:
        """
        Позначає прочитаними повідомлення, надіслані іншим учасником.

        Власні повідомлення читача не змінюються.

        Returns:
            int: Кількість позначених повідомлень.
        """
        thread = self.get_thread(thread_id)
        if not thread.has_participant(reader_id):
            raise Forbidden("Reader is not a participant of this thread")
        updated = self.db.query(models.Message).filter(
            models.Message.thread_id == thread_id,
            models.Message.sender_id != reader_id,
            models.Message.read.is_(False),
        ).update({models.Message.read: True}, synchronize_session=False)
        self.db.commit()
        return updated

    def unread_count_for(self, thread_id: str, user_id: str) -> int:
        self.get_thread(thread_id)
        return self.db.query(func.count(models.Message.id)).filter(
            models.Message.thread_id == thread_id,
            models.Message.read.is_(False),
            models.Message.sender_id != user_id,
        ).scalar()

    def list_threads(self, user_id: str) -> List[ThreadListing]:
        """
        Розмови користувача, найсвіжіші першими.

        Кожна розмова містить іншого учасника та кількість непрочитаних
        повідомлень. Розмови із заблокованими користувачами не повертаються.
        """
        hidden = blocked_user_ids(self.db, user_id)
        last_activity = func.coalesce(models.MessageThread.last_message_at, models.MessageThread.created_at)
        threads = self.db.query(models.MessageThread).filter(
            or_(models.MessageThread.user1_id == user_id, models.MessageThread.user2_id == user_id)
        ).order_by(last_activity.desc()).all()
        threads = [t for t in threads if t.other_participant(user_id) not in hidden]
        if not threads:
            return []

        unread = dict(
            self.db.query(models.Message.thread_id, func.count(models.Message.id)).filter(
                models.Message.thread_id.in_([t.id for t in threads]),
                models.Message.read.is_(False),
                models.Message.sender_id != user_id,
            ).group_by(models.Message.thread_id).all()
        )
        other_ids = [t.other_participant(user_id) for t in threads]
        users = {
            u.id: u for u in self.db.query(models.User).filter(models.User.id.in_(other_ids)).all()
        }

        return [
            ThreadListing(thread, users[thread.other_participant(user_id)], unread.get(thread.id, 0))
            for thread in threads
            if thread.other_participant(user_id) in users
        ]
