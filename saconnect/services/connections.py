# saconnect/services/connections.py
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..errors import Conflict, Forbidden, InvalidTransition, NotFound, ValidationError
from .moderation import blocked_user_ids, is_blocked

logger = logging.getLogger(__name__)

PENDING = "pending"
CONNECTED = "connected"
REJECTED = "rejected"

# Дозволені переходи: лише з pending
TRANSITIONS = {PENDING: {CONNECTED, REJECTED}}


@dataclass
class ConnectionListing:
    connection: models.Connection
    other_user_id: str
    direction: str


class ConnectionService:
    """
    Граф зв'язків між родинами.

    На неупорядковану пару припадає не більше одного запису Connection,
    що гарантує унікальний індекс по (pair_low, pair_high).
    """

    def __init__(self, db: Session):
        self.db = db

    def get_between(self, user_id: str, other_user_id: str) -> Optional[models.Connection]:
        low, high = models.ordered_pair(user_id, other_user_id)
        return self.db.query(models.Connection).filter(
            models.Connection.pair_low == low,
            models.Connection.pair_high == high,
        ).first()

    def get(self, connection_id: str) -> models.Connection:
        connection = self.db.get(models.Connection, connection_id)
        if connection is None:
            raise NotFound("Connection not found")
        return connection

    def request(self, user_id: str, target_user_id: str) -> models.Connection:
        """
        Надсилає запит на зв'язок.

        Args:
            user_id (str): Ініціатор.
            target_user_id (str): Адресат.

        Returns:
            models.Connection: Новий запис зі статусом pending.

        Raises:
            ValidationError: Запит самому собі.
            NotFound: Якщо когось із користувачів не існує.
            Conflict: Зв'язок уже існує (у будь-якому напрямку) або є блокування.
        """
        if user_id == target_user_id:
            raise ValidationError("You cannot connect with yourself")
        for uid in (user_id, target_user_id):
            if self.db.get(models.User, uid) is None:
                raise NotFound("User not found")
        if is_blocked(self.db, user_id, target_user_id):
            raise Conflict("Connection not allowed")
        if self.get_between(user_id, target_user_id):
            raise Conflict("Connection already exists")

        low, high = models.ordered_pair(user_id, target_user_id)
        connection = models.Connection(
            user_id=user_id,
            target_user_id=target_user_id,
            pair_low=low,
            pair_high=high,
            status=PENDING,
        )
        self.db.add(connection)
        try:
            self.db.commit()
        except IntegrityError:
            # Інший запит для цієї пари встиг раніше
            self.db.rollback()
            raise Conflict("Connection already exists")
        self.db.refresh(connection)
        logger.info("Connection %s requested %s -> %s", connection.id, user_id, target_user_id)
        return connection

    def respond(self, connection_id: str, new_status: str, responder_id: str) -> models.Connection:
        """
        Приймає або відхиляє запит.

        Args:
            connection_id (str): Ідентифікатор запиту.
            new_status (str): "connected" або "rejected".
            responder_id (str): Хто відповідає.

        Returns:
            models.Connection: Оновлений запис.

        Raises:
            NotFound: Запит не знайдено.
            Forbidden: Відповідає не адресат запиту.
            InvalidTransition: Перехід не з pending або в невідомий статус.
        """
        connection = self.get(connection_id)
        if responder_id != connection.target_user_id:
            raise Forbidden("Only the recipient can respond to this request")
        allowed = TRANSITIONS.get(connection.status, set())
        if new_status not in allowed:
            raise InvalidTransition(f"Cannot change connection from {connection.status} to {new_status}")

        connection.status = new_status
        self.db.commit()
        self.db.refresh(connection)
        logger.info("Connection %s is now %s", connection.id, new_status)
        return connection

    def list_for(self, user_id: str) -> List[ConnectionListing]:
        """
        Усі зв'язки користувача з обох боків.

        Пари з блокуванням не повертаються.

        Returns:
            List[ConnectionListing]: Запис, id співрозмовника та напрямок ("sent"/"received").
        """
        hidden = blocked_user_ids(self.db, user_id)
        connections = self.db.query(models.Connection).filter(
            or_(models.Connection.user_id == user_id, models.Connection.target_user_id == user_id)
        ).order_by(models.Connection.created_at.desc()).all()

        listings = []
        for connection in connections:
            sent = connection.user_id == user_id
            other_id = connection.target_user_id if sent else connection.user_id
            if other_id in hidden:
                continue
            listings.append(ConnectionListing(connection, other_id, "sent" if sent else "received"))
        return listings
