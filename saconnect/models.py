# saconnect/models.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String,
    Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Поточний час UTC без tzinfo (так його зберігає і SQLite, і PostgreSQL)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def ordered_pair(user_a: str, user_b: str):
    """
    Канонічний порядок неупорядкованої пари користувачів.

    Args:
        user_a (str): Ідентифікатор першого користувача.
        user_b (str): Ідентифікатор другого користувача.

    Returns:
        tuple: (менший id, більший id) у лексикографічному порядку.
    """
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)


def user_fk():
    return ForeignKey("users.id", ondelete="CASCADE")


class User(Base):
    """
    Модель сімейного облікового запису.

    Attributes:
        id (str): Унікальний ідентифікатор користувача.
        email (str): Електронна пошта (унікальна, точний збіг).
        password_hash (str): Хеш пароля bcrypt.
        family_name (str): Назва родини.
        bio (str): Опис родини.
        avatar_url (str, optional): URL аватара.
        suburb (str, optional): Район.
        city (str, optional): Місто.
        lat (float, optional): Широта.
        lon (float, optional): Довгота.
        radius_preference (int): Бажаний радіус пошуку, км.
        interests (List[str]): Інтереси родини.
        role (str): "user" або "admin".
        family_members (List[FamilyMember]): Члени родини.
    """
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    family_name = Column(String, nullable=False)
    bio = Column(Text, default="")
    avatar_url = Column(String, nullable=True)
    suburb = Column(String, nullable=True)
    city = Column(String, nullable=True)
    lat = Column(Float, nullable=True)
    lon = Column(Float, nullable=True)
    radius_preference = Column(Integer, default=25)
    interests = Column(JSON, default=list)
    role = Column(String, default="user", nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    family_members = relationship(
        "FamilyMember",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="FamilyMember.created_at",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class FamilyMember(Base):
    __tablename__ = "family_members"
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), user_fk(), nullable=False, index=True)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="family_members")


class Connection(Base):
    """
    Запит на зв'язок між двома родинами.

    Запис спрямований (user_id - ініціатор), але пара pair_low/pair_high
    зберігається в канонічному порядку, тож на одну неупорядковану пару
    припадає не більше одного запису.
    """
    __tablename__ = "connections"
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), user_fk(), nullable=False, index=True)
    target_user_id = Column(String(36), user_fk(), nullable=False, index=True)
    pair_low = Column(String(36), nullable=False)
    pair_high = Column(String(36), nullable=False)
    status = Column(String, default="pending", nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("pair_low", "pair_high", name="uq_connection_pair"),
        CheckConstraint("pair_low < pair_high", name="ck_connection_pair_order"),
    )


class MessageThread(Base):
    """
    Єдиний канал листування для пари користувачів.

    Attributes:
        user1_id (str): Менший id пари.
        user2_id (str): Більший id пари.
        last_message (str, optional): Текст останнього повідомлення.
        last_message_at (datetime, optional): Час останнього повідомлення.
    """
    __tablename__ = "message_threads"
    id = Column(String(36), primary_key=True, default=generate_id)
    user1_id = Column(String(36), user_fk(), nullable=False, index=True)
    user2_id = Column(String(36), user_fk(), nullable=False, index=True)
    last_message = Column(Text, nullable=True)
    last_message_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    messages = relationship(
        "Message",
        back_populates="thread",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.timestamp",
    )

    __table_args__ = (
        UniqueConstraint("user1_id", "user2_id", name="uq_thread_pair"),
        CheckConstraint("user1_id < user2_id", name="ck_thread_pair_order"),
    )

    def other_participant(self, user_id: str) -> str:
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.user1_id, self.user2_id)


class Message(Base):
    __tablename__ = "messages"
    id = Column(String(36), primary_key=True, default=generate_id)
    thread_id = Column(String(36), ForeignKey("message_threads.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(String(36), user_fk(), nullable=False)
    text = Column(Text, nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    timestamp = Column(DateTime, default=utcnow, nullable=False)

    thread = relationship("MessageThread", back_populates="messages")


class Event(Base):
    __tablename__ = "events"
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), user_fk(), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    date = Column(String, nullable=False)
    time = Column(String, nullable=True)
    location = Column(String, nullable=False)
    category = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User")
    attendees = relationship(
        "EventAttendee",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def attendee_count(self) -> int:
        return len(self.attendees)


class EventAttendee(Base):
    __tablename__ = "event_attendees"
    id = Column(String(36), primary_key=True, default=generate_id)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), user_fk(), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    event = relationship("Event", back_populates="attendees")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_attendee"),
    )


class UserBlock(Base):
    """Спрямоване блокування: user_id блокує blocked_user_id."""
    __tablename__ = "user_blocks"
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), user_fk(), nullable=False, index=True)
    blocked_user_id = Column(String(36), user_fk(), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    blocked_user = relationship("User", foreign_keys=[blocked_user_id])

    __table_args__ = (
        UniqueConstraint("user_id", "blocked_user_id", name="uq_user_block"),
    )


class UserReport(Base):
    __tablename__ = "user_reports"
    id = Column(String(36), primary_key=True, default=generate_id)
    reporter_id = Column(String(36), user_fk(), nullable=False)
    reported_user_id = Column(String(36), user_fk(), nullable=False)
    reason = Column(String, nullable=False)
    details = Column(Text, nullable=True)
    status = Column(String, default="pending", nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    reporter = relationship("User", foreign_keys=[reporter_id])
    reported_user = relationship("User", foreign_keys=[reported_user_id])


class PasswordResetToken(Base):
    __tablename__ = "password_reset_tokens"
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), user_fk(), nullable=False, index=True)
    token = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class Business(Base):
    __tablename__ = "businesses"
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), user_fk(), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False)
    location = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    website = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    promotion = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User")


class WelcomeCard(Base):
    __tablename__ = "welcome_cards"
    id = Column(String(36), primary_key=True, default=generate_id)
    sort_order = Column(Integer, default=0, nullable=False)
    icon = Column(String, default="heart", nullable=False)
    header = Column(String, nullable=False)
    title = Column(String, nullable=False)
    bullets = Column(JSON, default=list, nullable=False)
    accent_color = Column(String, default="#E8703A", nullable=False)
    border_color = Column(String, default="#E8703A", nullable=False)
    promo_text = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
