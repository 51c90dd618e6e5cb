# saconnect/schemas.py
from datetime import datetime
from typing import Annotated, List, Optional

from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Базова схема API.

    Клієнт надсилає та отримує ключі у camelCase (familyName, targetUserId),
    а в коді використовуються імена у snake_case.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _check_email(value: str) -> str:
    """
    Перевіряє синтаксис адреси, але повертає її без нормалізації.

    Адреси порівнюються точно, тож домен не переводиться в нижній регістр.
    """
    validate_email(value, check_deliverability=False)
    return value


ExactEmail = Annotated[str, AfterValidator(_check_email)]


class SuccessResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None


# --- Схеми для членів родини ---

class FamilyMemberCreate(CamelModel):
    """
    Схема для додавання члена родини.

    Attributes:
        name (str): Ім'я.
        age (int): Вік.
    """
    name: str = Field(min_length=1)
    age: int = Field(ge=0)


class FamilyMemberUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    age: Optional[int] = Field(default=None, ge=0)


class FamilyMemberOut(CamelModel):
    id: str
    user_id: str
    name: str
    age: int
    created_at: datetime


# --- Схеми для користувачів ---

class UserPublic(CamelModel):
    """
    Публічне подання користувача.

    Схема не має поля для пароля чи його хешу, тому жодна відповідь,
    зібрана з неї, не може містити облікові дані.
    """
    id: str
    email: str
    family_name: str
    bio: Optional[str] = ""
    avatar_url: Optional[str] = None
    suburb: Optional[str] = None
    city: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    radius_preference: Optional[int] = 25
    interests: List[str] = []
    role: str = "user"
    created_at: datetime

    @field_validator("interests", mode="before")
    @classmethod
    def _interests_default(cls, value):
        return value or []


class UserProfile(UserPublic):
    family_members: List[FamilyMemberOut] = []


class UserUpdate(CamelModel):
    """
    Схема для оновлення профілю.

    Email, пароль і роль тут не змінюються.
    """
    family_name: Optional[str] = Field(default=None, min_length=1)
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    suburb: Optional[str] = None
    city: Optional[str] = None
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lon: Optional[float] = Field(default=None, ge=-180, le=180)
    radius_preference: Optional[int] = Field(default=None, ge=1)
    interests: Optional[List[str]] = None


class DiscoverCandidate(UserProfile):
    """
    Кандидат у стрічці пошуку.

    Attributes:
        distance (Optional[float]): Відстань у км з точністю до 0.1,
            або None, якщо координати невідомі.
    """
    distance: Optional[float] = None


# --- Схеми для аутентифікації ---

class SignupRequest(CamelModel):
    email: ExactEmail
    password: str = Field(min_length=1)
    family_name: str = Field(min_length=1)


class SigninRequest(CamelModel):
    email: ExactEmail
    password: str = Field(min_length=1)


class AuthResponse(CamelModel):
    user: UserProfile


class ForgotPasswordRequest(CamelModel):
    email: ExactEmail


class ForgotPasswordResponse(SuccessResponse):
    token: Optional[str] = None


class VerifyResetTokenRequest(CamelModel):
    email: ExactEmail
    token: str = Field(min_length=1)


class VerifyResetTokenResponse(CamelModel):
    valid: bool


class ResetPasswordRequest(CamelModel):
    email: ExactEmail
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=1)


# --- Схеми для зв'язків ---

class ConnectionCreate(CamelModel):
    user_id: str = Field(min_length=1)
    target_user_id: str = Field(min_length=1)


class ConnectionRespond(CamelModel):
    """
    Відповідь на запит.

    Attributes:
        status (str): "connected" або "rejected".
        user_id (str): Хто відповідає (має бути адресатом запиту).
    """
    status: str = Field(min_length=1)
    user_id: str = Field(min_length=1)


class ConnectionOut(CamelModel):
    id: str
    user_id: str
    target_user_id: str
    status: str
    created_at: datetime


class ConnectionView(ConnectionOut):
    other_user_id: Optional[str] = None
    direction: Optional[str] = None


# --- Схеми для листування ---

class ThreadCreate(CamelModel):
    user_id1: str = Field(min_length=1)
    user_id2: str = Field(min_length=1)


class ThreadOut(CamelModel):
    id: str
    user1_id: str
    user2_id: str
    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None
    created_at: datetime


class ThreadSummary(ThreadOut):
    other_user: Optional[UserPublic] = None
    unread_count: int = 0


class MessageCreate(CamelModel):
    thread_id: str = Field(min_length=1)
    sender_id: str = Field(min_length=1)
    text: str


class MessageOut(CamelModel):
    id: str
    thread_id: str
    sender_id: str
    text: str
    read: bool
    timestamp: datetime


class MarkReadRequest(CamelModel):
    user_id: str = Field(min_length=1)


class MarkReadResponse(SuccessResponse):
    updated: int = 0


class UnreadCountOut(CamelModel):
    thread_id: str
    user_id: str
    count: int


# --- Схеми для модерації ---

class BlockCreate(CamelModel):
    blocked_user_id: str = Field(min_length=1)


class BlockOut(CamelModel):
    id: str
    user_id: str
    blocked_user_id: str
    created_at: datetime


class BlockAudit(BlockOut):
    user: UserPublic
    blocked_user: UserPublic


class ReportCreate(CamelModel):
    reporter_id: str = Field(min_length=1)
    reported_user_id: str = Field(min_length=1)
    reason: str
    details: Optional[str] = None


class ReportOut(CamelModel):
    id: str
    reporter_id: str
    reported_user_id: str
    reason: str
    details: Optional[str] = None
    status: str
    created_at: datetime


class ReportAudit(ReportOut):
    reporter: UserPublic
    reported_user: UserPublic


class ReportStatusUpdate(CamelModel):
    status: str = Field(min_length=1)


# --- Схеми для подій ---

class EventCreate(CamelModel):
    user_id: str = Field(min_length=1)
    title: str
    description: Optional[str] = None
    date: str
    time: Optional[str] = None
    location: str
    category: str


class EventUpdate(CamelModel):
    user_id: str = Field(min_length=1)
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[str] = Field(default=None, min_length=1)
    time: Optional[str] = None
    location: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)


class EventOut(CamelModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    date: str
    time: Optional[str] = None
    location: str
    category: str
    created_at: datetime


class EventWithOwner(EventOut):
    user: UserPublic
    attendee_count: int = 0


class AttendRequest(CamelModel):
    user_id: str = Field(min_length=1)


class AttendeeOut(CamelModel):
    id: str
    event_id: str
    user_id: str
    created_at: datetime


class AttendeeWithUser(AttendeeOut):
    user: UserPublic


# --- Схеми для бізнесів та вітальних карток ---

class BusinessCreate(CamelModel):
    user_id: str = Field(min_length=1)
    name: str
    category: str
    description: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    promotion: Optional[str] = None


class BusinessUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    promotion: Optional[str] = None
    active: Optional[bool] = None


class BusinessOut(CamelModel):
    id: str
    user_id: str
    name: str
    category: str
    description: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    promotion: Optional[str] = None
    active: bool
    created_at: datetime


class BusinessWithOwner(BusinessOut):
    user: UserPublic


class WelcomeCardCreate(CamelModel):
    header: str
    title: str
    bullets: List[str]
    icon: Optional[str] = None
    accent_color: Optional[str] = None
    border_color: Optional[str] = None
    promo_text: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: int = 0
    active: bool = True


class WelcomeCardUpdate(CamelModel):
    header: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = Field(default=None, min_length=1)
    bullets: Optional[List[str]] = None
    icon: Optional[str] = None
    accent_color: Optional[str] = None
    border_color: Optional[str] = None
    promo_text: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: Optional[int] = None
    active: Optional[bool] = None


class WelcomeCardOut(CamelModel):
    id: str
    sort_order: int
    icon: str
    header: str
    title: str
    bullets: List[str]
    accent_color: str
    border_color: str
    promo_text: Optional[str] = None
    image_url: Optional[str] = None
    active: bool
    created_at: datetime
