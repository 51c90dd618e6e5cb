# saconnect/services/identity.py
import logging
import secrets
from datetime import timedelta
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..auth import dummy_verify, get_password_hash, verify_password
from ..config import RESET_TOKEN_EXPIRE_MINUTES
from ..errors import Conflict, InvalidOrExpired, Unauthorized, ValidationError

logger = logging.getLogger(__name__)

MIN_RESET_PASSWORD_LENGTH = 8


def generate_reset_code() -> str:
    """Шестизначний числовий код (100000-999999)."""
    return str(secrets.randbelow(900000) + 100000)


class IdentityService:
    """
    Реєстрація, перевірка облікових даних та скидання пароля.

    Args:
        db (Session): Сесія бази даних.
        admin_emails (Iterable[str]): Адреси, що отримують роль "admin" під час реєстрації.
    """

    def __init__(self, db: Session, admin_emails: Iterable[str] = ()):
        self.db = db
        self.admin_emails = frozenset(admin_emails)

    def get_user_by_email(self, email: str) -> Optional[models.User]:
        """
        Отримує користувача за email (точний збіг, з урахуванням регістру).

        Args:
            email (str): Електронна пошта користувача.

        Returns:
            models.User або None: Об'єкт користувача або None, якщо не знайдено.
        """
        return self.db.query(models.User).filter(models.User.email == email).first()

    def create_account(self, email: str, password: str, family_name: str) -> models.User:
        """
        Створює новий обліковий запис.

        Args:
            email (str): Електронна пошта.
            password (str): Пароль у відкритому вигляді.
            family_name (str): Назва родини.

        Returns:
            models.User: Створений користувач.

        Raises:
            ValidationError: Якщо не вказано обов'язкове поле.
            Conflict: Якщо email вже зареєстровано.
        """
        if not email or not password or not family_name:
            raise ValidationError("Email, password, and family name are required")
        if self.get_user_by_email(email):
            raise Conflict("Email already registered")

        user = models.User(
            email=email,
            password_hash=get_password_hash(password),
            family_name=family_name,
            role="admin" if email in self.admin_emails else "user",
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Паралельна реєстрація з тією ж адресою
            self.db.rollback()
            raise Conflict("Email already registered")
        self.db.refresh(user)
        logger.info("Created account %s (role=%s)", user.id, user.role)
        return user

    def verify_credentials(self, email: str, password: str) -> models.User:
        """
        Перевіряє email та пароль.

        Не розкриває, яка саме частина невірна: для невідомого email
        також виконується (фіктивна) перевірка хешу.

        Raises:
            Unauthorized: Якщо email невідомий або пароль не збігається.
        """
        user = self.get_user_by_email(email)
        if user is None:
            dummy_verify()
            raise Unauthorized("Invalid credentials")
        if not verify_password(password, user.password_hash):
            raise Unauthorized("Invalid credentials")
        return user

    def issue_reset_token(self, email: str) -> Optional[str]:
        """
        Видає код для скидання пароля.

        Args:
            email (str): Електронна пошта користувача.

        Returns:
            str або None: Шестизначний код, або None, якщо email невідомий
            (відповідь для клієнта однакова в обох випадках).
        """
        user = self.get_user_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return None

        reset = models.PasswordResetToken(
            user_id=user.id,
            token=generate_reset_code(),
            expires_at=models.utcnow() + timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES),
        )
        self.db.add(reset)
        self.db.commit()
        logger.info("Issued password reset token for user %s", user.id)
        return reset.token

    def _find_reset_token(self, email: str, token: str, for_update: bool = False):
        user = self.get_user_by_email(email)
        if user is None:
            raise InvalidOrExpired()

        query = self.db.query(models.PasswordResetToken).filter(
            models.PasswordResetToken.user_id == user.id,
            models.PasswordResetToken.token == token,
            models.PasswordResetToken.used.is_(False),
            models.PasswordResetToken.expires_at > models.utcnow(),
        ).order_by(models.PasswordResetToken.created_at.desc())
        if for_update:
            query = query.with_for_update()

        reset = query.first()
        if reset is None:
            raise InvalidOrExpired()
        return user, reset

    def verify_reset_token(self, email: str, token: str) -> bool:
        """
        Перевіряє код скидання пароля, не використовуючи його.

        Raises:
            InvalidOrExpired: Якщо код невірний, використаний або прострочений.
        """
        self._find_reset_token(email, token)
        return True

    def consume_reset_token(self, email: str, token: str, new_password: str) -> models.User:
        """
        Використовує код і встановлює новий пароль.

        Позначка used та новий хеш зберігаються одним комітом, тому код
        не можна використати повторно.

        Args:
            email (str): Електронна пошта користувача.
            token (str): Шестизначний код.
            new_password (str): Новий пароль (не менше 8 символів).

        Returns:
            models.User: Користувач з оновленим паролем.

        Raises:
            ValidationError: Якщо новий пароль закороткий.
            InvalidOrExpired: Якщо код невірний, використаний або прострочений.
        """
        if not new_password or len(new_password) < MIN_RESET_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_RESET_PASSWORD_LENGTH} characters")

        user, reset = self._find_reset_token(email, token, for_update=True)
        reset.used = True
        user.password_hash = get_password_hash(new_password)
        self.db.commit()
        logger.info("Password reset completed for user %s", user.id)
        return user
