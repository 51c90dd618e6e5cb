# saconnect/auth.py
from typing import Optional

from fastapi import Depends, Header
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import models
from .config import BCRYPT_ROUNDS
from .database import get_db
from .errors import Forbidden

# Налаштування контексту для хешування паролів
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def get_password_hash(password: str) -> str:
    """
    Хешує пароль користувача.

    Args:
        password (str): Звичайний текст пароля.

    Returns:
        str: Захешований пароль.
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Перевіряє відповідність звичайного пароля та захешованого.

    Args:
        plain_password (str): Звичайний текст пароля.
        hashed_password (str): Захешований пароль.

    Returns:
        bool: True, якщо паролі співпадають, інакше False.
    """
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    """Витрачає стільки ж часу, скільки справжня перевірка пароля."""
    pwd_context.dummy_verify()


def get_admin_user(x_user_id: Optional[str] = Header(None), db: Session = Depends(get_db)) -> models.User:
    """
    Повертає модератора, від імені якого виконується запит.

    Args:
        x_user_id (str, optional): Заголовок X-User-Id.
        db (Session): Сесія бази даних.

    Returns:
        models.User: Користувач з роллю "admin".

    Raises:
        Forbidden: Якщо заголовок відсутній або користувач не є модератором.
    """
    if not x_user_id:
        raise Forbidden()
    user = db.get(models.User, x_user_id)
    if user is None or not user.is_admin:
        raise Forbidden()
    return user
