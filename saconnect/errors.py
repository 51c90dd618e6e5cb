# saconnect/errors.py
"""
Типізовані помилки сервісного шару.

Сервіси піднімають ці винятки, а обробники в main.py перетворюють їх
на відповідь ``{"error": message}`` з відповідним HTTP статусом.
"""


class AppError(Exception):
    """
    Базова помилка застосунку.

    Attributes:
        status_code (int): HTTP статус відповіді.
        message (str): Повідомлення, яке бачить клієнт.
    """
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Invalid credentials"


class Forbidden(AppError):
    status_code = 403
    default_message = "Unauthorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    # Мобільний клієнт очікує 400 для дублікатів
    status_code = 400
    default_message = "Already exists"


class InvalidTransition(AppError):
    status_code = 400
    default_message = "Invalid status transition"


class InvalidOrExpired(AppError):
    status_code = 400
    default_message = "Invalid or expired reset token"
