# saconnect/routers/auth.py
import logging

from fastapi import APIRouter, Depends

from .. import schemas
from ..config import RESET_TOKEN_IN_RESPONSE
from ..dependencies import get_identity_service
from ..services import IdentityService

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)

RESET_MESSAGE = "If an account exists with this email, you will receive a reset code."


@router.post("/signup", response_model=schemas.AuthResponse)
def signup(data: schemas.SignupRequest, service: IdentityService = Depends(get_identity_service)):
    """
    Реєструє нову родину.

    Args:
        data (schemas.SignupRequest): email, password, familyName.
        service (IdentityService): Сервіс облікових записів.

    Returns:
        schemas.AuthResponse: Користувач без пароля.

    Raises:
        Conflict: Якщо email вже зареєстровано.
    """
    user = service.create_account(data.email, data.password, data.family_name)
    return {"user": user}


@router.post("/signin", response_model=schemas.AuthResponse)
def signin(data: schemas.SigninRequest, service: IdentityService = Depends(get_identity_service)):
    """
    Перевіряє облікові дані.

    Args:
        data (schemas.SigninRequest): email та password.
        service (IdentityService): Сервіс облікових записів.

    Returns:
        schemas.AuthResponse: Користувач разом із членами родини.

    Raises:
        Unauthorized: Якщо email або пароль невірні.
    """
    user = service.verify_credentials(data.email, data.password)
    return {"user": user}


@router.post("/forgot-password", response_model=schemas.ForgotPasswordResponse)
def forgot_password(data: schemas.ForgotPasswordRequest, service: IdentityService = Depends(get_identity_service)):
    """
    Генерує шестизначний код для скидання пароля.

    Відповідь однакова незалежно від того, чи існує обліковий запис.
    Доставка коду листом - зовнішній сервіс.
    """
    token = service.issue_reset_token(data.email)
    response = {"success": True, "message": RESET_MESSAGE}
    if token and RESET_TOKEN_IN_RESPONSE:
        response["token"] = token
    return response


@router.post("/verify-reset-token", response_model=schemas.VerifyResetTokenResponse)
def verify_reset_token(data: schemas.VerifyResetTokenRequest, service: IdentityService = Depends(get_identity_service)):
    return {"valid": service.verify_reset_token(data.email, data.token)}


@router.post("/reset-password", response_model=schemas.SuccessResponse)
def reset_password(data: schemas.ResetPasswordRequest, service: IdentityService = Depends(get_identity_service)):
    """
    Встановлює новий пароль за кодом.

    Raises:
        ValidationError: Пароль коротший за 8 символів.
        InvalidOrExpired: Код невірний, використаний або прострочений.
    """
    service.consume_reset_token(data.email, data.token, data.new_password)
    return {"success": True, "message": "Password has been reset successfully"}
