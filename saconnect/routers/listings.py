# saconnect/routers/listings.py
from typing import List

from fastapi import APIRouter, Depends

from .. import models, schemas
from ..auth import get_admin_user
from ..dependencies import get_business_service, get_welcome_card_service
from ..services import BusinessService, WelcomeCardService

router = APIRouter(prefix="/api", tags=["listings"])


# --- Бізнеси ---

@router.get("/businesses", response_model=List[schemas.BusinessWithOwner])
def read_businesses(service: BusinessService = Depends(get_business_service)):
    """
    Повертає активні бізнеси, найновіші першими.

    Returns:
        List[schemas.BusinessWithOwner]: Бізнеси з власником (без пароля).
    """
    return service.list_active()


@router.get("/businesses/{business_id}", response_model=schemas.BusinessWithOwner)
def read_business(business_id: str, service: BusinessService = Depends(get_business_service)):
    return service.get(business_id)


@router.get("/users/{user_id}/businesses", response_model=List[schemas.BusinessOut])
def read_user_businesses(user_id: str, service: BusinessService = Depends(get_business_service)):
    return service.list_for_user(user_id)


@router.post("/businesses", response_model=schemas.BusinessOut)
def create_business(business: schemas.BusinessCreate, service: BusinessService = Depends(get_business_service)):
    """
    Додає бізнес.

    Args:
        business (schemas.BusinessCreate): Дані бізнесу; logoUrl - готове посилання.
        service (BusinessService): Сервіс бізнесів.

    Returns:
        schemas.BusinessOut: Створений бізнес.
    """
    return service.create(business)


@router.put("/businesses/{business_id}", response_model=schemas.BusinessOut)
def update_business(business_id: str, changes: schemas.BusinessUpdate,
                    service: BusinessService = Depends(get_business_service)):
    return service.update(business_id, changes)


@router.delete("/businesses/{business_id}", response_model=schemas.SuccessResponse)
def delete_business(business_id: str, service: BusinessService = Depends(get_business_service)):
    service.delete(business_id)
    return {"success": True}


# --- Вітальні картки ---

@router.get("/welcome-cards", response_model=List[schemas.WelcomeCardOut])
def read_welcome_cards(service: WelcomeCardService = Depends(get_welcome_card_service)):
    return service.list_active()


@router.get("/admin/welcome-cards", response_model=List[schemas.WelcomeCardOut])
def read_all_welcome_cards(admin: models.User = Depends(get_admin_user),
                           service: WelcomeCardService = Depends(get_welcome_card_service)):
    return service.list_all()


@router.post("/admin/welcome-cards", response_model=schemas.WelcomeCardOut)
def create_welcome_card(card: schemas.WelcomeCardCreate, admin: models.User = Depends(get_admin_user),
                        service: WelcomeCardService = Depends(get_welcome_card_service)):
    """
    Створює вітальну картку.

    Raises:
        Forbidden: Запит не від модератора.
        ValidationError: Якщо не вказано header, title або bullets.
    """
    return service.create(card)


@router.put("/admin/welcome-cards/{card_id}", response_model=schemas.WelcomeCardOut)
def update_welcome_card(card_id: str, changes: schemas.WelcomeCardUpdate,
                        admin: models.User = Depends(get_admin_user),
                        service: WelcomeCardService = Depends(get_welcome_card_service)):
    return service.update(card_id, changes)


@router.delete("/admin/welcome-cards/{card_id}", response_model=schemas.SuccessResponse)
def delete_welcome_card(card_id: str, admin: models.User = Depends(get_admin_user),
                        service: WelcomeCardService = Depends(get_welcome_card_service)):
    service.delete(card_id)
    return {"success": True}
