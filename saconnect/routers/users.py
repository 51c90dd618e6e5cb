# saconnect/routers/users.py
from typing import List

from fastapi import APIRouter, Depends

from .. import schemas
from ..dependencies import get_discovery_service, get_profile_service
from ..services import DiscoveryService, ProfileService

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/users/{user_id}", response_model=schemas.UserProfile)
def read_user(user_id: str, service: ProfileService = Depends(get_profile_service)):
    """
    Повертає профіль родини з її членами.

    Args:
        user_id (str): Ідентифікатор користувача.
        service (ProfileService): Сервіс профілів.

    Returns:
        schemas.UserProfile: Профіль без пароля.

    Raises:
        NotFound: Якщо користувача не знайдено.
    """
    return service.get_user(user_id)


@router.put("/users/{user_id}", response_model=schemas.UserProfile)
def update_user(user_id: str, changes: schemas.UserUpdate, service: ProfileService = Depends(get_profile_service)):
    """
    Оновлює профіль родини.

    Args:
        user_id (str): Ідентифікатор користувача.
        changes (schemas.UserUpdate): Нові значення полів.
        service (ProfileService): Сервіс профілів.

    Returns:
        schemas.UserProfile: Оновлений профіль.
    """
    return service.update_user(user_id, changes)


@router.get("/users/{user_id}/family-members", response_model=List[schemas.FamilyMemberOut])
def read_family_members(user_id: str, service: ProfileService = Depends(get_profile_service)):
    return service.list_family_members(user_id)


@router.post("/users/{user_id}/family-members", response_model=schemas.FamilyMemberOut)
def add_family_member(user_id: str, member: schemas.FamilyMemberCreate,
                      service: ProfileService = Depends(get_profile_service)):
    """
    Додає члена родини.

    Args:
        user_id (str): Ідентифікатор користувача.
        member (schemas.FamilyMemberCreate): Ім'я та вік.
        service (ProfileService): Сервіс профілів.

    Returns:
        schemas.FamilyMemberOut: Створений запис.
    """
    return service.add_family_member(user_id, member)


@router.put("/family-members/{member_id}", response_model=schemas.FamilyMemberOut)
def update_family_member(member_id: str, changes: schemas.FamilyMemberUpdate,
                         service: ProfileService = Depends(get_profile_service)):
    return service.update_family_member(member_id, changes)


@router.delete("/family-members/{member_id}", response_model=schemas.SuccessResponse)
def delete_family_member(member_id: str, service: ProfileService = Depends(get_profile_service)):
    service.delete_family_member(member_id)
    return {"success": True}


@router.get("/discover/{user_id}", response_model=List[schemas.DiscoverCandidate])
def discover(user_id: str, service: DiscoveryService = Depends(get_discovery_service)):
    """
    Повертає родини поруч, найближчі першими.

    Args:
        user_id (str): Хто шукає.
        service (DiscoveryService): Сервіс пошуку.

    Returns:
        List[schemas.DiscoverCandidate]: Кандидати з distance та familyMembers.
    """
    return [
        schemas.DiscoverCandidate.model_validate(candidate.user).model_copy(update={"distance": candidate.distance})
        for candidate in service.discover(user_id)
    ]
