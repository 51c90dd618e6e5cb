# saconnect/routers/moderation.py
from typing import List

from fastapi import APIRouter, Depends

from .. import models, schemas
from ..auth import get_admin_user
from ..dependencies import get_moderation_service
from ..services import ModerationService

router = APIRouter(prefix="/api", tags=["moderation"])


@router.post("/users/{user_id}/block", response_model=schemas.BlockOut)
def block_user(user_id: str, data: schemas.BlockCreate, service: ModerationService = Depends(get_moderation_service)):
    """
    Блокує користувача (повторний виклик повертає наявне блокування).

    Args:
        user_id (str): Хто блокує.
        data (schemas.BlockCreate): blockedUserId.
        service (ModerationService): Сервіс модерації.

    Returns:
        schemas.BlockOut: Запис блокування.
    """
    return service.block(user_id, data.blocked_user_id)


@router.delete("/users/{user_id}/block/{blocked_user_id}", response_model=schemas.SuccessResponse)
def unblock_user(user_id: str, blocked_user_id: str, service: ModerationService = Depends(get_moderation_service)):
    service.unblock(user_id, blocked_user_id)
    return {"success": True}


@router.get("/users/{user_id}/blocked", response_model=List[str])
def read_blocked_users(user_id: str, service: ModerationService = Depends(get_moderation_service)):
    return service.list_blocked(user_id)


@router.post("/reports", response_model=schemas.ReportOut)
def report_user(data: schemas.ReportCreate, service: ModerationService = Depends(get_moderation_service)):
    """
    Надсилає скаргу на користувача.

    Raises:
        ValidationError: Якщо причину не вказано.
    """
    return service.report(data.reporter_id, data.reported_user_id, data.reason, data.details)


# --- Ендпоінти для модераторів ---

@router.get("/admin/reports", response_model=List[schemas.ReportAudit])
def read_reports(admin: models.User = Depends(get_admin_user),
                 service: ModerationService = Depends(get_moderation_service)):
    """
    Повертає всі скарги, найновіші першими.

    Args:
        admin (models.User): Модератор із заголовка X-User-Id.
        service (ModerationService): Сервіс модерації.

    Returns:
        List[schemas.ReportAudit]: Скарги з обома користувачами.
    """
    return service.list_reports()


@router.patch("/admin/reports/{report_id}", response_model=schemas.ReportOut)
def update_report_status(report_id: str, data: schemas.ReportStatusUpdate,
                         admin: models.User = Depends(get_admin_user),
                         service: ModerationService = Depends(get_moderation_service)):
    return service.set_report_status(report_id, data.status)


@router.get("/admin/blocks", response_model=List[schemas.BlockAudit])
def read_all_blocks(admin: models.User = Depends(get_admin_user),
                    service: ModerationService = Depends(get_moderation_service)):
    return service.list_blocks()
