# saconnect/services/moderation.py
import logging
from typing import List, Optional, Set

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from .. import models
from ..errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

REPORT_STATUSES = ("pending", "reviewed", "resolved", "dismissed")


def blocked_user_ids(db: Session, user_id: str) -> Set[str]:
    """
    Усі користувачі, з якими user_id пов'язаний блокуванням у будь-якому напрямку.

    Args:
        db (Session): Сесія бази даних.
        user_id (str): Ідентифікатор користувача.

    Returns:
        Set[str]: Ті, кого заблокував user_id, та ті, хто заблокував user_id.
    """
    rows = db.query(models.UserBlock.user_id, models.UserBlock.blocked_user_id).filter(
        or_(models.UserBlock.user_id == user_id, models.UserBlock.blocked_user_id == user_id)
    ).all()
    return {blocked if blocker == user_id else blocker for blocker, blocked in rows}


def is_blocked(db: Session, user_id: str, other_user_id: str) -> bool:
    """True, якщо хоч один із двох заблокував іншого."""
    return db.query(models.UserBlock.id).filter(
        or_(
            and_(models.UserBlock.user_id == user_id, models.UserBlock.blocked_user_id == other_user_id),
            and_(models.UserBlock.user_id == other_user_id, models.UserBlock.blocked_user_id == user_id),
        )
    ).first() is not None


class ModerationService:
    """Блокування, скарги та їх перегляд модераторами."""

    def __init__(self, db: Session):
        self.db = db

    def _require_users(self, *user_ids: str) -> None:
        for user_id in user_ids:
            if self.db.get(models.User, user_id) is None:
                raise NotFound("User not found")

    def _find_block(self, user_id: str, blocked_user_id: str) -> Optional[models.UserBlock]:
        return self.db.query(models.UserBlock).filter(
            models.UserBlock.user_id == user_id,
            models.UserBlock.blocked_user_id == blocked_user_id,
        ).first()

    def block(self, user_id: str, blocked_user_id: str) -> models.UserBlock:
        """
        Блокує користувача. Повторний виклик повертає наявне блокування.

        Args:
            user_id (str): Хто блокує.
            blocked_user_id (str): Кого блокують.

        Returns:
            models.UserBlock: Запис блокування.

        Raises:
            ValidationError: Спроба заблокувати себе.
            NotFound: Якщо когось із користувачів не існує.
        """
        if user_id == blocked_user_id:
            raise ValidationError("You cannot block yourself")
        self._require_users(user_id, blocked_user_id)

        existing = self._find_block(user_id, blocked_user_id)
        if existing:
            return existing

        block = models.UserBlock(user_id=user_id, blocked_user_id=blocked_user_id)
        self.db.add(block)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return self._find_block(user_id, blocked_user_id)
        self.db.refresh(block)
        logger.info("User %s blocked %s", user_id, blocked_user_id)
        return block

    def unblock(self, user_id: str, blocked_user_id: str) -> None:
        """
        Знімає спрямоване блокування.

        Зв'язки та розмови між користувачами не змінюються.
        """
        deleted = self.db.query(models.UserBlock).filter(
            models.UserBlock.user_id == user_id,
            models.UserBlock.blocked_user_id == blocked_user_id,
        ).delete(synchronize_session=False)
        self.db.commit()
        if deleted:
            logger.info("User %s unblocked %s", user_id, blocked_user_id)

    def list_blocked(self, user_id: str) -> List[str]:
        rows = self.db.query(models.UserBlock.blocked_user_id).filter(
            models.UserBlock.user_id == user_id
        ).order_by(models.UserBlock.created_at).all()
        return [blocked for (blocked,) in rows]

    def report(self, reporter_id: str, reported_user_id: str, reason: str,
               details: Optional[str] = None) -> models.UserReport:
        """
        Створює скаргу на користувача.

        Raises:
            ValidationError: Якщо причину не вказано.
            NotFound: Якщо когось із користувачів не існує.
        """
        if not reason or not reason.strip():
            raise ValidationError("Reason is required")
        self._require_users(reporter_id, reported_user_id)

        report = models.UserReport(
            reporter_id=reporter_id,
            reported_user_id=reported_user_id,
            reason=reason.strip(),
            details=details,
        )
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        logger.info("User %s reported %s", reporter_id, reported_user_id)
        return report

    def list_reports(self) -> List[models.UserReport]:
        return self.db.query(models.UserReport).options(
            joinedload(models.UserReport.reporter),
            joinedload(models.UserReport.reported_user),
        ).order_by(models.UserReport.created_at.desc()).all()

    def set_report_status(self, report_id: str, status: str) -> models.UserReport:
        """
        Змінює статус скарги.

        Будь-який відомий статус може змінювати будь-який інший.

        Raises:
            ValidationError: Невідомий статус.
            NotFound: Скаргу не знайдено.
        """
        if status not in REPORT_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(REPORT_STATUSES)}")
        report = self.db.get(models.UserReport, report_id)
        if report is None:
            raise NotFound("Report not found")
        previous = report.status
        report.status = status
        self.db.commit()
        self.db.refresh(report)
        logger.info("Report %s status %s -> %s", report_id, previous, status)
        return report

    def list_blocks(self) -> List[models.UserBlock]:
        return self.db.query(models.UserBlock).options(
            joinedload(models.UserBlock.user),
            joinedload(models.UserBlock.blocked_user),
        ).order_by(models.UserBlock.created_at.desc()).all()
