# saconnect/services/profiles.py
import logging
from typing import List

from sqlalchemy.orm import Session

from .. import models, schemas
from ..errors import NotFound

logger = logging.getLogger(__name__)


class ProfileService:
    """Профіль родини та її члени."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> models.User:
        """
        Повертає користувача за id.

        Raises:
            NotFound: Якщо користувача не існує.
        """
        user = self.db.get(models.User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def update_user(self, user_id: str, changes: schemas.UserUpdate) -> models.User:
        """
        Оновлює поля профілю.

        Args:
            user_id (str): Ідентифікатор користувача.
            changes (schemas.UserUpdate): Лише передані поля.

        Returns:
            models.User: Оновлений користувач.
        """
        user = self.get_user(user_id)
        for key, value in changes.model_dump(exclude_unset=True).items():
            if key == "family_name" and value is None:
                continue
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def list_family_members(self, user_id: str) -> List[models.FamilyMember]:
        self.get_user(user_id)
        return self.db.query(models.FamilyMember).filter(
            models.FamilyMember.user_id == user_id
        ).order_by(models.FamilyMember.created_at).all()

    def add_family_member(self, user_id: str, member: schemas.FamilyMemberCreate) -> models.FamilyMember:
        self.get_user(user_id)
        db_member = models.FamilyMember(user_id=user_id, name=member.name, age=member.age)
        self.db.add(db_member)
        self.db.commit()
        self.db.refresh(db_member)
        return db_member

    def _get_member(self, member_id: str) -> models.FamilyMember:
        member = self.db.get(models.FamilyMember, member_id)
        if member is None:
            raise NotFound("Family member not found")
        return member

    def update_family_member(self, member_id: str, changes: schemas.FamilyMemberUpdate) -> models.FamilyMember:
        member = self._get_member(member_id)
        for key, value in changes.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(member, key, value)
        self.db.commit()
        self.db.refresh(member)
        return member

    def delete_family_member(self, member_id: str) -> None:
        member = self._get_member(member_id)
        owner_id = member.user_id
        self.db.delete(member)
        self.db.commit()
        logger.info("Removed family member %s of user %s", member_id, owner_id)
