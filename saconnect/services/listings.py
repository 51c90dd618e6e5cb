# saconnect/services/listings.py
import logging
from typing import List

from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from ..errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CARD_ICON = "heart"
DEFAULT_CARD_COLOR = "#E8703A"
DEFAULT_PROMO_TEXT = "Watch this space for special promotions and events"


class BusinessService:
    """Каталог місцевих бізнесів."""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> List[models.Business]:
        return self.db.query(models.Business).options(
            joinedload(models.Business.user)
        ).filter(
            models.Business.active.is_(True)
        ).order_by(models.Business.created_at.desc()).all()

    def get(self, business_id: str) -> models.Business:
        business = self.db.get(models.Business, business_id)
        if business is None:
            raise NotFound("Business not found")
        return business

    def list_for_user(self, user_id: str) -> List[models.Business]:
        return self.db.query(models.Business).filter(
            models.Business.user_id == user_id
        ).order_by(models.Business.created_at.desc()).all()

    def create(self, business: schemas.BusinessCreate) -> models.Business:
        """
        Додає бізнес користувача.

        Raises:
            ValidationError: Якщо не вказано name або category.
            NotFound: Якщо власника не існує.
        """
        if not business.name.strip() or not business.category.strip():
            raise ValidationError("User ID, name, and category are required")
        if self.db.get(models.User, business.user_id) is None:
            raise NotFound("User not found")

        db_business = models.Business(**business.model_dump(), active=True)
        self.db.add(db_business)
        self.db.commit()
        self.db.refresh(db_business)
        logger.info("User %s listed business %s", business.user_id, db_business.id)
        return db_business

    def update(self, business_id: str, changes: schemas.BusinessUpdate) -> models.Business:
        business = self.get(business_id)
        for key, value in changes.model_dump(exclude_unset=True).items():
            if key in ("name", "category", "active") and value is None:
                continue
            setattr(business, key, value)
        self.db.commit()
        self.db.refresh(business)
        return business

    def delete(self, business_id: str) -> None:
        business = self.get(business_id)
        self.db.delete(business)
        self.db.commit()


class WelcomeCardService:
    """Вітальні картки на головному екрані."""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> List[models.WelcomeCard]:
        return self.db.query(models.WelcomeCard).filter(
            models.WelcomeCard.active.is_(True)
        ).order_by(models.WelcomeCard.sort_order, models.WelcomeCard.created_at).all()

    def list_all(self) -> List[models.WelcomeCard]:
        return self.db.query(models.WelcomeCard).order_by(
            models.WelcomeCard.sort_order, models.WelcomeCard.created_at
        ).all()

    def get(self, card_id: str) -> models.WelcomeCard:
        card = self.db.get(models.WelcomeCard, card_id)
        if card is None:
            raise NotFound("Card not found")
        return card

    def create(self, card: schemas.WelcomeCardCreate) -> models.WelcomeCard:
        if not card.header.strip() or not card.title.strip() or not card.bullets:
            raise ValidationError("Header, title, and bullets are required")

        db_card = models.WelcomeCard(
            sort_order=card.sort_order,
            icon=card.icon or DEFAULT_CARD_ICON,
            header=card.header,
            title=card.title,
            bullets=card.bullets,
            accent_color=card.accent_color or DEFAULT_CARD_COLOR,
            border_color=card.border_color or DEFAULT_CARD_COLOR,
            promo_text=card.promo_text or DEFAULT_PROMO_TEXT,
            image_url=card.image_url,
            active=card.active,
        )
        self.db.add(db_card)
        self.db.commit()
        self.db.refresh(db_card)
        return db_card

    def update(self, card_id: str, changes: schemas.WelcomeCardUpdate) -> models.WelcomeCard:
        card = self.get(card_id)
        for key, value in changes.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(card, key, value)
        self.db.commit()
        self.db.refresh(card)
        return card

    def delete(self, card_id: str) -> None:
        card = self.get(card_id)
        self.db.delete(card)
        self.db.commit()
