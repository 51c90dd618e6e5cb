# saconnect/dependencies.py
"""Фабрики сервісів для Depends: один сервіс на запит, з сесією цього запиту."""
from fastapi import Depends
from sqlalchemy.orm import Session

from . import config
from .database import get_db
from .services import (
    BusinessService, ConnectionService, DiscoveryService, EventService, IdentityService,
    MessagingService, ModerationService, ProfileService, WelcomeCardService,
)


def get_identity_service(db: Session = Depends(get_db)) -> IdentityService:
    return IdentityService(db, admin_emails=config.ADMIN_EMAILS)


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


def get_connection_service(db: Session = Depends(get_db)) -> ConnectionService:
    return ConnectionService(db)


def get_discovery_service(db: Session = Depends(get_db)) -> DiscoveryService:
    return DiscoveryService(db)


def get_messaging_service(db: Session = Depends(get_db)) -> MessagingService:
    return MessagingService(db)


def get_moderation_service(db: Session = Depends(get_db)) -> ModerationService:
    return ModerationService(db)


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    return EventService(db)


def get_business_service(db: Session = Depends(get_db)) -> BusinessService:
    return BusinessService(db)


def get_welcome_card_service(db: Session = Depends(get_db)) -> WelcomeCardService:
    return WelcomeCardService(db)
