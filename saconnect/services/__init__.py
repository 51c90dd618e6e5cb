# saconnect/services/__init__.py
from .connections import ConnectionService
from .discovery import DiscoveryService
from .events import EventService
from .identity import IdentityService
from .listings import BusinessService, WelcomeCardService
from .messaging import MessagingService
from .moderation import ModerationService
from .profiles import ProfileService

__all__ = [
    "BusinessService",
    "ConnectionService",
    "DiscoveryService",
    "EventService",
    "IdentityService",
    "MessagingService",
    "ModerationService",
    "ProfileService",
    "WelcomeCardService",
]
