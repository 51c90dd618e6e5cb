# saconnect/services/discovery.py
import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from .. import models
from ..errors import NotFound
from .moderation import blocked_user_ids

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371


def round_km(km: float) -> float:
    """Округлення до 0.1 км, половина вгору (0.25 -> 0.3)."""
    return math.floor(km * 10 + 0.5) / 10


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Відстань по великому колу між двома точками.

    Args:
        lat1 (float): Широта першої точки.
        lon1 (float): Довгота першої точки.
        lat2 (float): Широта другої точки.
        lon2 (float): Довгота другої точки.

    Returns:
        float: Відстань у кілометрах, округлена до 0.1.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round_km(EARTH_RADIUS_KM * c)


def has_coordinates(user: models.User) -> bool:
    return user.lat is not None and user.lon is not None


@dataclass
class Candidate:
    user: models.User
    distance: Optional[float]


class DiscoveryService:
    """Стрічка родин поруч."""

    def __init__(self, db: Session):
        self.db = db

    def discover(self, user_id: str) -> List[Candidate]:
        """
        Повертає кандидатів для користувача, найближчі першими.

        Не повертає самого користувача, тих, з ким є блокування в будь-якому
        напрямку, та облікові записи модераторів. Кандидати без відстані
        (немає координат у когось із двох) йдуть у кінці.

        Args:
            user_id (str): Ідентифікатор користувача, що шукає.

        Returns:
            List[Candidate]: Кандидати з відстанню в км або None.

        Raises:
            NotFound: Якщо користувача не існує.
        """
        current = self.db.get(models.User, user_id)
        if current is None:
            raise NotFound("User not found")

        excluded = blocked_user_ids(self.db, user_id)
        excluded.add(user_id)

        users = self.db.query(models.User).options(
            selectinload(models.User.family_members)
        ).filter(
            models.User.role != "admin"
        ).order_by(models.User.created_at).all()

        candidates = []
        for user in users:
            if user.id in excluded:
                continue
            distance = None
            if has_coordinates(current) and has_coordinates(user):
                distance = haversine_km(current.lat, current.lon, user.lat, user.lon)
            candidates.append(Candidate(user, distance))

        # Без відстані - як нескінченність
        candidates.sort(key=lambda c: math.inf if c.distance is None else c.distance)
        logger.debug("Discovery for %s returned %d candidates", user_id, len(candidates))
        return candidates
