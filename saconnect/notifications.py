# saconnect/notifications.py
"""
Приймач push-сповіщень.

Доставка (Expo, APNs, FCM) - зовнішня система. Маршрути ставлять виклик
``send`` у BackgroundTasks і не чекають результату.
"""
import logging
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


class NotificationSink:
    """Приймач за замовчуванням: лише записує сповіщення в журнал."""

    def send(self, user_ids: Iterable[str], title: str, body: str,
             data: Optional[Dict[str, Any]] = None) -> None:
        try:
            self.deliver(list(user_ids), title, body, data or {})
        except Exception:
            # Сповіщення не повинні ламати запит
            logger.exception("Failed to deliver notification %r", title)

    def deliver(self, user_ids, title, body, data) -> None:
        logger.info("Notify %s: %s - %s %s", user_ids, title, body, data)


default_sink = NotificationSink()


def get_notifier() -> NotificationSink:
    return default_sink
