import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    level: NotificationLevel
    message: str
    description: Optional[str] = None


class Notifier:
    """Queue of transient user-facing notifications, drained by whoever renders them."""

    def __init__(self):
        self._pending: List[Notification] = []

    def push(self, level: NotificationLevel, message: str, description: Optional[str] = None) -> Notification:
        notification = Notification(level=level, message=message, description=description)
        self._pending.append(notification)
        if level == NotificationLevel.ERROR:
            logger.warning(f"{message} {description or ''}".strip())
        return notification

    def success(self, message: str, description: Optional[str] = None) -> Notification:
        return self.push(NotificationLevel.SUCCESS, message, description)

    def info(self, message: str, description: Optional[str] = None) -> Notification:
        return self.push(NotificationLevel.INFO, message, description)

    def warning(self, message: str, description: Optional[str] = None) -> Notification:
        return self.push(NotificationLevel.WARNING, message, description)

    def error(self, message: str, description: Optional[str] = None) -> Notification:
        return self.push(NotificationLevel.ERROR, message, description)

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        drained, self._pending = self._pending, []
        return drained
