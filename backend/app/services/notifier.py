"""User-facing notifications emitted by settings operations."""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str


class Notifier:
    """Collects notifications for the caller of one operation.

    Dispatching is fire-and-forget: nothing is returned and callers never
    branch on it. Every notification is also logged.
    """

    def __init__(self, context: str | None = None):
        self.context = context
        self.notifications: list[Notification] = []

    def dispatch(self, level: NotificationLevel, message: str) -> None:
        self.notifications.append(Notification(level=level, message=message))
        log_level = logging.INFO if level == NotificationLevel.SUCCESS else logging.WARNING
        logger.log(log_level, message, extra={"database": self.context})

    def success(self, message: str) -> None:
        self.dispatch(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> None:
        self.dispatch(NotificationLevel.ERROR, message)

    def clear(self) -> None:
        self.notifications.clear()
