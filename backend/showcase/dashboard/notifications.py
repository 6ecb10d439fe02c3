"""User-facing notifications (the dashboard's toasts)."""
import logging
from dataclasses import dataclass, field as dataclass_field
from datetime import datetime
from typing import Optional

logger = logging.getLogger("showcase.dashboard.notifications")


@dataclass
class Notification:
    level: str  # success, info, error
    message: str
    field: Optional[str] = None
    created_at: datetime = dataclass_field(default_factory=datetime.utcnow)


class Notifier:
    """Collects notifications and mirrors them to the log.

    Screens read ``history`` (or subclass and override ``emit``) to render them.
    """

    def __init__(self):
        self.history: list[Notification] = []

    def emit(self, notification: Notification) -> None:
        self.history.append(notification)
        if notification.level == "error":
            logger.error(notification.message)
        else:
            logger.info(notification.message)

    def success(self, message: str, field: Optional[str] = None) -> None:
        self.emit(Notification("success", message, field))

    def info(self, message: str, field: Optional[str] = None) -> None:
        self.emit(Notification("info", message, field))

    def error(self, message: str, field: Optional[str] = None) -> None:
        self.emit(Notification("error", message, field))

    def errors(self) -> list[Notification]:
        return [n for n in self.history if n.level == "error"]
