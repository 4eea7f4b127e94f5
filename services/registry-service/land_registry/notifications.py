"""
User-facing notifications.

Every repository call ends in exactly one notification: a confirmation
on success or an error describing the operation and the backend message.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class Notifier(ABC):
    """Sink for user-facing notifications."""

    @abstractmethod
    def success(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass


class LoggingNotifier(Notifier):
    """Notifier that writes notifications to the service log."""

    def success(self, message: str) -> None:
        logger.info("notification_success", message=message)

    def error(self, message: str) -> None:
        logger.warning("notification_error", message=message)


class CollectingNotifier(Notifier):
    """Notifier that keeps notifications in memory, newest last."""

    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def success(self, message: str) -> None:
        self.notifications.append(Notification("success", message))

    def error(self, message: str) -> None:
        self.notifications.append(Notification("error", message))

    def messages(self, level: str) -> List[str]:
        return [n.message for n in self.notifications if n.level == level]

    def clear(self) -> None:
        self.notifications.clear()
