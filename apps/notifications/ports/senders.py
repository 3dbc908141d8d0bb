# apps/notifications/ports/senders.py
from abc import ABC, abstractmethod

from apps.notifications.domain.entities import NotificationDraft


class INotificationSender(ABC):
    @abstractmethod
    def send(self, draft: NotificationDraft) -> None:
        """Zapisuje powiadomienie; dostarczenie do klientów idzie przez szynę realtime."""
        pass
