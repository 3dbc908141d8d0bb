# apps/notifications/adapters/orm_sender.py
import logging

from apps.notifications.domain.entities import NotificationDraft
from apps.notifications.models import Notification
from apps.notifications.ports.senders import INotificationSender

logger = logging.getLogger(__name__)


class DjangoNotificationSender(INotificationSender):
    def send(self, draft: NotificationDraft) -> Notification:
        notification = Notification.objects.create(
            task_id=draft.task_id,
            sender_id=draft.sender_id,
            receiver_id=draft.receiver_id,
            type=draft.type.value,
            title=draft.title,
            message=draft.message,
        )
        logger.info("Notification %s (%s) created for user %s", notification.id, draft.type.value, draft.receiver_id)
        return notification
