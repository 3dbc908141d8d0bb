# apps/notifications/domain/entities.py
from dataclasses import dataclass
from enum import Enum


class NotificationType(str, Enum):
    TASK_ASSIGNED = 'TASK_ASSIGNED'
    TASK_STATUS_CHANGED = 'TASK_STATUS_CHANGED'
    TASK_COMPLETED = 'TASK_COMPLETED'
    TASK_COMMENT = 'TASK_COMMENT'


class NotificationStatus(str, Enum):
    UNREAD = 'UNREAD'
    READ = 'READ'


@dataclass(frozen=True)
class NotificationDraft:
    task_id: int
    sender_id: int
    receiver_id: int
    type: NotificationType
    title: str
    message: str
