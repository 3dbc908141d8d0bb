# apps/notifications/models.py
from django.conf import settings
from django.db import models

from apps.notifications.domain.entities import NotificationStatus, NotificationType


class Notification(models.Model):
    task = models.ForeignKey('tasks.Task', on_delete=models.CASCADE, related_name='notifications')
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, on_delete=models.SET_NULL, related_name='sent_notifications')
    receiver = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')

    class TypeChoices(models.TextChoices):
        TASK_ASSIGNED = NotificationType.TASK_ASSIGNED.value, 'Task assigned'
        TASK_STATUS_CHANGED = NotificationType.TASK_STATUS_CHANGED.value, 'Task status changed'
        TASK_COMPLETED = NotificationType.TASK_COMPLETED.value, 'Task completed'
        TASK_COMMENT = NotificationType.TASK_COMMENT.value, 'Task comment'

    type = models.CharField(max_length=30, choices=TypeChoices.choices)

    class StatusChoices(models.TextChoices):
        UNREAD = NotificationStatus.UNREAD.value, 'Unread'
        READ = NotificationStatus.READ.value, 'Read'

    status = models.CharField(max_length=10, choices=StatusChoices.choices, default=StatusChoices.UNREAD)

    title = models.CharField(max_length=200)
    message = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['receiver', 'status'], name='notif_receiver_status_idx'),
        ]

    def __str__(self):
        return f"{self.type} -> {self.receiver_id}: {self.title}"
