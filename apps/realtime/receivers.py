# apps/realtime/receivers.py
from functools import partial

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.core.models import UserProfile
from apps.notifications.models import Notification
from apps.tasks.models import Task
from .bus import DELETE, INSERT, UPDATE, ChangeEvent, get_bus
from .visibility import NOTIFICATIONS, TASKS


def task_payload(task):
    return {
        'id': task.id,
        'title': task.title,
        'status': task.status,
        'assigned_to': task.assigned_to_id,
        'created_by': task.created_by_id,
        'assignee_role': UserProfile.objects.filter(user_id=task.assigned_to_id)
                                            .values_list('role', flat=True).first(),
    }


def notification_payload(notification):
    return {
        'id': notification.id,
        'task_id': notification.task_id,
        'receiver_id': notification.receiver_id,
        'type': notification.type,
        'title': notification.title,
        'status': notification.status,
    }


def publish_on_commit(event):
    """Zdarzenie trafia na szynę dopiero po zatwierdzeniu transakcji; wycofane zmiany nie są publikowane."""
    transaction.on_commit(partial(get_bus().publish, event))


@receiver(post_save, sender=Task)
def publish_task_saved(sender, instance, created, **kwargs):
    publish_on_commit(ChangeEvent(TASKS, INSERT if created else UPDATE, instance.id, task_payload(instance)))


@receiver(post_delete, sender=Task)
def publish_task_deleted(sender, instance, **kwargs):
    # Rola wykonawcy potrzebna do filtra widoczności, tak jak przy zapisie
    publish_on_commit(ChangeEvent(TASKS, DELETE, instance.id, task_payload(instance)))


@receiver(post_save, sender=Notification)
def publish_notification_saved(sender, instance, created, **kwargs):
    publish_on_commit(ChangeEvent(NOTIFICATIONS, INSERT if created else UPDATE, instance.id,
                                  notification_payload(instance)))


@receiver(post_delete, sender=Notification)
def publish_notification_deleted(sender, instance, **kwargs):
    publish_on_commit(ChangeEvent(NOTIFICATIONS, DELETE, instance.id, {
        'id': instance.id,
        'receiver_id': instance.receiver_id,
    }))
