# apps/notifications/domain/rules.py
"""
Reguły: kto dostaje powiadomienie i z jaką treścią.

Czyste funkcje - zwracają NotificationDraft albo None / listę, wysyłką
zajmuje się INotificationSender.
"""
from typing import Iterable, List, Optional

from apps.core.domain.entities import AuthContext
from apps.tasks.domain.entities import TaskEntity, TaskStatus
from .entities import NotificationDraft, NotificationType

FALLBACK_ASSIGNEE_NAME = "Worker"


def assignment_notice(ctx: AuthContext, task: TaskEntity) -> Optional[NotificationDraft]:
    """TASK_ASSIGNED do wykonawcy, o ile to nie autor przypisał sam siebie."""
    if task.assigned_to_id == ctx.user_id:
        return None
    return NotificationDraft(
        task_id=task.id,
        sender_id=ctx.user_id,
        receiver_id=task.assigned_to_id,
        type=NotificationType.TASK_ASSIGNED,
        title="New Task Assigned",
        message=f'{ctx.name} assigned you the task "{task.title}".',
    )


def status_change_notice(
    ctx: AuthContext,
    task: TaskEntity,
    previous: Optional[TaskStatus],
    current: TaskStatus,
) -> Optional[NotificationDraft]:
    """Jedno powiadomienie do autora zadania, chyba że to on zmienia status."""
    if task.created_by_id == ctx.user_id:
        return None

    assignee = task.assignee_name or FALLBACK_ASSIGNEE_NAME

    if current == TaskStatus.COMPLETED:
        return NotificationDraft(
            task_id=task.id,
            sender_id=ctx.user_id,
            receiver_id=task.created_by_id,
            type=NotificationType.TASK_COMPLETED,
            title="Task Completed",
            message=f'🎉 {assignee} completed the task "{task.title}"!',
        )

    from_label = previous.label if previous else "Unknown"
    return NotificationDraft(
        task_id=task.id,
        sender_id=ctx.user_id,
        receiver_id=task.created_by_id,
        type=NotificationType.TASK_STATUS_CHANGED,
        title="Task Status Changed",
        message=f'{assignee} changed the status of "{task.title}" from "{from_label}" to "{current.label}".',
    )


def mention_notices(ctx: AuthContext, task: TaskEntity, mentioned_ids: Iterable[int]) -> List[NotificationDraft]:
    """TASK_COMMENT dla każdej wspomnianej osoby (bez duplikatów i bez autora notatki)."""
    drafts = []
    seen = set()
    for user_id in mentioned_ids:
        if user_id in seen or user_id == ctx.user_id:
            continue
        seen.add(user_id)
        drafts.append(NotificationDraft(
            task_id=task.id,
            sender_id=ctx.user_id,
            receiver_id=user_id,
            type=NotificationType.TASK_COMMENT,
            title="You Were Mentioned",
            message=f'{ctx.name} mentioned you in a note on "{task.title}".',
        ))
    return drafts
