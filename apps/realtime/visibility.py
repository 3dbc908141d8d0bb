# apps/realtime/visibility.py
from typing import Optional

from apps.core.domain.entities import AuthContext, Role
from apps.tasks.domain.services import TaskAccessPolicy
from apps.tasks.ports.repositories import IUserDirectory
from .bus import ChangeEvent

TASKS = 'tasks'
NOTIFICATIONS = 'notifications'
TABLES = (TASKS, NOTIFICATIONS)


class PayloadRoleDirectory(IUserDirectory):
    """Rola wykonawcy zapisana w zdarzeniu - bez zapytania do bazy przy każdym odbiorcy."""

    def __init__(self, payload: dict):
        self.roles = {}
        if payload.get('assigned_to') is not None and payload.get('assignee_role'):
            self.roles[payload['assigned_to']] = Role(payload['assignee_role'])

    def role_of(self, user_id: int) -> Optional[Role]:
        return self.roles.get(user_id)

    def existing_ids(self, user_ids) -> set:
        return {i for i in user_ids if i in self.roles}


class _TaskRow:
    def __init__(self, payload):
        self.assigned_to_id = payload.get('assigned_to')
        self.created_by_id = payload.get('created_by')


def task_visible(ctx: AuthContext, event: ChangeEvent) -> bool:
    policy = TaskAccessPolicy(PayloadRoleDirectory(event.payload))
    return policy.can_view(ctx, _TaskRow(event.payload))


def notification_visible(ctx: AuthContext, event: ChangeEvent) -> bool:
    return event.payload.get('receiver_id') == ctx.user_id


def default_visibility(ctx: AuthContext, event: ChangeEvent) -> bool:
    if event.table == TASKS:
        return task_visible(ctx, event)
    if event.table == NOTIFICATIONS:
        return notification_visible(ctx, event)
    return False
