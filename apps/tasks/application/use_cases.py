# apps/tasks/application/use_cases.py
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from django.utils import timezone

from apps.core.domain.entities import AuthContext
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.side_effects import dispatch
from apps.notifications.domain.rules import assignment_notice, status_change_notice
from apps.notifications.ports.senders import INotificationSender
from apps.tasks.domain.entities import Priority, TaskEntity, TaskStatus
from apps.tasks.domain.services import TaskAccessPolicy, plan_status_change
from apps.tasks.ports.repositories import IStatusLogRepository, ITaskRepository


@dataclass
class CreateTaskInput:
    title: str
    assigned_to_id: int
    client_id: int
    system_id: int
    description: str = ""
    priority: Priority = Priority.MEDIUM
    deadline: Optional[datetime] = None


class CreateTaskUseCase:
    def __init__(self, repository: ITaskRepository, policy: TaskAccessPolicy,
                 notifier: INotificationSender, dispatcher: Callable = dispatch):
        self.repository = repository
        self.policy = policy
        self.notifier = notifier
        self.dispatcher = dispatcher

    def execute(self, ctx: AuthContext, input_dto: CreateTaskInput) -> TaskEntity:
        if not input_dto.title:
            raise ValidationError("Task title cannot be empty")

        self.policy.ensure_can_assign_to(ctx, input_dto.assigned_to_id)

        task = self.repository.create(TaskEntity(
            id=None,
            title=input_dto.title,
            description=input_dto.description,
            priority=input_dto.priority,
            deadline=input_dto.deadline,
            client_id=input_dto.client_id,
            system_id=input_dto.system_id,
            assigned_to_id=input_dto.assigned_to_id,
            created_by_id=ctx.user_id,
        ))

        draft = assignment_notice(ctx, task)
        if draft is not None:
            self.dispatcher("task assigned notification", self.notifier.send, draft)
        return task


class UpdateTaskUseCase:
    """Edycja pól innych niż status. Zmiana wykonawcy -> TASK_ASSIGNED do nowej osoby."""

    def __init__(self, repository: ITaskRepository, policy: TaskAccessPolicy,
                 notifier: INotificationSender, dispatcher: Callable = dispatch):
        self.repository = repository
        self.policy = policy
        self.notifier = notifier
        self.dispatcher = dispatcher

    def execute(self, ctx: AuthContext, task_id: int, changes: dict) -> TaskEntity:
        task = self.repository.get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        self.policy.ensure_can_edit(ctx, task)

        new_assignee = changes.get('assigned_to_id', task.assigned_to_id)
        reassigned = new_assignee != task.assigned_to_id
        if reassigned:
            self.policy.ensure_can_assign_to(ctx, new_assignee)

        updated = self.repository.update(task_id, changes)

        if reassigned:
            draft = assignment_notice(ctx, updated)
            if draft is not None:
                self.dispatcher("task reassigned notification", self.notifier.send, draft)
        return updated


class ChangeTaskStatusUseCase:
    """
    Zmiana statusu zadania.

    Główny zapis: status + started_at/completed_at/duration. Wpis do StatusLog
    i powiadomienie autora idą przez dispatcher - ich błąd nie psuje zmiany statusu.
    """

    def __init__(self, repository: ITaskRepository, policy: TaskAccessPolicy,
                 status_logs: IStatusLogRepository, notifier: INotificationSender,
                 dispatcher: Callable = dispatch, clock: Callable[[], datetime] = timezone.now):
        self.repository = repository
        self.policy = policy
        self.status_logs = status_logs
        self.notifier = notifier
        self.dispatcher = dispatcher
        self.clock = clock

    def execute(self, ctx: AuthContext, task_id: int, new_status: TaskStatus) -> TaskEntity:
        task = self.repository.get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        self.policy.ensure_can_edit(ctx, task)

        change = plan_status_change(task, new_status, self.clock())
        updated = self.repository.apply_status_change(task_id, change)

        self.dispatcher(
            "status log", self.status_logs.append,
            task_id, ctx.user_id, change.previous, change.current,
        )

        draft = status_change_notice(ctx, updated, change.previous, change.current)
        if draft is not None:
            self.dispatcher("status change notification", self.notifier.send, draft)
        return updated
