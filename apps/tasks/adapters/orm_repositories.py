# apps/tasks/adapters/orm_repositories.py
from typing import Dict, Iterable, Optional, Tuple

from django.contrib.auth.models import User
from django.db.models import Count, Q

from apps.core.domain.entities import Role
from apps.core.models import UserProfile, display_name
from apps.tasks.domain.entities import Priority, StatusChange, TaskEntity, TaskStatus
from apps.tasks.domain.services.authorization import ListingScope
from apps.tasks.domain.services.listing import DeadlineScope, completed_cutoff, deadline_window
from apps.tasks.models import StatusLog, Subtask, Task as TaskModel
from apps.tasks.ports.repositories import IStatusLogRepository, ITaskRepository, IUserDirectory

# Pola encji, które można zmienić poza przejściem statusu
EDITABLE_FIELDS = ('title', 'description', 'priority', 'deadline', 'client_id', 'system_id', 'assigned_to_id')


class DjangoTaskRepository(ITaskRepository):
    def to_entity(self, model: TaskModel) -> TaskEntity:
        """Konwertuje Model Django -> Czystą Encję."""
        return TaskEntity(
            id=model.id,
            title=model.title,
            description=model.description,
            status=TaskStatus(model.status),
            priority=Priority(model.priority),
            deadline=model.deadline,
            created_at=model.created_at,
            started_at=model.started_at,
            completed_at=model.completed_at,
            duration=model.duration,
            summary=model.summary,
            client_id=model.client_id,
            system_id=model.system_id,
            assigned_to_id=model.assigned_to_id,
            created_by_id=model.created_by_id,
            # Dzięki select_related nie powoduje dodatkowego zapytania
            assignee_name=display_name(model.assigned_to),
        )

    def get_model(self, task_id: int) -> Optional[TaskModel]:
        return TaskModel.objects.select_related('assigned_to').filter(id=task_id).first()

    def get_by_id(self, task_id: int) -> Optional[TaskEntity]:
        model = self.get_model(task_id)
        return self.to_entity(model) if model else None

    def create(self, task: TaskEntity) -> TaskEntity:
        obj = TaskModel.objects.create(
            title=task.title,
            description=task.description,
            status=task.status.value,
            priority=task.priority.value,
            deadline=task.deadline,
            client_id=task.client_id,
            system_id=task.system_id,
            assigned_to_id=task.assigned_to_id,
            created_by_id=task.created_by_id,
        )
        return self.get_by_id(obj.id)

    def update(self, task_id: int, changes: dict) -> TaskEntity:
        obj = TaskModel.objects.get(id=task_id)
        fields = []
        for name in EDITABLE_FIELDS:
            if name in changes:
                value = changes[name]
                if name == 'priority' and isinstance(value, Priority):
                    value = value.value
                setattr(obj, name, value)
                fields.append(name)
        if fields:
            # save() zamiast update(), żeby post_save trafił na szynę realtime
            obj.save(update_fields=fields + ['updated_at'])
        return self.get_by_id(task_id)

    def apply_status_change(self, task_id: int, change: StatusChange) -> TaskEntity:
        obj = TaskModel.objects.get(id=task_id)
        for name, value in change.as_update().items():
            setattr(obj, name, value.value if name == 'status' else value)
        obj.save(update_fields=['status', 'started_at', 'completed_at', 'duration', 'updated_at'])
        return self.get_by_id(task_id)


class DjangoUserDirectory(IUserDirectory):
    def role_of(self, user_id: int) -> Optional[Role]:
        if user_id is None:
            return None
        role = UserProfile.objects.filter(user_id=user_id).values_list('role', flat=True).first()
        return Role(role) if role else None

    def existing_ids(self, user_ids) -> set:
        ids = {i for i in user_ids if i is not None}
        if not ids:
            return set()
        return set(User.objects.filter(pk__in=ids).values_list('id', flat=True))


class DjangoStatusLogRepository(IStatusLogRepository):
    def append(self, task_id, actor_id, from_status, to_status) -> None:
        StatusLog.objects.create(
            task_id=task_id,
            user_id=actor_id,
            from_status=from_status.value if from_status else None,
            to_status=to_status.value,
        )


class TaskListingQuery:
    """Zapytania list zadań: zawężenie wg ListingScope + filtry dashboardu i terminów."""

    @staticmethod
    def scope_filter(user_id: int, scope: ListingScope) -> Q:
        if scope == ListingScope.ALL:
            return Q()
        if scope == ListingScope.ASSIGNED:
            return Q(assigned_to_id=user_id)
        involved = Q(assigned_to_id=user_id) | Q(created_by_id=user_id)
        if scope == ListingScope.INVOLVED:
            return involved
        return involved | Q(assigned_to__profile__role=Role.WORKER.value)

    @staticmethod
    def dashboard_filter(now, window_days: int) -> Q:
        # Ukończone tylko z okna; pozostałe statusy niezależnie od wieku
        return ~Q(status=TaskStatus.COMPLETED.value) | Q(completed_at__gte=completed_cutoff(now, window_days))

    @staticmethod
    def deadline_filter(scope: DeadlineScope, start_of_today) -> Q:
        if scope == DeadlineScope.ALL:
            return Q()
        lower, upper = deadline_window(scope, start_of_today)
        in_window = Q()
        if lower is not None:
            in_window &= Q(deadline__gte=lower)
        if upper is not None:
            in_window &= Q(deadline__lt=upper)
        return Q(deadline__isnull=True) | Q(status=TaskStatus.COMPLETED.value) | in_window

    def base_queryset(self):
        return (
            TaskModel.objects
            .select_related('client', 'system', 'assigned_to', 'created_by')
            .annotate(note_count=Count('notes', distinct=True))
        )

    def find(self, user_id, scope, dashboard=False, now=None, window_days=7,
             deadline_scope=DeadlineScope.ALL, start_of_today=None, queryset=None):
        qs = queryset if queryset is not None else self.base_queryset()
        qs = qs.filter(self.scope_filter(user_id, scope))
        if dashboard:
            qs = qs.filter(self.dashboard_filter(now, window_days))
        if deadline_scope != DeadlineScope.ALL:
            qs = qs.filter(self.deadline_filter(deadline_scope, start_of_today))
        return qs.order_by('-created_at', '-id')

    @staticmethod
    def subtask_counts(task_ids: Iterable[int]) -> Dict[int, Tuple[int, int]]:
        """Druga kwerenda: {task_id: (wszystkie, ukończone)}."""
        ids = list(task_ids)
        if not ids:
            return {}
        rows = (
            Subtask.objects
            .filter(task_id__in=ids)
            .values('task_id')
            .annotate(total=Count('id'), done=Count('id', filter=Q(completed=True)))
        )
        return {row['task_id']: (row['total'], row['done']) for row in rows}
