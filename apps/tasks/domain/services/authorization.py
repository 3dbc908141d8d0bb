# apps/tasks/domain/services/authorization.py
from enum import Enum
from typing import Optional

from apps.core.domain.entities import AuthContext, Role
from apps.core.exceptions import AuthorizationError
from apps.tasks.ports.repositories import IUserDirectory


class ListingScope(str, Enum):
    ALL = 'all'              # bez zawężania
    ASSIGNED = 'assigned'    # assigned_to == ja
    INVOLVED = 'involved'    # assigned_to == ja LUB created_by == ja
    VISIBLE = 'visible'      # INVOLVED LUB wykonawca ma rolę WORKER


class TaskAccessPolicy:
    """
    Kto może czytać / edytować / usuwać zadanie.

    `task` to cokolwiek z polami assigned_to_id i created_by_id (encja albo model).
    Kolejność reguł: ADMIN -> WORKER -> ASSIGNER.
    """

    def __init__(self, users: IUserDirectory):
        self.users = users

    def can_view(self, ctx: AuthContext, task) -> bool:
        if ctx.role == Role.ADMIN:
            return True
        if ctx.role == Role.WORKER:
            return task.assigned_to_id == ctx.user_id
        if self._is_involved(ctx, task):
            return True
        # ASSIGNER może podejrzeć zadanie innej osoby tylko gdy to WORKER (jedno dodatkowe zapytanie)
        return self.users.role_of(task.assigned_to_id) == Role.WORKER

    def can_edit(self, ctx: AuthContext, task) -> bool:
        if ctx.role == Role.ADMIN:
            return True
        if ctx.role == Role.WORKER:
            return task.assigned_to_id == ctx.user_id
        return self._is_involved(ctx, task)

    def can_delete(self, ctx: AuthContext, task) -> bool:
        if ctx.role == Role.ADMIN:
            return True
        # Usuwanie zależy od autorstwa, nie od przypisania
        return task.created_by_id == ctx.user_id

    def can_assign_to(self, ctx: AuthContext, assignee_id: Optional[int]) -> bool:
        if ctx.role == Role.WORKER:
            return assignee_id == ctx.user_id
        return True

    def ensure_can_view(self, ctx: AuthContext, task):
        if not self.can_view(ctx, task):
            raise AuthorizationError("Access denied")

    def ensure_can_edit(self, ctx: AuthContext, task):
        if not self.can_edit(ctx, task):
            raise AuthorizationError("Access denied")

    def ensure_can_delete(self, ctx: AuthContext, task):
        if not self.can_delete(ctx, task):
            raise AuthorizationError(f"{ctx.role.value.capitalize()}s can only delete tasks they created")

    def ensure_can_assign_to(self, ctx: AuthContext, assignee_id: Optional[int]):
        if not self.can_assign_to(ctx, assignee_id):
            raise AuthorizationError("Workers can only assign tasks to themselves")

    @staticmethod
    def listing_scope(ctx: AuthContext, dashboard: bool = False, explicit_assignee: Optional[int] = None) -> ListingScope:
        """Zawężenie list wielozadaniowych - ten sam predykat co can_view."""
        if ctx.role == Role.ADMIN:
            return ListingScope.ALL
        if ctx.role == Role.WORKER:
            # Filtr assigned_to od WORKER-a nie poszerza widoczności (łączony przez AND)
            return ListingScope.ASSIGNED
        if dashboard:
            return ListingScope.ALL
        if explicit_assignee is not None:
            # Widok pracownika: zadania wskazanej osoby, o ile ASSIGNER może je zobaczyć
            return ListingScope.VISIBLE
        return ListingScope.INVOLVED

    @staticmethod
    def _is_involved(ctx: AuthContext, task) -> bool:
        return task.assigned_to_id == ctx.user_id or task.created_by_id == ctx.user_id
