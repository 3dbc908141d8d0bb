# apps/tasks/ports/repositories.py
from abc import ABC, abstractmethod
from typing import Optional

from apps.core.domain.entities import Role
from apps.tasks.domain.entities import StatusChange, TaskEntity, TaskStatus


class ITaskRepository(ABC):
    @abstractmethod
    def get_by_id(self, task_id: int) -> Optional[TaskEntity]:
        pass

    @abstractmethod
    def create(self, task: TaskEntity) -> TaskEntity:
        """Zapisuje nowe zadanie i zwraca encję z ID."""
        pass

    @abstractmethod
    def update(self, task_id: int, changes: dict) -> TaskEntity:
        """Zapisuje pola inne niż status (klucze jak w TaskEntity)."""
        pass

    @abstractmethod
    def apply_status_change(self, task_id: int, change: StatusChange) -> TaskEntity:
        """Zapisuje status i pola pochodne jednym zapisem."""
        pass


class IUserDirectory(ABC):
    @abstractmethod
    def role_of(self, user_id: int) -> Optional[Role]:
        """Rola użytkownika albo None, jeśli nie istnieje."""
        pass

    @abstractmethod
    def existing_ids(self, user_ids) -> set:
        """Podzbiór podanych ID, które należą do istniejących użytkowników."""
        pass


class IStatusLogRepository(ABC):
    @abstractmethod
    def append(self, task_id: int, actor_id: int, from_status: Optional[TaskStatus], to_status: TaskStatus) -> None:
        pass
