# apps/tasks/domain/entities.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from enum import Enum


class TaskStatus(str, Enum):
    NOT_STARTED = 'NOT_STARTED'
    NEW_STARTED = 'NEW_STARTED'
    IN_PROGRESS = 'IN_PROGRESS'
    IN_TESTING = 'IN_TESTING'
    COMPLETED = 'COMPLETED'

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    TaskStatus.NOT_STARTED: 'Open',
    TaskStatus.NEW_STARTED: 'Ready for Development',
    TaskStatus.IN_PROGRESS: 'In Development',
    TaskStatus.IN_TESTING: 'In Testing',
    TaskStatus.COMPLETED: 'Completed',
}


class Priority(str, Enum):
    LOW = 'LOW'
    MEDIUM = 'MEDIUM'
    HIGH = 'HIGH'
    CRITICAL = 'CRITICAL'


@dataclass
class TaskEntity:
    id: Optional[int]  # ID może być None przed zapisem
    title: str
    created_by_id: int
    assigned_to_id: int
    client_id: Optional[int] = None
    system_id: Optional[int] = None
    description: str = ""
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: Priority = Priority.MEDIUM

    # Czas
    deadline: Optional[datetime] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration: Optional[int] = None  # sekundy

    summary: str = ""

    # Denormalizacja na potrzeby powiadomień (bez dociągania relacji)
    assignee_name: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


@dataclass(frozen=True)
class StatusChange:
    """Wynik przejścia statusu: co zapisać na zadaniu."""
    previous: Optional[TaskStatus]
    current: TaskStatus
    started_at: Optional[datetime]
    completed_at: Optional[datetime]
    duration: Optional[int]

    def as_update(self) -> dict:
        return {
            'status': self.current,
            'started_at': self.started_at,
            'completed_at': self.completed_at,
            'duration': self.duration,
        }


def format_duration(seconds: Optional[int]) -> Optional[str]:
    """1h 2m 3s / 2m 3s / 3s"""
    if seconds is None:
        return None
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
