# apps/tasks/domain/services/lifecycle.py
import math
from datetime import datetime
from apps.tasks.domain.entities import StatusChange, TaskEntity, TaskStatus


def plan_status_change(task: TaskEntity, new_status: TaskStatus, now: datetime) -> StatusChange:
    """
    Wylicza pola do zapisania przy zmianie statusu.

    Graf przejść jest dowolny (każdy status -> każdy status).
    started_at ustawiany raz, przy pierwszym wejściu w IN_PROGRESS.
    completed_at i duration ustawiane raz, przy pierwszym wejściu w COMPLETED.
    """
    started_at = task.started_at
    completed_at = task.completed_at
    duration = task.duration

    if new_status == TaskStatus.IN_PROGRESS and started_at is None:
        started_at = now
    elif new_status == TaskStatus.COMPLETED and completed_at is None:
        completed_at = now
        if started_at is not None:
            duration = compute_duration(started_at, now)

    return StatusChange(
        previous=task.status,
        current=new_status,
        started_at=started_at,
        completed_at=completed_at,
        duration=duration,
    )


def compute_duration(started_at: datetime, finished_at: datetime) -> int:
    """Pełne sekundy, nigdy ujemne."""
    seconds = (finished_at - started_at).total_seconds()
    return max(0, math.floor(seconds))
