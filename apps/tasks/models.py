# apps/tasks/models.py
from django.conf import settings
from django.db import models

from apps.tasks.domain.entities import Priority, TaskStatus


class Task(models.Model):
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # Używamy TextChoices dla wygody w Adminie, ale mapujemy to na Enum domenowy
    class StatusChoices(models.TextChoices):
        NOT_STARTED = TaskStatus.NOT_STARTED.value, TaskStatus.NOT_STARTED.label
        NEW_STARTED = TaskStatus.NEW_STARTED.value, TaskStatus.NEW_STARTED.label
        IN_PROGRESS = TaskStatus.IN_PROGRESS.value, TaskStatus.IN_PROGRESS.label
        IN_TESTING = TaskStatus.IN_TESTING.value, TaskStatus.IN_TESTING.label
        COMPLETED = TaskStatus.COMPLETED.value, TaskStatus.COMPLETED.label

    status = models.CharField(
        max_length=20,
        choices=StatusChoices.choices,
        default=StatusChoices.NOT_STARTED
    )

    class PriorityChoices(models.TextChoices):
        LOW = Priority.LOW.value, 'Low'
        MEDIUM = Priority.MEDIUM.value, 'Medium'
        HIGH = Priority.HIGH.value, 'High'
        CRITICAL = Priority.CRITICAL.value, 'Critical'

    priority = models.CharField(
        max_length=20,
        choices=PriorityChoices.choices,
        default=PriorityChoices.MEDIUM
    )

    # Czas
    deadline = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True, help_text="Pierwsze wejście w IN_PROGRESS")
    completed_at = models.DateTimeField(null=True, blank=True, help_text="Pierwsze wejście w COMPLETED")
    duration = models.PositiveIntegerField(null=True, blank=True, help_text="Sekundy od startu do ukończenia")

    # Kontekst klienta
    client = models.ForeignKey('clients.Client', on_delete=models.PROTECT, related_name='tasks')
    system = models.ForeignKey('clients.System', on_delete=models.PROTECT, related_name='tasks')

    # Ludzie
    assigned_to = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='assigned_tasks')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='created_tasks')

    # Podsumowanie od systemu automatyzacji (webhook)
    summary = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['assigned_to', 'status'], name='task_assignee_status_idx'),
            models.Index(fields=['created_by', 'status'], name='task_creator_status_idx'),
        ]

    def __str__(self):
        return self.title


class Subtask(models.Model):
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='subtasks')
    title = models.CharField(max_length=255)
    completed = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.title


class Attachment(models.Model):
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='attachments')
    file_name = models.CharField(max_length=255)
    mime_type = models.CharField(max_length=255, default='application/octet-stream')
    size_bytes = models.PositiveBigIntegerField(default=0)
    storage_path = models.CharField(max_length=500)
    public_url = models.CharField(max_length=1000, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.file_name


class StatusLog(models.Model):
    """Dziennik zmian statusu (tylko dopisywanie)."""
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='status_logs')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, on_delete=models.SET_NULL, related_name='+')
    from_status = models.CharField(max_length=20, null=True, blank=True, choices=Task.StatusChoices.choices)
    to_status = models.CharField(max_length=20, choices=Task.StatusChoices.choices)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['task', 'created_at'], name='statuslog_task_created_idx'),
        ]

    def __str__(self):
        return f"{self.task_id}: {self.from_status} -> {self.to_status}"
