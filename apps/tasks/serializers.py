from apps.clients.serializers import client_summary
from apps.core.serializers import user_summary
from .domain.entities import TaskStatus, format_duration


def _iso(value):
    return value.isoformat() if value else None


def serialize_task(task, counts=None):
    """Wiersz zadania; `counts` = (wszystkie, ukończone) podzadania z osobnej kwerendy."""
    total, done = counts or (0, 0)
    return {
        'id': task.id,
        'title': task.title,
        'description': task.description,
        'status': task.status,
        'status_label': TaskStatus(task.status).label,
        'priority': task.priority,
        'deadline': _iso(task.deadline),
        'started_at': _iso(task.started_at),
        'completed_at': _iso(task.completed_at),
        'duration': task.duration,
        'duration_display': format_duration(task.duration),
        'summary': task.summary,
        'client_id': task.client_id,
        'system_id': task.system_id,
        'assigned_to': task.assigned_to_id,
        'created_by': task.created_by_id,
        'created_at': _iso(task.created_at),
        'updated_at': _iso(task.updated_at),
        'client': client_summary(task.client),
        'system': client_summary(task.system),
        'assigned_user': user_summary(task.assigned_to),
        'creator': user_summary(task.created_by),
        'subtask_count': total,
        'completed_subtask_count': done,
        'note_count': getattr(task, 'note_count', None),
    }


def serialize_subtask(subtask):
    return {
        'id': subtask.id,
        'task_id': subtask.task_id,
        'title': subtask.title,
        'completed': subtask.completed,
        'created_by': subtask.created_by_id,
        'created_at': _iso(subtask.created_at),
        'completed_at': _iso(subtask.completed_at),
    }


def serialize_attachment(attachment):
    return {
        'id': attachment.id,
        'task_id': attachment.task_id,
        'file_name': attachment.file_name,
        'mime_type': attachment.mime_type,
        'size_bytes': attachment.size_bytes,
        'storage_path': attachment.storage_path,
        'public_url': attachment.public_url,
        'created_at': _iso(attachment.created_at),
    }


def serialize_status_log(log):
    return {
        'id': log.id,
        'task_id': log.task_id,
        'from_status': log.from_status,
        'to_status': log.to_status,
        'from_label': TaskStatus(log.from_status).label if log.from_status else None,
        'to_label': TaskStatus(log.to_status).label,
        'user': user_summary(log.user),
        'created_at': _iso(log.created_at),
    }
