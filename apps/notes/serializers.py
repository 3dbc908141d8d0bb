from apps.core.serializers import user_summary


def serialize_note(note):
    return {
        'id': note.id,
        'task_id': note.task_id,
        'content': note.content,
        'created_by': note.created_by_id,
        'author': user_summary(note.created_by),
        'created_at': note.created_at.isoformat(),
        'updated_at': note.updated_at.isoformat(),
    }
