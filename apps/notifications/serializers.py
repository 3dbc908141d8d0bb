from apps.core.serializers import user_summary


def serialize_notification(notification):
    task = notification.task
    return {
        'id': notification.id,
        'task_id': notification.task_id,
        'sender_id': notification.sender_id,
        'receiver_id': notification.receiver_id,
        'type': notification.type,
        'title': notification.title,
        'message': notification.message,
        'status': notification.status,
        'created_at': notification.created_at.isoformat(),
        'task': {'id': task.id, 'title': task.title, 'status': task.status} if task else None,
        'sender': user_summary(notification.sender),
        'receiver': user_summary(notification.receiver),
    }
