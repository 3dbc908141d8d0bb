# apps/integrations/payloads.py
from django.conf import settings


def dispatch_payload(task, attachments, ctx) -> dict:
    """Treść wysyłana do systemu automatyzacji."""
    payload = {
        'taskId': task.id,
        'title': task.title,
        'description': task.description or '',
        'attachments': [
            {
                'name': a.file_name,
                'mime': a.mime_type,
                'size': a.size_bytes,
                'url': a.public_url,
                'path': a.storage_path,
            }
            for a in attachments
        ],
        'requestedBy': {'id': ctx.user_id, 'role': ctx.role.value},
    }
    if settings.AUTOMATION_API_KEY:
        payload['env'] = {'apiKey': settings.AUTOMATION_API_KEY}
    return payload
