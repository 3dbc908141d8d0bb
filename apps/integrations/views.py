# apps/integrations/views.py
import logging

from django.conf import settings
from django.http import JsonResponse
from django.utils.crypto import constant_time_compare
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from apps.core.http import api_login_required, api_view, auth_context, get_or_404, parse_int, parse_json
from apps.tasks.adapters.orm_repositories import DjangoUserDirectory
from apps.tasks.domain.services import TaskAccessPolicy
from apps.tasks.models import Attachment, Subtask, Task
from .adapters.webhook import WebhookAutomationClient
from .payloads import dispatch_payload

logger = logging.getLogger(__name__)


def check_webhook_secret(request):
    """Bez skonfigurowanego sekretu hooki są otwarte."""
    expected = settings.AUTOMATION_WEBHOOK_SECRET
    if expected and not constant_time_compare(request.headers.get('x-webhook-secret', ''), expected):
        raise AuthorizationError("Forbidden")


def _hook_task(body):
    task_id = body.get('taskId')
    if not task_id:
        raise ValidationError("Invalid payload")
    task_id = parse_int(task_id, 'taskId')
    task = Task.objects.filter(pk=task_id).first()
    if task is None:
        raise NotFoundError("Task not found")
    return task


@require_http_methods(["POST"])
@api_login_required
@api_view("Unexpected error")
def automation_dispatch_view(request):
    ctx = auth_context(request)
    task_id = parse_int(parse_json(request).get('taskId'), 'taskId')
    if task_id is None:
        raise ValidationError("taskId is required")

    task = get_or_404(Task.objects.all(), "Task not found", pk=task_id)
    TaskAccessPolicy(DjangoUserDirectory()).ensure_can_view(ctx, task)

    attachments = Attachment.objects.filter(task=task)
    WebhookAutomationClient().dispatch(dispatch_payload(task, attachments, ctx))
    return JsonResponse({'ok': True})


@csrf_exempt
@require_http_methods(["POST"])
@api_view("Unexpected error")
def subtasks_hook_view(request):
    check_webhook_secret(request)
    body = parse_json(request)
    subtasks = body.get('subtasks')
    if not isinstance(subtasks, list):
        raise ValidationError("Invalid payload")
    task = _hook_task(body)

    titles = [s['title'] for s in subtasks if isinstance(s, dict) and s.get('title')]
    Subtask.objects.bulk_create([Subtask(task=task, title=str(title)[:255]) for title in titles])
    logger.info("Automation added %d subtasks to task %s", len(titles), task.id)
    return JsonResponse({'ok': True, 'inserted': len(titles)})


@csrf_exempt
@require_http_methods(["POST"])
@api_view("Unexpected error")
def summary_hook_view(request):
    check_webhook_secret(request)
    body = parse_json(request)
    summary = body.get('summary')
    if not isinstance(summary, str):
        raise ValidationError("Invalid payload")
    task = _hook_task(body)

    task.summary = summary
    task.save(update_fields=['summary', 'updated_at'])
    return JsonResponse({'ok': True})
