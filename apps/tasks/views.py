# apps/tasks/views.py
import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from apps.core.exceptions import ValidationError
from apps.core.http import (
    api_login_required, api_view, auth_context, form_error, get_or_404, parse_int, parse_json, private_json,
    require_param,
)
from apps.notifications.adapters.orm_sender import DjangoNotificationSender
from .adapters.orm_repositories import (
    DjangoStatusLogRepository, DjangoTaskRepository, DjangoUserDirectory, TaskListingQuery,
)
from .application.use_cases import (
    ChangeTaskStatusUseCase, CreateTaskInput, CreateTaskUseCase, UpdateTaskUseCase,
)
from .domain.entities import Priority, TaskStatus
from .domain.services import DeadlineScope, TaskAccessPolicy
from .filters import TaskFilter
from .forms import SubtaskForm, TaskForm, TaskStatusForm
from .models import Attachment, StatusLog, Subtask
from .serializers import serialize_attachment, serialize_status_log, serialize_subtask, serialize_task
from .storage import store_upload

logger = logging.getLogger(__name__)


def _policy():
    return TaskAccessPolicy(DjangoUserDirectory())


def _merge(instance_data, body, fields):
    # PATCH: pola nieprzesłane zostają bez zmian, jawny null czyści pole opcjonalne
    data = dict(instance_data)
    data.update({k: v for k, v in body.items() if k in fields})
    return data


def _load_task(pk):
    query = TaskListingQuery()
    return get_or_404(query.base_queryset(), "Task not found", pk=pk)


def _task_payload(task):
    counts = TaskListingQuery.subtask_counts([task.id]).get(task.id)
    return serialize_task(task, counts)


def _parse_deadline_scope(value):
    if not value:
        return DeadlineScope.ALL
    try:
        return DeadlineScope(value.upper())
    except ValueError:
        raise ValidationError("Invalid deadline_scope")


@require_http_methods(["GET", "POST"])
@api_login_required
@api_view("Failed to process tasks")
def task_collection_view(request):
    ctx = auth_context(request)

    if request.method == "POST":
        form = TaskForm(parse_json(request))
        if not form.is_valid():
            raise form_error(form)
        changes = form.entity_changes()
        use_case = CreateTaskUseCase(
            repository=DjangoTaskRepository(),
            policy=_policy(),
            notifier=DjangoNotificationSender(),
        )
        entity = use_case.execute(ctx, CreateTaskInput(
            title=changes['title'],
            description=changes['description'],
            priority=Priority(changes['priority']),
            deadline=changes['deadline'],
            client_id=changes['client_id'],
            system_id=changes['system_id'],
            assigned_to_id=changes['assigned_to_id'],
        ))
        return JsonResponse(_task_payload(_load_task(entity.id)), status=201)

    query = TaskListingQuery()
    filterset = TaskFilter(request.GET, queryset=query.base_queryset())
    if not filterset.is_valid():
        raise form_error(filterset.form)

    dashboard = request.GET.get('dashboard') == 'true'
    explicit_assignee = parse_int(request.GET.get('assigned_to'), 'assigned_to')
    scope = TaskAccessPolicy.listing_scope(ctx, dashboard=dashboard, explicit_assignee=explicit_assignee)

    now = timezone.now()
    start_of_today = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
    limit = parse_int(request.GET.get('limit'), 'limit') or settings.TASKS_MAX_LIMIT

    tasks = list(query.find(
        ctx.user_id, scope,
        dashboard=dashboard,
        now=now,
        window_days=settings.DASHBOARD_COMPLETED_WINDOW_DAYS,
        deadline_scope=_parse_deadline_scope(request.GET.get('deadline_scope')),
        start_of_today=start_of_today,
        queryset=filterset.qs,
    )[:max(1, min(limit, settings.TASKS_MAX_LIMIT))])

    counts = TaskListingQuery.subtask_counts(t.id for t in tasks)
    return private_json([serialize_task(t, counts.get(t.id)) for t in tasks])


@require_http_methods(["GET", "PATCH", "DELETE"])
@api_login_required
@api_view("Failed to process task")
def task_detail_view(request, pk):
    ctx = auth_context(request)
    task = _load_task(pk)
    policy = _policy()

    if request.method == "DELETE":
        policy.ensure_can_delete(ctx, task)
        task.delete()
        logger.info("Task %s deleted by user %s", pk, ctx.user_id)
        return JsonResponse({'success': True})

    if request.method == "PATCH":
        policy.ensure_can_edit(ctx, task)
        fields = TaskForm._meta.fields
        current = {
            'title': task.title,
            'description': task.description,
            'priority': task.priority,
            'deadline': task.deadline,
            'client': task.client_id,
            'system': task.system_id,
            'assigned_to': task.assigned_to_id,
        }
        form = TaskForm(_merge(current, parse_json(request), fields), instance=task)
        if not form.is_valid():
            raise form_error(form)
        use_case = UpdateTaskUseCase(
            repository=DjangoTaskRepository(),
            policy=policy,
            notifier=DjangoNotificationSender(),
        )
        use_case.execute(ctx, task.id, form.entity_changes())
        return JsonResponse(_task_payload(_load_task(pk)))

    policy.ensure_can_view(ctx, task)
    return private_json(_task_payload(task))


@require_http_methods(["PATCH"])
@api_login_required
@api_view("Failed to update task status")
def task_status_view(request, pk):
    ctx = auth_context(request)
    form = TaskStatusForm(parse_json(request))
    if not form.is_valid():
        raise form_error(form)

    use_case = ChangeTaskStatusUseCase(
        repository=DjangoTaskRepository(),
        policy=_policy(),
        status_logs=DjangoStatusLogRepository(),
        notifier=DjangoNotificationSender(),
    )
    use_case.execute(ctx, pk, TaskStatus(form.cleaned_data['status']))
    return JsonResponse(_task_payload(_load_task(pk)))


@require_http_methods(["GET", "POST"])
@api_login_required
@api_view("Failed to process subtasks")
def subtask_collection_view(request, pk):
    ctx = auth_context(request)
    task = _load_task(pk)
    policy = _policy()

    if request.method == "POST":
        policy.ensure_can_edit(ctx, task)
        form = SubtaskForm(parse_json(request))
        if not form.is_valid():
            raise form_error(form)
        subtask = form.save(commit=False)
        subtask.task = task
        subtask.created_by_id = ctx.user_id
        if subtask.completed:
            subtask.completed_at = timezone.now()
        subtask.save()
        return JsonResponse(serialize_subtask(subtask), status=201)

    policy.ensure_can_view(ctx, task)
    subtasks = Subtask.objects.filter(task=task).order_by('created_at', 'id')
    return private_json([serialize_subtask(s) for s in subtasks])


@require_http_methods(["PATCH", "DELETE"])
@api_login_required
@api_view("Failed to process subtask")
def subtask_detail_view(request, pk, subtask_id):
    ctx = auth_context(request)
    task = _load_task(pk)
    _policy().ensure_can_edit(ctx, task)
    subtask = get_or_404(Subtask.objects.filter(task=task), "Subtask not found", pk=subtask_id)

    if request.method == "DELETE":
        subtask.delete()
        return JsonResponse({'success': True})

    was_completed = subtask.completed
    current = {'title': subtask.title, 'completed': subtask.completed}
    form = SubtaskForm(_merge(current, parse_json(request), SubtaskForm._meta.fields), instance=subtask)
    if not form.is_valid():
        raise form_error(form)
    subtask = form.save(commit=False)
    if subtask.completed and not was_completed:
        subtask.completed_at = timezone.now()
    elif not subtask.completed:
        subtask.completed_at = None
    subtask.save()
    return JsonResponse(serialize_subtask(subtask))


@require_http_methods(["GET", "DELETE"])
@api_login_required
@api_view("Failed to process attachments")
def attachment_collection_view(request, pk):
    ctx = auth_context(request)
    task = _load_task(pk)
    policy = _policy()

    if request.method == "DELETE":
        policy.ensure_can_edit(ctx, task)
        attachment = get_or_404(
            Attachment.objects.filter(task=task), "Attachment not found",
            pk=require_param(request, 'attachmentId'),
        )
        # Obiekt w storage usuwa sygnał post_delete (best-effort)
        attachment.delete()
        return JsonResponse({'success': True})

    policy.ensure_can_view(ctx, task)
    attachments = Attachment.objects.filter(task=task)
    return private_json([serialize_attachment(a) for a in attachments])


@require_http_methods(["POST"])
@api_login_required
@api_view("Failed to upload attachments")
def attachment_upload_view(request):
    ctx = auth_context(request)
    task_id = parse_int(request.POST.get('taskId'), 'taskId')
    files = request.FILES.getlist('files')
    if task_id is None or not files:
        raise ValidationError("taskId and files are required")

    task = _load_task(task_id)
    _policy().ensure_can_edit(ctx, task)

    uploaded = []
    for upload in files:
        path, url = store_upload(task.id, upload)
        try:
            # Savepoint: błąd zapisu nie psuje otwartej transakcji żądania
            with transaction.atomic():
                attachment = Attachment.objects.create(
                    task=task,
                    file_name=upload.name,
                    mime_type=upload.content_type or 'application/octet-stream',
                    size_bytes=upload.size,
                    storage_path=path,
                    public_url=url,
                )
        except DatabaseError:
            # Plik zostaje w storage bez wiersza metadanych
            logger.exception("Failed to record attachment %s for task %s", path, task.id)
            uploaded.append({'file_name': upload.name, 'storage_path': path, 'public_url': url, 'recorded': False})
            continue
        uploaded.append(dict(serialize_attachment(attachment), recorded=True))

    return JsonResponse({'files': uploaded}, status=201)


@require_http_methods(["GET"])
@api_login_required
@api_view("Failed to fetch status logs")
def status_log_view(request, pk):
    ctx = auth_context(request)
    task = _load_task(pk)
    _policy().ensure_can_view(ctx, task)
    logs = StatusLog.objects.filter(task=task).select_related('user').order_by('-created_at', '-id')
    return private_json([serialize_status_log(log) for log in logs])
