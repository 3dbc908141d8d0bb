# apps/notes/views.py
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.core.exceptions import NotFoundError
from apps.core.http import (
    api_login_required, api_view, auth_context, form_error, get_or_404, parse_json, private_json, require_param,
)
from apps.notifications.adapters.orm_sender import DjangoNotificationSender
from apps.tasks.adapters.orm_repositories import DjangoTaskRepository, DjangoUserDirectory
from apps.tasks.domain.services import TaskAccessPolicy
from .forms import NoteForm
from .models import Note
from .serializers import serialize_note
from .use_cases import NotifyMentionsUseCase


@require_http_methods(["GET", "POST", "PATCH", "DELETE"])
@api_login_required
@api_view("Failed to process notes")
def note_collection_view(request, pk):
    ctx = auth_context(request)
    users = DjangoUserDirectory()
    policy = TaskAccessPolicy(users)

    task = DjangoTaskRepository().get_by_id(pk)
    if task is None:
        raise NotFoundError("Task not found")

    if request.method == "GET":
        policy.ensure_can_view(ctx, task)
        notes = Note.objects.filter(task_id=task.id).select_related('created_by')
        return private_json([serialize_note(n) for n in notes])

    policy.ensure_can_edit(ctx, task)
    mentions = NotifyMentionsUseCase(users=users, notifier=DjangoNotificationSender())

    if request.method == "POST":
        form = NoteForm(parse_json(request))
        if not form.is_valid():
            raise form_error(form)
        note = form.save(commit=False)
        note.task_id = task.id
        note.created_by_id = ctx.user_id
        note.save()
        mentions.execute(ctx, task, note.content)
        return JsonResponse(serialize_note(note), status=201)

    note = get_or_404(
        Note.objects.filter(task_id=task.id).select_related('created_by'), "Note not found",
        pk=require_param(request, 'noteId'),
    )

    if request.method == "DELETE":
        note.delete()
        return JsonResponse({'success': True})

    previous_content = note.content
    form = NoteForm(parse_json(request), instance=note)
    if not form.is_valid():
        raise form_error(form)
    note = form.save()
    # Powiadamiamy tylko o nowo dodanych wzmiankach
    mentions.execute(ctx, task, note.content, previous_content=previous_content)
    return JsonResponse(serialize_note(note))
