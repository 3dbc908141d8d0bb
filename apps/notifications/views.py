from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.core.exceptions import AuthorizationError
from apps.core.http import (
    api_login_required, api_view, auth_context, form_error, get_or_404, parse_int, parse_json, private_json,
)
from .forms import NotificationForm
from .models import Notification
from .serializers import serialize_notification


def _receiver_notification(ctx, pk):
    notification = get_or_404(Notification.objects.all(), "Notification not found", pk=pk)
    # Oznaczać i usuwać może tylko adresat
    if notification.receiver_id != ctx.user_id:
        raise AuthorizationError("Forbidden")
    return notification


@require_http_methods(["GET", "POST"])
@api_login_required
@api_view("Failed to process notifications")
def notification_list_view(request):
    ctx = auth_context(request)

    if request.method == "POST":
        form = NotificationForm(parse_json(request))
        if not form.is_valid():
            raise form_error(form)
        notification = form.save(sender_id=ctx.user_id)
        return JsonResponse(serialize_notification(notification), status=201)

    limit = parse_int(request.GET.get('limit'), 'limit') or settings.NOTIFICATIONS_DEFAULT_LIMIT
    qs = Notification.objects.filter(receiver_id=ctx.user_id).select_related('task', 'sender', 'receiver')
    if request.GET.get('unread_only') == 'true':
        qs = qs.filter(status=Notification.StatusChoices.UNREAD)

    return private_json([serialize_notification(n) for n in qs[:max(limit, 1)]])


@require_http_methods(["PATCH", "DELETE"])
@api_login_required
@api_view("Failed to update notification")
def notification_detail_view(request, pk):
    ctx = auth_context(request)
    notification = _receiver_notification(ctx, pk)

    if request.method == "DELETE":
        notification.delete()
        return JsonResponse({'success': True})

    notification.status = Notification.StatusChoices.READ
    notification.save(update_fields=['status'])
    return JsonResponse(serialize_notification(notification))


@require_http_methods(["PATCH"])
@api_login_required
@api_view("Failed to mark notifications as read")
def mark_all_read_view(request):
    ctx = auth_context(request)
    updated = Notification.objects.filter(
        receiver_id=ctx.user_id,
        status=Notification.StatusChoices.UNREAD,
    ).update(status=Notification.StatusChoices.READ)
    return JsonResponse({'success': True, 'updated_count': updated})
