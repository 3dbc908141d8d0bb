# apps/realtime/views.py
from django.conf import settings
from django.http import StreamingHttpResponse
from django.views.decorators.http import require_http_methods

from apps.core.exceptions import ValidationError
from apps.core.http import api_login_required, api_view, auth_context
from .bus import get_bus
from .visibility import TABLES, default_visibility


def event_stream(ctx, tables, keepalive, bus=None):
    # Subskrypcja żyje tyle, co iteracja odpowiedzi
    with (bus or get_bus()).subscribe(ctx, tables, default_visibility) as subscription:
        yield "retry: 3000\n\n"
        while True:
            event = subscription.get(timeout=keepalive)
            if event is None:
                # Komentarz SSE podtrzymuje połączenie przez proxy
                yield ": keepalive\n\n"
                continue
            yield event.as_sse()


@require_http_methods(["GET"])
@api_login_required
@api_view("Failed to open event stream")
def event_stream_view(request):
    ctx = auth_context(request)
    requested = request.GET.get('tables')
    tables = [t.strip() for t in requested.split(',') if t.strip()] if requested else list(TABLES)
    unknown = set(tables) - set(TABLES)
    if unknown:
        raise ValidationError(f"Unknown table: {', '.join(sorted(unknown))}")

    response = StreamingHttpResponse(
        event_stream(ctx, tables, settings.REALTIME_KEEPALIVE_SECONDS),
        content_type='text/event-stream',
    )
    response['Cache-Control'] = 'no-cache'
    response['X-Accel-Buffering'] = 'no'
    return response
