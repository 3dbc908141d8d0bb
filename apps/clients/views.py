# apps/clients/views.py
from django.db.models import ProtectedError
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.core.exceptions import ConflictError, ValidationError
from apps.core.http import (
    api_login_required, api_view, form_error, get_or_404, parse_int, parse_json, private_json, require_param
)
from .forms import ClientForm, SystemForm
from .models import Client, System
from .serializers import serialize_client, serialize_system


def _save_form(form_class, data, instance=None):
    if instance is not None:
        # PATCH: pola nieprzesłane zostają bez zmian
        current = model_to_dict(instance, fields=form_class._meta.fields)
        current.update({k: v for k, v in data.items() if k in form_class._meta.fields and v is not None})
        data = current

    form = form_class(data, instance=instance)
    if not form.is_valid():
        raise form_error(form)
    return form.save()


def _target_id(body):
    target_id = parse_int(body.get('id'), 'id')
    if target_id is None:
        raise ValidationError("Missing id")
    return target_id


@require_http_methods(["GET", "POST", "PATCH", "DELETE"])
@api_login_required
@api_view("Failed to process clients")
def client_collection_view(request):
    if request.method == "POST":
        client = _save_form(ClientForm, parse_json(request))
        return JsonResponse(serialize_client(client), status=201)

    if request.method == "PATCH":
        body = parse_json(request)
        client = get_or_404(Client.objects.all(), "Client not found", pk=_target_id(body))
        client = _save_form(ClientForm, body, instance=client)
        return JsonResponse(serialize_client(client))

    if request.method == "DELETE":
        client = get_or_404(Client.objects.all(), "Client not found", pk=require_param(request, 'id'))
        try:
            client.delete()
        except ProtectedError:
            raise ConflictError("Client still has systems or tasks")
        return JsonResponse({'success': True})

    clients = Client.objects.all().order_by('name')
    return private_json([serialize_client(c) for c in clients])


@require_http_methods(["GET", "POST", "PATCH", "DELETE"])
@api_login_required
@api_view("Failed to process systems")
def system_collection_view(request):
    if request.method == "POST":
        body = parse_json(request)
        # Zgodność z kontraktem API: client_id -> client
        body.setdefault('client', body.get('client_id'))
        system = _save_form(SystemForm, body)
        return JsonResponse(serialize_system(system), status=201)

    if request.method == "PATCH":
        body = parse_json(request)
        system = get_or_404(System.objects.all(), "System not found", pk=_target_id(body))
        # Przeniesienie systemu do innego klienta nie jest obsługiwane
        body.pop('client', None)
        system = _save_form(SystemForm, body, instance=system)
        return JsonResponse(serialize_system(system))

    if request.method == "DELETE":
        system = get_or_404(System.objects.all(), "System not found", pk=require_param(request, 'id'))
        try:
            system.delete()
        except ProtectedError:
            raise ConflictError("System is still referenced by tasks")
        return JsonResponse({'success': True})

    systems = System.objects.all().order_by('name')
    client_id = parse_int(request.GET.get('clientId'), 'clientId')
    if client_id:
        systems = systems.filter(client_id=client_id)
    return private_json([serialize_system(s) for s in systems])
