# apps/core/http.py
import json
import logging
from functools import wraps

from django.db import DatabaseError
from django.http import JsonResponse
from django.utils.cache import add_never_cache_headers, patch_vary_headers

from .domain.entities import AuthContext, Role
from .exceptions import AuthenticationError, BackendError, DomainError, NotFoundError, ValidationError
from .models import UserProfile, display_name

logger = logging.getLogger(__name__)


def auth_context(request) -> AuthContext:
    """Buduje AuthContext z sesji. Brak sesji -> AuthenticationError (401)."""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        raise AuthenticationError()

    try:
        role = user.profile.role
    except UserProfile.DoesNotExist:
        # Fallback dla kont utworzonych przed profilem (np. createsuperuser)
        role = UserProfile.objects.create(user=user).role

    return AuthContext(user_id=user.id, role=Role(role), name=display_name(user), email=user.email)


def api_view(failure_message="Unexpected error"):
    """
    Mapuje taksonomię błędów na odpowiedzi JSON.

    DomainError -> jego kod i komunikat, DatabaseError -> 500 z ogólnym
    komunikatem endpointu, wszystko inne -> 500 + log.
    """
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                return view(request, *args, **kwargs)
            except BackendError as exc:
                logger.error("%s: %s", failure_message, exc)
                return error_response(failure_message, exc.status_code)
            except DomainError as exc:
                return error_response(exc.message, exc.status_code)
            except DatabaseError:
                logger.exception(failure_message)
                return error_response(failure_message, 500)
            except Exception:
                logger.exception(failure_message)
                return error_response(failure_message, 500)
        return wrapper
    return decorator


def api_login_required(view):
    """Odpowiednik login_required dla API: 401 zamiast przekierowania."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return error_response("Unauthorized", 401)
        return view(request, *args, **kwargs)
    return wrapper


def error_response(message, status):
    return JsonResponse({'error': message}, status=status)


def private_json(data, status=200):
    """Odpowiedź zależna od użytkownika: bez cache, Vary po ciasteczku sesji."""
    response = JsonResponse(data, status=status, safe=False)
    add_never_cache_headers(response)
    response['Cache-Control'] = 'private, no-store, no-cache, must-revalidate'
    response['Pragma'] = 'no-cache'
    patch_vary_headers(response, ('Cookie',))
    return response


def parse_json(request) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (TypeError, ValueError):
        raise ValidationError("Invalid JSON body")
    if not isinstance(data, dict):
        raise ValidationError("JSON body must be an object")
    return data


def parse_int(value, field):
    if value in (None, ''):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}")


def require_param(request, name):
    value = request.GET.get(name)
    if not value:
        raise ValidationError(f"{name} is required")
    return parse_int(value, name)


def get_or_404(queryset, message="Not found", **lookup):
    try:
        return queryset.get(**lookup)
    except queryset.model.DoesNotExist:
        raise NotFoundError(message)


def form_error(form) -> ValidationError:
    """Pierwszy błąd formularza jako ValidationError."""
    for field, errors in form.errors.items():
        if errors:
            prefix = "" if field == '__all__' else f"{field}: "
            return ValidationError(f"{prefix}{errors[0]}")
    return ValidationError()
