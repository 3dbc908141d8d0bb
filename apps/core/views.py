from django.contrib.auth import authenticate, login, logout, update_session_auth_hash
from django.contrib.auth.models import User
from django.http import JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_http_methods

from .exceptions import AuthenticationError, AuthorizationError
from .forms import ChangePasswordForm, LoginForm, UserCreateForm
from .http import api_login_required, api_view, auth_context, form_error, get_or_404, parse_json, private_json
from .mailer import send_password_changed_mail
from .models import display_name
from .serializers import serialize_user
from .side_effects import dispatch


@require_http_methods(["POST"])
@api_view("Login failed")
def login_view(request):
    form = LoginForm(parse_json(request))
    if not form.is_valid():
        raise form_error(form)

    user = authenticate(
        request,
        username=form.cleaned_data['email'].lower(),
        password=form.cleaned_data['password']
    )
    if user is None:
        raise AuthenticationError("Invalid email or password")

    login(request, user)
    return JsonResponse(serialize_user(user))


@require_http_methods(["POST"])
def logout_view(request):
    logout(request)
    return JsonResponse({'success': True})


# Klient SPA pobiera tu ciasteczko CSRF przed logowaniem
@ensure_csrf_cookie
@require_http_methods(["GET"])
@api_view("Failed to fetch session")
def session_view(request):
    ctx = auth_context(request)
    return private_json({
        'id': ctx.user_id,
        'name': ctx.name,
        'email': ctx.email,
        'role': ctx.role.value,
    })


@require_http_methods(["POST"])
@api_login_required
@api_view("Unexpected error")
def change_password_view(request):
    form = ChangePasswordForm(request.user, parse_json(request))
    if not form.is_valid():
        raise form_error(form)

    user = form.save()
    # Zmiana hasła unieważnia sesję - odświeżamy hash, żeby użytkownik nie został wylogowany
    update_session_auth_hash(request, user)

    # Mail informacyjny: best-effort, nie wpływa na wynik
    dispatch("password changed mail", send_password_changed_mail, user.email, display_name(user))

    return JsonResponse({'ok': True})


@require_http_methods(["GET", "POST"])
@api_login_required
@api_view("Failed to process users")
def user_list_view(request):
    ctx = auth_context(request)

    if request.method == "POST":
        # Tylko admin tworzy nowych użytkowników
        if not ctx.is_admin:
            raise AuthorizationError("Forbidden")

        form = UserCreateForm(parse_json(request))
        if not form.is_valid():
            raise form_error(form)
        user = form.save()
        return JsonResponse(serialize_user(user), status=201)

    users = User.objects.filter(is_active=True).select_related('profile').order_by('first_name', 'username')
    return private_json([serialize_user(u) for u in users])


@require_http_methods(["GET"])
@api_login_required
@api_view("Failed to fetch user")
def user_detail_view(request, pk):
    user = get_or_404(User.objects.select_related('profile'), "User not found", pk=pk)
    return private_json(serialize_user(user))
