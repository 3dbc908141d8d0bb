# apps/core/serializers.py
from .models import display_name


def user_summary(user):
    if user is None:
        return None
    return {'id': user.id, 'name': display_name(user)}


def serialize_user(user):
    profile = getattr(user, 'profile', None)
    return {
        'id': user.id,
        'name': display_name(user),
        'email': user.email,
        'role': profile.role if profile else None,
        'created_at': user.date_joined.isoformat(),
    }
