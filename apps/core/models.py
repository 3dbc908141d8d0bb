# apps/core/models.py
from django.conf import settings
from django.contrib.auth.models import User
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver

from .domain.entities import Role


class UserProfile(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='profile')

    class RoleChoices(models.TextChoices):
        ADMIN = Role.ADMIN.value, 'Admin'
        ASSIGNER = Role.ASSIGNER.value, 'Assigner'
        WORKER = Role.WORKER.value, 'Worker'

    # Rolę zmienia tylko admin (panel / tworzenie konta), nigdy sam użytkownik
    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.WORKER
    )

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Profile of {self.user.username} ({self.role})"


def display_name(user):
    if user is None:
        return ""
    return user.get_full_name() or user.username


# Sygnał: Twórz profil automatycznie przy tworzeniu Usera
@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    if created:
        UserProfile.objects.get_or_create(user=instance)
