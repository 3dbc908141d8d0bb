# apps/tasks/signals.py
from django.db.models.signals import post_delete
from django.dispatch import receiver

from apps.core.side_effects import dispatch
from .models import Attachment
from .storage import delete_stored_object


@receiver(post_delete, sender=Attachment)
def remove_stored_object(sender, instance, **kwargs):
    """
    Po usunięciu wiersza (także kaskadowo razem z zadaniem) kasujemy plik.
    Błąd storage nie cofa usunięcia.
    """
    dispatch("attachment object cleanup", delete_stored_object, instance.storage_path)
