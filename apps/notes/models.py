# apps/notes/models.py
from django.conf import settings
from django.db import models


class Note(models.Model):
    task = models.ForeignKey('tasks.Task', on_delete=models.CASCADE, related_name='notes')
    # Treść z edytora rich-text (HTML z tokenami wzmianek)
    content = models.TextField()
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='notes')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Note {self.id} on task {self.task_id}"
