from django.contrib import admin
from .models import Note


@admin.register(Note)
class NoteAdmin(admin.ModelAdmin):
    list_display = ('task', 'created_by', 'created_at')
    search_fields = ('content',)
