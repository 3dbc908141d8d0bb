from django.contrib import admin
from .models import Attachment, StatusLog, Subtask, Task


class SubtaskInline(admin.TabularInline):
    model = Subtask
    extra = 0
    fields = ('title', 'completed', 'completed_at')
    readonly_fields = ('completed_at',)


class AttachmentInline(admin.TabularInline):
    model = Attachment
    extra = 0
    fields = ('file_name', 'mime_type', 'size_bytes', 'public_url')
    readonly_fields = fields


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'priority', 'client', 'system', 'assigned_to', 'created_by', 'deadline')
    list_filter = ('status', 'priority', 'client')
    search_fields = ('title', 'description')
    # Pola pochodne ustawia cykl życia statusu
    readonly_fields = ('started_at', 'completed_at', 'duration', 'created_at', 'updated_at')
    inlines = [SubtaskInline, AttachmentInline]


@admin.register(StatusLog)
class StatusLogAdmin(admin.ModelAdmin):
    list_display = ('task', 'from_status', 'to_status', 'user', 'created_at')
    list_filter = ('to_status',)
