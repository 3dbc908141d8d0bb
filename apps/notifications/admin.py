from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('title', 'type', 'receiver', 'status', 'created_at')
    list_filter = ('type', 'status')
    search_fields = ('title', 'message')
