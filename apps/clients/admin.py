from django.contrib import admin
from .models import Client, System


class SystemInline(admin.TabularInline):
    model = System
    extra = 0
    fields = ('name', 'description')


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_at')
    search_fields = ('name',)
    inlines = [SystemInline]


@admin.register(System)
class SystemAdmin(admin.ModelAdmin):
    list_display = ('name', 'client')
    list_filter = ('client',)
    search_fields = ('name',)
