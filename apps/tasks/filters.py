# apps/tasks/filters.py
import django_filters

from .models import Task


class TaskFilter(django_filters.FilterSet):
    """Filtry listy zadań z query stringa; zawężenie po roli nakłada widok."""
    title = django_filters.CharFilter(lookup_expr='icontains')
    status = django_filters.ChoiceFilter(choices=Task.StatusChoices.choices)
    priority = django_filters.ChoiceFilter(choices=Task.PriorityChoices.choices)
    assigned_to = django_filters.NumberFilter(field_name='assigned_to_id')
    created_by = django_filters.NumberFilter(field_name='created_by_id')
    client = django_filters.NumberFilter(field_name='client_id')
    system = django_filters.NumberFilter(field_name='system_id')

    class Meta:
        model = Task
        fields = ['title', 'status', 'priority', 'assigned_to', 'created_by', 'client', 'system']
