# apps/tasks/forms.py
from dateutil.parser import isoparse
from django import forms
from django.contrib.auth.models import User
from django.utils import timezone

from .models import Subtask, Task


class IsoDateTimeField(forms.DateTimeField):
    """Termin w ISO 8601 (z 'Z' lub offsetem). Daty bez strefy traktujemy jako lokalne."""

    def to_python(self, value):
        if value in self.empty_values:
            return None
        if hasattr(value, 'tzinfo'):
            parsed = value
        else:
            try:
                parsed = isoparse(str(value))
            except (TypeError, ValueError):
                raise forms.ValidationError("Enter a valid ISO 8601 date/time.", code='invalid')
        if timezone.is_naive(parsed):
            parsed = timezone.make_aware(parsed)
        return parsed

    def prepare_value(self, value):
        if hasattr(value, 'isoformat'):
            return value.isoformat()
        return value


class TaskForm(forms.ModelForm):
    deadline = IsoDateTimeField(required=False)
    assigned_to = forms.ModelChoiceField(queryset=User.objects.filter(is_active=True))

    class Meta:
        model = Task
        fields = ['title', 'description', 'priority', 'deadline', 'client', 'system', 'assigned_to']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['priority'].required = False

    def clean_priority(self):
        return self.cleaned_data.get('priority') or Task.PriorityChoices.MEDIUM.value

    def clean(self):
        cleaned = super().clean()
        client = cleaned.get('client')
        system = cleaned.get('system')
        if client and system and system.client_id != client.id:
            raise forms.ValidationError("System does not belong to the selected client")
        return cleaned

    def entity_changes(self) -> dict:
        """cleaned_data w kluczach TaskEntity (ID zamiast obiektów)."""
        data = self.cleaned_data
        return {
            'title': data['title'],
            'description': data.get('description', ''),
            'priority': data['priority'],
            'deadline': data.get('deadline'),
            'client_id': data['client'].id,
            'system_id': data['system'].id,
            'assigned_to_id': data['assigned_to'].id,
        }


class TaskStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Task.StatusChoices.choices)


class SubtaskForm(forms.ModelForm):
    class Meta:
        model = Subtask
        fields = ['title', 'completed']
