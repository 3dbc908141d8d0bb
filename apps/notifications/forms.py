from django import forms
from django.contrib.auth.models import User

from apps.tasks.models import Task
from .models import Notification


class NotificationForm(forms.Form):
    """Ręczne utworzenie powiadomienia przez API (nadawcą jest wywołujący)."""
    task_id = forms.ModelChoiceField(queryset=Task.objects.all())
    receiver_id = forms.IntegerField()
    type = forms.ChoiceField(choices=Notification.TypeChoices.choices)
    title = forms.CharField(max_length=200)
    message = forms.CharField()

    def clean_receiver_id(self):
        receiver_id = self.cleaned_data['receiver_id']
        if not User.objects.filter(pk=receiver_id).exists():
            raise forms.ValidationError("Receiver does not exist")
        return receiver_id

    def save(self, sender_id):
        return Notification.objects.create(
            task=self.cleaned_data['task_id'],
            sender_id=sender_id,
            receiver_id=self.cleaned_data['receiver_id'],
            type=self.cleaned_data['type'],
            title=self.cleaned_data['title'],
            message=self.cleaned_data['message'],
        )
