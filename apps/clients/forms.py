from django import forms
from .models import Client, System


class ClientForm(forms.ModelForm):
    class Meta:
        model = Client
        fields = ['name', 'description']


class SystemForm(forms.ModelForm):
    class Meta:
        model = System
        fields = ['name', 'description', 'client']
