from django import forms
from django.contrib.auth import password_validation
from django.contrib.auth.models import User

from .models import UserProfile


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(strip=False)


class UserCreateForm(forms.Form):
    name = forms.CharField(max_length=150)
    email = forms.EmailField()
    password = forms.CharField(strip=False)
    role = forms.ChoiceField(choices=UserProfile.RoleChoices.choices, required=False)

    def clean_email(self):
        email = self.cleaned_data['email'].lower()
        if User.objects.filter(username=email).exists():
            raise forms.ValidationError("A user with this email already exists")
        return email

    def clean_password(self):
        password = self.cleaned_data['password']
        password_validation.validate_password(password)
        return password

    def clean_role(self):
        return self.cleaned_data.get('role') or UserProfile.RoleChoices.WORKER

    def save(self):
        data = self.cleaned_data
        user = User.objects.create_user(
            username=data['email'],
            email=data['email'],
            password=data['password'],
            first_name=data['name'],
        )
        # Profil tworzy sygnał post_save, tutaj tylko ustawiamy rolę
        UserProfile.objects.filter(user=user).update(role=data['role'])
        user.refresh_from_db()
        return user


class ChangePasswordForm(forms.Form):
    # Nazwy pól zgodne z kontraktem API (camelCase)
    currentPassword = forms.CharField(strip=False)
    newPassword = forms.CharField(strip=False)

    def __init__(self, user, *args, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_newPassword(self):
        password = self.cleaned_data['newPassword']
        password_validation.validate_password(password, self.user)
        return password

    def clean(self):
        cleaned = super().clean()
        current = cleaned.get('currentPassword')
        if current and 'newPassword' in cleaned and not self.user.check_password(current):
            raise forms.ValidationError("Current password is incorrect")
        return cleaned

    def save(self):
        self.user.set_password(self.cleaned_data['newPassword'])
        self.user.save(update_fields=['password'])
        return self.user
