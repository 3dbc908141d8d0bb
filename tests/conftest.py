import json
from datetime import timedelta

import pytest
from django.contrib.auth.models import User
from django.test import Client as HttpClient
from django.utils import timezone

from apps.clients.models import Client, System
from apps.core.models import UserProfile
from apps.tasks.models import Task

PASSWORD = 'secret123'


def make_user(email, role, name):
    user = User.objects.create_user(username=email, email=email, password=PASSWORD, first_name=name)
    UserProfile.objects.filter(user=user).update(role=role)
    user.refresh_from_db()
    return user


class JsonClient:
    """Cienka nakładka na klienta testowego Django: JSON w body, JSON w odpowiedzi."""

    def __init__(self, user=None):
        self.http = HttpClient()
        if user is not None:
            self.http.force_login(user)

    def _send(self, method, path, data=None, **extra):
        body = json.dumps(data) if data is not None else ''
        return getattr(self.http, method)(path, data=body, content_type='application/json', **extra)

    def get(self, path, params=None, **extra):
        return self.http.get(path, params or {}, **extra)

    def post(self, path, data=None, **extra):
        return self._send('post', path, data, **extra)

    def patch(self, path, data=None, **extra):
        return self._send('patch', path, data, **extra)

    def delete(self, path, **extra):
        return self.http.delete(path, **extra)


@pytest.fixture
def admin_user(db):
    return make_user('admin@example.com', 'ADMIN', 'Ada Admin')


@pytest.fixture
def assigner(db):
    return make_user('anna@example.com', 'ASSIGNER', 'Anna Assigner')


@pytest.fixture
def other_assigner(db):
    return make_user('adam@example.com', 'ASSIGNER', 'Adam Assigner')


@pytest.fixture
def worker(db):
    return make_user('wojtek@example.com', 'WORKER', 'Wojtek Worker')


@pytest.fixture
def other_worker(db):
    return make_user('wanda@example.com', 'WORKER', 'Wanda Worker')


@pytest.fixture
def client_obj(db):
    return Client.objects.create(name='Acme', description='Main client')


@pytest.fixture
def system_obj(client_obj):
    return System.objects.create(client=client_obj, name='ERP')


@pytest.fixture
def make_task(client_obj, system_obj):
    def factory(created_by, assigned_to, **fields):
        fields.setdefault('title', 'Fix invoice export')
        return Task.objects.create(
            client=client_obj,
            system=system_obj,
            created_by=created_by,
            assigned_to=assigned_to,
            **fields,
        )
    return factory


@pytest.fixture
def task(make_task, assigner, worker):
    """Zadanie utworzone przez assignera i przypisane do workera."""
    return make_task(assigner, worker)


@pytest.fixture
def api():
    def factory(user=None):
        return JsonClient(user)
    return factory


@pytest.fixture
def days_ago():
    def factory(days):
        return timezone.now() - timedelta(days=days)
    return factory
