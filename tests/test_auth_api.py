import pytest
from django.contrib.auth.models import User
from django.core import mail

from tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db


class TestSession:
    def test_login_and_session(self, api, worker):
        client = api()
        response = client.post('/api/auth/login/', {'email': 'WOJTEK@example.com', 'password': PASSWORD})
        assert response.status_code == 200
        assert response.json()['role'] == 'WORKER'

        session = client.get('/api/auth/session/').json()
        assert session == {'id': worker.id, 'name': 'Wojtek Worker', 'email': worker.email, 'role': 'WORKER'}

    def test_bad_credentials(self, api, worker):
        response = api().post('/api/auth/login/', {'email': worker.email, 'password': 'wrong-pass1'})
        assert response.status_code == 401

    def test_session_without_login(self, api):
        assert api().get('/api/auth/session/').status_code == 401

    def test_logout(self, api, worker):
        client = api(worker)
        assert client.post('/api/auth/logout/').status_code == 200
        assert client.get('/api/auth/session/').status_code == 401


class TestChangePassword:
    url = '/api/auth/change-password/'

    def test_success_replaces_hash_and_sends_mail(self, api, worker, django_capture_on_commit_callbacks):
        client = api(worker)
        with django_capture_on_commit_callbacks(execute=True):
            response = client.post(self.url, {'currentPassword': PASSWORD, 'newPassword': 'newpass42'})

        assert response.status_code == 200
        worker.refresh_from_db()
        assert worker.check_password('newpass42')
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == [worker.email]
        # Sesja nadal ważna po zmianie hasła
        assert client.get('/api/auth/session/').status_code == 200

    def test_wrong_current_password(self, api, worker):
        response = api(worker).post(self.url, {'currentPassword': 'nope12345', 'newPassword': 'newpass42'})
        assert response.status_code == 400
        assert response.json()['error'] == 'Current password is incorrect'

    @pytest.mark.parametrize('new_password', ['short1', 'lettersonly', '1234567890'])
    def test_policy(self, api, worker, new_password):
        response = api(worker).post(self.url, {'currentPassword': PASSWORD, 'newPassword': new_password})
        assert response.status_code == 400
        worker.refresh_from_db()
        assert worker.check_password(PASSWORD)

    def test_missing_fields(self, api, worker):
        assert api(worker).post(self.url, {'newPassword': 'newpass42'}).status_code == 400

    def test_requires_session(self, api):
        assert api().post(self.url, {'currentPassword': PASSWORD, 'newPassword': 'newpass42'}).status_code == 401


class TestUsers:
    def test_only_admin_creates_users(self, api, assigner, admin_user):
        payload = {'name': 'Nina New', 'email': 'nina@example.com', 'password': 'welcome12', 'role': 'ASSIGNER'}
        assert api(assigner).post('/api/users/', payload).status_code == 403

        response = api(admin_user).post('/api/users/', payload)
        assert response.status_code == 201
        assert response.json()['role'] == 'ASSIGNER'
        assert User.objects.get(username='nina@example.com').profile.role == 'ASSIGNER'

    def test_role_defaults_to_worker(self, api, admin_user):
        payload = {'name': 'Olek', 'email': 'olek@example.com', 'password': 'welcome12'}
        assert api(admin_user).post('/api/users/', payload).json()['role'] == 'WORKER'

    def test_duplicate_email(self, api, admin_user, worker):
        payload = {'name': 'Dup', 'email': worker.email, 'password': 'welcome12'}
        assert api(admin_user).post('/api/users/', payload).status_code == 400

    def test_list_and_detail(self, api, worker, assigner):
        client = api(worker)
        emails = {u['email'] for u in client.get('/api/users/').json()}
        assert {worker.email, assigner.email} <= emails
        assert client.get(f'/api/users/{assigner.id}/').json()['role'] == 'ASSIGNER'
        assert client.get('/api/users/9999/').status_code == 404
