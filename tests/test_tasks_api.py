from datetime import timedelta
from unittest import mock

import pytest
from django.db import DatabaseError
from django.utils import timezone

from apps.clients.models import Client, System
from apps.notifications.models import Notification
from apps.tasks.adapters.orm_repositories import DjangoStatusLogRepository
from apps.tasks.models import StatusLog, Subtask, Task

pytestmark = pytest.mark.django_db


def ids(response):
    return {row['id'] for row in response.json()}


class TestErrors:
    def test_anonymous_gets_401(self, api, task):
        response = api().get('/api/tasks/')
        assert response.status_code == 401
        assert response.json() == {'error': 'Unauthorized'}

    def test_unrelated_worker_gets_403(self, api, task, other_worker):
        assert api(other_worker).get(f'/api/tasks/{task.id}/').status_code == 403

    def test_missing_task_404(self, api, worker):
        response = api(worker).get('/api/tasks/9999/')
        assert response.status_code == 404
        assert response.json()['error'] == 'Task not found'

    def test_invalid_status_400(self, api, task, worker):
        response = api(worker).patch(f'/api/tasks/{task.id}/status/', {'status': 'DONE'})
        assert response.status_code == 400

    def test_malformed_json_400(self, api, worker):
        response = api(worker).http.post('/api/tasks/', data='{not json', content_type='application/json')
        assert response.status_code == 400

    def test_list_is_not_cacheable(self, api, worker):
        response = api(worker).get('/api/tasks/')
        assert 'no-store' in response['Cache-Control']
        assert 'private' in response['Cache-Control']
        assert 'Cookie' in response['Vary']


class TestCreate:
    def payload(self, client_obj, system_obj, assigned_to, **extra):
        data = {
            'title': 'Prepare release notes',
            'client': client_obj.id,
            'system': system_obj.id,
            'assigned_to': assigned_to.id,
        }
        data.update(extra)
        return data

    def test_creates_task_and_notifies_assignee(self, api, assigner, worker, client_obj, system_obj,
                                                django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = api(assigner).post('/api/tasks/', self.payload(
                client_obj, system_obj, worker, deadline='2030-01-15T10:00:00Z', priority='HIGH',
            ))

        assert response.status_code == 201
        body = response.json()
        assert body['status'] == 'NOT_STARTED'
        assert body['priority'] == 'HIGH'
        assert body['created_by'] == assigner.id
        assert body['deadline'].startswith('2030-01-15T10:00:00')

        notification = Notification.objects.get()
        assert notification.type == 'TASK_ASSIGNED'
        assert notification.receiver_id == worker.id
        assert notification.sender_id == assigner.id

    def test_priority_defaults_to_medium(self, api, worker, client_obj, system_obj):
        response = api(worker).post('/api/tasks/', self.payload(client_obj, system_obj, worker))
        assert response.status_code == 201
        assert response.json()['priority'] == 'MEDIUM'

    def test_self_assignment_creates_no_notification(self, api, worker, client_obj, system_obj,
                                                     django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            api(worker).post('/api/tasks/', self.payload(client_obj, system_obj, worker))
        assert Notification.objects.count() == 0

    def test_worker_cannot_assign_others(self, api, worker, other_worker, client_obj, system_obj):
        response = api(worker).post('/api/tasks/', self.payload(client_obj, system_obj, other_worker))
        assert response.status_code == 403
        assert response.json()['error'] == 'Workers can only assign tasks to themselves'
        assert Task.objects.count() == 0

    def test_system_must_belong_to_client(self, api, assigner, worker, client_obj, system_obj):
        other = System.objects.create(client=Client.objects.create(name='Globex'), name='CRM')
        response = api(assigner).post('/api/tasks/', self.payload(client_obj, other, worker))
        assert response.status_code == 400

    def test_missing_title(self, api, assigner, worker, client_obj, system_obj):
        data = self.payload(client_obj, system_obj, worker)
        del data['title']
        assert api(assigner).post('/api/tasks/', data).status_code == 400


class TestStatusChange:
    def test_full_lifecycle(self, api, task, worker, assigner, django_capture_on_commit_callbacks):
        client = api(worker)
        with django_capture_on_commit_callbacks(execute=True):
            started = client.patch(f'/api/tasks/{task.id}/status/', {'status': 'IN_PROGRESS'})
        with django_capture_on_commit_callbacks(execute=True):
            done = client.patch(f'/api/tasks/{task.id}/status/', {'status': 'COMPLETED'})

        assert started.status_code == 200
        assert started.json()['started_at'] is not None
        body = done.json()
        assert body['status'] == 'COMPLETED'
        assert body['completed_at'] is not None
        assert body['duration'] >= 0
        assert body['duration_display'].endswith('s')

        logs = list(StatusLog.objects.order_by('id').values_list('from_status', 'to_status'))
        assert logs == [('NOT_STARTED', 'IN_PROGRESS'), ('IN_PROGRESS', 'COMPLETED')]

        types = list(Notification.objects.filter(receiver=assigner).order_by('id').values_list('type', flat=True))
        assert types == ['TASK_STATUS_CHANGED', 'TASK_COMPLETED']

    def test_status_log_failure_does_not_fail_update(self, api, task, worker, django_capture_on_commit_callbacks):
        with mock.patch.object(DjangoStatusLogRepository, 'append', side_effect=DatabaseError("boom")):
            with django_capture_on_commit_callbacks(execute=True):
                response = api(worker).patch(f'/api/tasks/{task.id}/status/', {'status': 'IN_TESTING'})

        assert response.status_code == 200
        task.refresh_from_db()
        assert task.status == 'IN_TESTING'
        assert StatusLog.objects.count() == 0
        # Powiadomienie autora nie zależy od logu
        assert Notification.objects.filter(type='TASK_STATUS_CHANGED').count() == 1

    def test_back_to_back_changes_are_all_logged_and_last_wins(self, api, task, worker, assigner,
                                                             django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            first = api(worker).patch(f'/api/tasks/{task.id}/status/', {'status': 'IN_TESTING'})
            second = api(assigner).patch(f'/api/tasks/{task.id}/status/', {'status': 'NEW_STARTED'})

        assert (first.status_code, second.status_code) == (200, 200)
        task.refresh_from_db()
        assert task.status == 'NEW_STARTED'
        logs = list(StatusLog.objects.order_by('id').values_list('user_id', 'to_status'))
        assert logs == [(worker.id, 'IN_TESTING'), (assigner.id, 'NEW_STARTED')]

    def test_status_logs_endpoint_newest_first(self, api, task, worker, django_capture_on_commit_callbacks):
        client = api(worker)
        for status in ('IN_PROGRESS', 'IN_TESTING'):
            with django_capture_on_commit_callbacks(execute=True):
                client.patch(f'/api/tasks/{task.id}/status/', {'status': status})

        rows = client.get(f'/api/tasks/{task.id}/status-logs/').json()
        assert [r['to_status'] for r in rows] == ['IN_TESTING', 'IN_PROGRESS']
        assert rows[0]['user']['id'] == worker.id
        assert rows[0]['to_label'] == 'In Testing'

    def test_unrelated_assigner_cannot_change_status(self, api, task, other_assigner):
        response = api(other_assigner).patch(f'/api/tasks/{task.id}/status/', {'status': 'COMPLETED'})
        assert response.status_code == 403


class TestDetail:
    def test_unrelated_assigner_may_view_worker_task_but_not_edit(self, api, task, other_assigner):
        client = api(other_assigner)
        assert client.get(f'/api/tasks/{task.id}/').status_code == 200
        assert client.patch(f'/api/tasks/{task.id}/', {'title': 'Hijacked'}).status_code == 403
        assert client.delete(f'/api/tasks/{task.id}/').status_code == 403

    def test_worker_assignee_cannot_delete(self, api, task, worker):
        response = api(worker).delete(f'/api/tasks/{task.id}/')
        assert response.status_code == 403
        assert Task.objects.filter(pk=task.id).exists()

    def test_creator_deletes_with_children(self, api, task, assigner, worker):
        Subtask.objects.create(task=task, title='Step 1')
        Notification.objects.create(task=task, sender=assigner, receiver=worker, type='TASK_ASSIGNED',
                                    title='New Task Assigned', message='...')

        assert api(assigner).delete(f'/api/tasks/{task.id}/').status_code == 200
        assert not Task.objects.filter(pk=task.id).exists()
        assert Subtask.objects.count() == 0
        assert Notification.objects.count() == 0

    def test_patch_keeps_missing_fields(self, api, task, worker):
        response = api(worker).patch(f'/api/tasks/{task.id}/', {'description': 'More details'})
        assert response.status_code == 200
        task.refresh_from_db()
        assert task.description == 'More details'
        assert task.title == 'Fix invoice export'

    def test_reassign_notifies_new_assignee(self, api, task, assigner, other_worker,
                                            django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = api(assigner).patch(f'/api/tasks/{task.id}/', {'assigned_to': other_worker.id})
        assert response.status_code == 200
        assert response.json()['assigned_to'] == other_worker.id
        assert Notification.objects.get().receiver_id == other_worker.id

    def test_worker_cannot_reassign(self, api, task, worker, other_worker):
        response = api(worker).patch(f'/api/tasks/{task.id}/', {'assigned_to': other_worker.id})
        assert response.status_code == 403


class TestListing:
    def test_worker_sees_only_own_tasks(self, api, make_task, assigner, worker, other_worker):
        mine = make_task(assigner, worker)
        make_task(assigner, other_worker)
        client = api(worker)

        assert ids(client.get('/api/tasks/')) == {mine.id}
        # Jawny filtr nie poszerza widoczności WORKER-a
        assert ids(client.get('/api/tasks/', {'assigned_to': other_worker.id})) == set()
        assert ids(client.get('/api/tasks/', {'dashboard': 'true'})) == {mine.id}

    def test_assigner_listing_modes(self, api, make_task, assigner, other_assigner, worker, admin_user):
        involved = make_task(assigner, worker)
        of_worker = make_task(other_assigner, worker)
        of_assigner = make_task(admin_user, other_assigner)
        client = api(assigner)

        assert ids(client.get('/api/tasks/')) == {involved.id}
        assert ids(client.get('/api/tasks/', {'assigned_to': worker.id})) == {involved.id, of_worker.id}
        assert ids(client.get('/api/tasks/', {'assigned_to': other_assigner.id})) == set()
        assert ids(client.get('/api/tasks/', {'dashboard': 'true'})) == {involved.id, of_worker.id, of_assigner.id}

    def test_dashboard_completed_window(self, api, make_task, assigner, worker, days_ago):
        recent = make_task(assigner, worker, status='COMPLETED', completed_at=days_ago(6))
        stale = make_task(assigner, worker, status='COMPLETED', completed_at=days_ago(8))
        old_open = make_task(assigner, worker)
        Task.objects.filter(pk=old_open.pk).update(created_at=days_ago(30))

        dashboard = ids(api(assigner).get('/api/tasks/', {'dashboard': 'true'}))
        assert recent.id in dashboard
        assert old_open.id in dashboard
        assert stale.id not in dashboard

        # Poza dashboardem brak filtra czasowego
        assert stale.id in ids(api(assigner).get('/api/tasks/'))

    def test_rows_carry_counts(self, api, task, assigner):
        Subtask.objects.create(task=task, title='a', completed=True)
        Subtask.objects.create(task=task, title='b')
        row, = api(assigner).get('/api/tasks/', {'dashboard': 'true'}).json()

        assert row['subtask_count'] == 2
        assert row['completed_subtask_count'] == 1
        assert row['note_count'] == 0
        assert row['client']['name'] == 'Acme'
        assert row['assigned_user']['name'] == 'Wojtek Worker'

    def test_filters(self, api, make_task, assigner, worker):
        high = make_task(assigner, worker, title='Urgent fix', priority='HIGH')
        make_task(assigner, worker, title='Later', priority='LOW')
        client = api(assigner)

        assert ids(client.get('/api/tasks/', {'priority': 'HIGH'})) == {high.id}
        assert ids(client.get('/api/tasks/', {'title': 'urgent'})) == {high.id}
        assert client.get('/api/tasks/', {'status': 'NOPE'}).status_code == 400
        assert client.get('/api/tasks/', {'deadline_scope': 'YEAR'}).status_code == 400

    def test_deadline_scope(self, api, make_task, assigner, worker):
        now = timezone.now()
        overdue = make_task(assigner, worker, deadline=now - timedelta(days=2))
        next_month = make_task(assigner, worker, deadline=now + timedelta(days=30))
        no_deadline = make_task(assigner, worker)

        week = ids(api(assigner).get('/api/tasks/', {'deadline_scope': 'WEEK'}))
        assert week == {overdue.id, no_deadline.id}
        assert next_month.id not in week

    def test_limit(self, api, make_task, assigner, worker):
        for i in range(3):
            make_task(assigner, worker, title=f'Task {i}')
        assert len(api(assigner).get('/api/tasks/', {'limit': 2}).json()) == 2
