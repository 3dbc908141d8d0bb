import threading

import pytest
from django.db import transaction

from apps.core.domain.entities import AuthContext, Role
from apps.realtime import bus as bus_module
from apps.realtime.bus import ChangeEvent, EventBus
from apps.realtime.views import event_stream
from apps.realtime.visibility import default_visibility
from apps.notifications.models import Notification

A1, A2, W, W2 = 1, 2, 3, 4

ASSIGNER = AuthContext(user_id=A1, role=Role.ASSIGNER)
OTHER_ASSIGNER = AuthContext(user_id=A2, role=Role.ASSIGNER)
WORKER = AuthContext(user_id=W, role=Role.WORKER)
OTHER_WORKER = AuthContext(user_id=W2, role=Role.WORKER)


def task_event(assigned_to=W, created_by=A1, assignee_role='WORKER'):
    return ChangeEvent('tasks', 'UPDATE', 10, {
        'id': 10, 'assigned_to': assigned_to, 'created_by': created_by, 'assignee_role': assignee_role,
    })


def test_task_events_follow_view_predicate():
    bus = EventBus()
    subs = {ctx.user_id: bus.subscribe(ctx, ['tasks'], default_visibility)
            for ctx in (ASSIGNER, OTHER_ASSIGNER, WORKER, OTHER_WORKER)}

    assert bus.publish(task_event()) == 3
    assert subs[W2].get(timeout=0) is None
    assert subs[A2].get(timeout=0).row_id == 10


def test_other_assigner_does_not_see_assigner_tasks():
    bus = EventBus()
    sub = bus.subscribe(OTHER_ASSIGNER, ['tasks'], default_visibility)
    bus.publish(task_event(assigned_to=A1, created_by=W, assignee_role='ASSIGNER'))
    assert sub.get(timeout=0) is None


def test_notification_events_reach_only_receiver():
    bus = EventBus()
    mine = bus.subscribe(WORKER, ['notifications'], default_visibility)
    theirs = bus.subscribe(OTHER_WORKER, ['notifications', 'tasks'], default_visibility)

    bus.publish(ChangeEvent('notifications', 'INSERT', 5, {'id': 5, 'receiver_id': W}))

    assert mine.get(timeout=0).row_id == 5
    assert theirs.get(timeout=0) is None


def test_table_filter():
    bus = EventBus()
    sub = bus.subscribe(WORKER, ['notifications'], default_visibility)
    assert bus.publish(task_event()) == 0
    assert sub.get(timeout=0) is None


def test_full_queue_drops_events():
    bus = EventBus(queue_size=1)
    sub = bus.subscribe(WORKER, ['tasks'], default_visibility)
    bus.publish(task_event())
    bus.publish(task_event())
    assert sub.dropped == 1


def test_failing_visibility_check_only_skips_that_subscription():
    def broken(ctx, event):
        raise KeyError('assigned_to')

    bus = EventBus()
    bad = bus.subscribe(ASSIGNER, ['tasks'], broken)
    good = bus.subscribe(WORKER, ['tasks'], default_visibility)
    assert bus.publish(task_event()) == 1
    assert bad.get(timeout=0) is None
    assert good.get(timeout=0) is not None


def test_closing_subscription_unsubscribes():
    bus = EventBus()
    with bus.subscribe(WORKER, ['tasks'], default_visibility):
        assert bus.subscriber_count == 1
    assert bus.subscriber_count == 0


def test_sse_format():
    event = ChangeEvent('notifications', 'INSERT', 5, {'receiver_id': W})
    assert event.as_sse().startswith('event: notifications\ndata: {')
    assert event.as_sse().endswith('\n\n')


def test_event_stream_yields_events_and_keepalives():
    bus = EventBus()
    stream = event_stream(WORKER, ['tasks'], keepalive=0.01, bus=bus)
    assert next(stream).startswith('retry:')
    assert next(stream) == ': keepalive\n\n'

    bus.publish(task_event())
    assert next(stream).startswith('event: tasks\n')

    stream.close()
    assert bus.subscriber_count == 0


@pytest.mark.django_db
def test_model_changes_are_published(monkeypatch, task, worker, assigner, other_worker,
                                     django_capture_on_commit_callbacks):
    bus = EventBus()
    monkeypatch.setattr(bus_module, '_bus', bus)
    worker_ctx = AuthContext(user_id=worker.id, role=Role.WORKER)
    outsider_ctx = AuthContext(user_id=other_worker.id, role=Role.WORKER)
    worker_sub = bus.subscribe(worker_ctx, ['tasks', 'notifications'], default_visibility)
    outsider_sub = bus.subscribe(outsider_ctx, ['tasks', 'notifications'], default_visibility)

    with django_capture_on_commit_callbacks(execute=True):
        task.title = 'Renamed'
        task.save()
        Notification.objects.create(task=task, sender=assigner, receiver=worker, type='TASK_ASSIGNED',
                                    title='New Task Assigned', message='...')
        # Nic nie wychodzi przed zatwierdzeniem
        assert worker_sub.get(timeout=0) is None

    first = worker_sub.get(timeout=0)
    assert (first.table, first.action, first.payload['title']) == ('tasks', 'UPDATE', 'Renamed')
    assert first.payload['assignee_role'] == 'WORKER'
    second = worker_sub.get(timeout=0)
    assert (second.table, second.action) == ('notifications', 'INSERT')
    assert outsider_sub.get(timeout=0) is None


@pytest.mark.django_db
def test_delete_reaches_every_viewer(monkeypatch, task, other_assigner, django_capture_on_commit_callbacks):
    bus = EventBus()
    monkeypatch.setattr(bus_module, '_bus', bus)
    # Niezwiązany ASSIGNER widzi zadanie WORKERA, więc musi dostać też jego usunięcie
    viewer_sub = bus.subscribe(AuthContext(user_id=other_assigner.id, role=Role.ASSIGNER), ['tasks'],
                               default_visibility)
    task_id = task.id

    with django_capture_on_commit_callbacks(execute=True):
        task.delete()

    event = viewer_sub.get(timeout=0)
    assert (event.action, event.row_id) == ('DELETE', task_id)
    assert event.payload['assignee_role'] == 'WORKER'


@pytest.mark.django_db
def test_rolled_back_changes_are_not_published(monkeypatch, task, worker, django_capture_on_commit_callbacks):
    bus = EventBus()
    monkeypatch.setattr(bus_module, '_bus', bus)
    worker_sub = bus.subscribe(AuthContext(user_id=worker.id, role=Role.WORKER), ['tasks'], default_visibility)

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                task.title = 'never committed'
                task.save()
                raise RuntimeError('abort')

    assert callbacks == []
    assert worker_sub.get(timeout=0) is None


def test_dropped_counter_is_exact_under_concurrent_publishers():
    bus = EventBus(queue_size=1)
    sub = bus.subscribe(WORKER, ['tasks'], default_visibility)
    bus.publish(task_event())

    threads = [threading.Thread(target=lambda: [bus.publish(task_event()) for _ in range(50)]) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sub.dropped == 200
