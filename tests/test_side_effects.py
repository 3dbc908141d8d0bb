import logging

import pytest

from apps.core.exceptions import SideEffectError
from apps.core.side_effects import dispatch, run_now


def test_run_now_swallows_and_logs(caplog, monkeypatch):
    # Logger "apps" nie propaguje do roota, a tam siedzi handler caplog
    monkeypatch.setattr(logging.getLogger('apps'), 'propagate', True)

    def explode():
        raise RuntimeError("smtp down")

    with caplog.at_level(logging.WARNING, logger='apps.core.side_effects'):
        assert run_now("password changed mail", explode) is False

    assert "password changed mail" in caplog.text
    assert "smtp down" in caplog.text


def test_run_now_passes_arguments():
    seen = []
    assert run_now("collect", lambda *args, **kwargs: seen.append((args, kwargs)), 1, 2, key='v') is True
    assert seen == [((1, 2), {'key': 'v'})]


def test_side_effect_error_keeps_label():
    error = SideEffectError("mail", ValueError("bad address"))
    assert error.label == "mail"
    assert str(error) == "mail: bad address"


@pytest.mark.django_db
def test_dispatch_runs_after_commit(django_capture_on_commit_callbacks):
    seen = []
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        dispatch("collect", seen.append, 'done')
        assert seen == []
    assert len(callbacks) == 1
    assert seen == ['done']


@pytest.mark.django_db
def test_dispatch_failure_does_not_propagate(django_capture_on_commit_callbacks):
    def explode():
        raise RuntimeError("boom")

    with django_capture_on_commit_callbacks(execute=True):
        dispatch("explode", explode)
