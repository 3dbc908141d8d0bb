# apps/core/side_effects.py
import logging
from functools import partial

from django.db import transaction

from .exceptions import SideEffectError

logger = logging.getLogger(__name__)


def dispatch(label, func, *args, **kwargs):
    """
    Zleca operację poboczną (fire-and-forget).

    Wywołanie trafia do hooka post-commit: wykona się dopiero po zatwierdzeniu
    głównego zapisu (albo od razu, jeśli nie ma otwartej transakcji), we własnej
    transakcji. Wynik i błędy nie wracają do wywołującego.
    """
    transaction.on_commit(partial(run_side_effect, label, _atomic(func), *args, **kwargs))


def run_side_effect(label, func, *args, **kwargs):
    try:
        func(*args, **kwargs)
    except Exception as exc:
        error = exc if isinstance(exc, SideEffectError) else SideEffectError(label, exc)
        logger.warning("Side effect failed: %s", error, exc_info=True)
        return False
    return True


def run_now(label, func, *args, **kwargs):
    """Dispatcher synchroniczny: bez hooka post-commit i bez osobnej transakcji."""
    return run_side_effect(label, func, *args, **kwargs)


def _atomic(func):
    def wrapper(*args, **kwargs):
        with transaction.atomic():
            return func(*args, **kwargs)
    return wrapper
