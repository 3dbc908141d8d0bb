# apps/notes/use_cases.py
from typing import Callable, Iterable, List

from apps.core.domain.entities import AuthContext
from apps.core.side_effects import dispatch
from apps.notifications.domain.entities import NotificationDraft
from apps.notifications.domain.rules import mention_notices
from apps.notifications.ports.senders import INotificationSender
from apps.tasks.domain.entities import TaskEntity
from apps.tasks.ports.repositories import IUserDirectory
from .mentions import extract_mentioned_ids


class NotifyMentionsUseCase:
    """
    TASK_COMMENT dla osób wspomnianych w notatce.

    Bez sprawdzania uprawnień do zadania: kto może dodać notatkę, może wspomnieć
    każdego. Pomijamy nieistniejące ID i osoby wspomniane już wcześniej.
    """

    def __init__(self, users: IUserDirectory, notifier: INotificationSender, dispatcher: Callable = dispatch):
        self.users = users
        self.notifier = notifier
        self.dispatcher = dispatcher

    def execute(self, ctx: AuthContext, task: TaskEntity, content: str,
                previous_content: str = "") -> List[NotificationDraft]:
        already = set(extract_mentioned_ids(previous_content))
        candidates = [i for i in extract_mentioned_ids(content) if i not in already]
        existing = self.users.existing_ids(candidates)

        drafts = mention_notices(ctx, task, (i for i in candidates if i in existing))
        for draft in drafts:
            self.dispatcher("mention notification", self.notifier.send, draft)
        return drafts
