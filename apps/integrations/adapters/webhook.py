# apps/integrations/adapters/webhook.py
import logging

import requests
from django.conf import settings

from apps.integrations.exceptions import AutomationCallFailed, AutomationNotConfigured
from apps.integrations.ports.automation import IAutomationClient

logger = logging.getLogger(__name__)

SECRET_HEADER = 'X-Webhook-Secret'


class WebhookAutomationClient(IAutomationClient):
    def __init__(self, url=None, secret=None, timeout=None):
        self.url = settings.AUTOMATION_WEBHOOK_URL if url is None else url
        self.secret = settings.AUTOMATION_WEBHOOK_SECRET if secret is None else secret
        self.timeout = timeout or settings.AUTOMATION_TIMEOUT_SECONDS

    def dispatch(self, payload: dict) -> None:
        if not self.url:
            raise AutomationNotConfigured()

        headers = {'Content-Type': 'application/json'}
        if self.secret:
            headers[SECRET_HEADER] = self.secret

        try:
            response = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Automation webhook unreachable: %s", exc)
            raise AutomationCallFailed()

        if not response.ok:
            logger.warning("Automation webhook answered %s: %s", response.status_code, response.text[:500])
            raise AutomationCallFailed(response.status_code, response.text)
        logger.info("Task %s dispatched to automation", payload.get('taskId'))
