# apps/integrations/exceptions.py
from apps.core.exceptions import BackendError, DomainError


class AutomationNotConfigured(BackendError):
    default_message = "Automation webhook URL is not configured"


class AutomationCallFailed(DomainError):
    """System automatyzacji odpowiedział kodem spoza 2xx albo nie odpowiedział."""
    status_code = 502
    default_message = "Automation call failed"

    def __init__(self, upstream_status=None, body=""):
        self.upstream_status = upstream_status
        self.body = body
        super().__init__()
