# apps/core/exceptions.py


class DomainError(Exception):
    """Bazowy błąd aplikacji, niesie kod HTTP dla warstwy widoków."""
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(DomainError):
    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(DomainError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Not found"


class ValidationError(DomainError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(DomainError):
    status_code = 409
    default_message = "Resource is still referenced"


class BackendError(DomainError):
    # Treść błędu bazy nigdy nie trafia do klienta
    status_code = 500
    default_message = "Backend error"


class SideEffectError(DomainError):
    """Błąd operacji pobocznej (log, powiadomienie, e-mail, webhook). Nigdy nie trafia do klienta."""

    def __init__(self, label, cause=None):
        self.label = label
        self.cause = cause
        super().__init__(f"{label}: {cause}" if cause else label)
