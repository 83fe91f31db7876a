class ClinicError(Exception):
    """Base class for errors the HTTP layer maps to a status code."""

    status_code = 500

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(ClinicError):
    status_code = 400


class AuthenticationError(ClinicError):
    status_code = 401


class PermissionDeniedError(ClinicError):
    status_code = 403


class NotFoundError(ClinicError):
    status_code = 404


class ConflictError(ClinicError):
    status_code = 409


class DependencyError(ClinicError):
    """The database, SMTP server or AI backend failed; safe to retry."""
    status_code = 500
