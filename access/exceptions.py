"""
Failure types for the Academic Records access layer.

Authentication and authorization failures keep their internal ``kind`` for
diagnostics and tests; the HTTP boundary collapses them into one generic
message each.
"""
from enum import Enum


class AuthenticationFailureKind(str, Enum):
    """Why a sign-in or principal resolution failed."""
    NOT_FOUND = "not_found"
    DISABLED = "disabled"
    LOCKED = "locked"
    BAD_CREDENTIALS = "bad_credentials"


class AuthorizationFailureKind(str, Enum):
    """Why an authenticated principal was denied."""
    ROLE_MISMATCH = "role_mismatch"
    NOT_OWNER = "not_owner"
    UNKNOWN_ROLE = "unknown_role"


class OwnershipSubject(str, Enum):
    """Kind of profile record an ownership check was made against."""
    STUDENT = "student"
    TEACHER = "teacher"


class AuthenticationFailure(Exception):
    """Raised when an identity cannot be turned into an active principal."""

    def __init__(self, kind: AuthenticationFailureKind, username: str = None):
        self.kind = kind
        self.username = username
        super().__init__(f"Authentication failed for '{username}': {kind.value}")


class AuthorizationFailure(Exception):
    """Raised when a principal may not perform an operation."""

    def __init__(
        self,
        kind: AuthorizationFailureKind,
        username: str = None,
        operation: str = None,
        subject: OwnershipSubject = None,
    ):
        self.kind = kind
        self.username = username
        self.operation = operation
        self.subject = subject
        message = f"Access denied ({kind.value})"
        if operation:
            message += f" for '{operation}'"
        if subject:
            message += f" on {subject.value} record"
        super().__init__(message)


class NotFoundFailure(Exception):
    """Raised when a target record does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id {entity_id} not found")


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class MissingPrincipalError(RuntimeError):
    """Raised when a guarded call is made without a resolved principal."""

    def __init__(self, operation: str = None):
        self.operation = operation
        super().__init__(f"No principal supplied to guarded operation '{operation}'")
