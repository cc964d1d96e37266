"""
Method guard: role check at the top of every guarded operation.

Runs before any persistence access and never relies on the route gate
having run first.
"""
import logging

from .exceptions import AuthorizationFailure, AuthorizationFailureKind, MissingPrincipalError
from .principal import Principal
from .roles import Operation, Role, required_roles

logger = logging.getLogger(__name__)


def require_principal(principal: Principal, operation: Operation = None) -> Principal:
    """Fail loudly when a caller forgot to pass the resolved principal."""
    if principal is None:
        raise MissingPrincipalError(operation.value if operation else None)
    return principal


def enforce_role(principal: Principal, operation: Operation) -> None:
    """
    Enforce that the principal's role may call ``operation``.

    Args:
        principal: The resolved caller
        operation: Operation about to run

    Raises:
        AuthorizationFailure: ROLE_MISMATCH, or UNKNOWN_ROLE for a role
            outside the closed set
        MissingPrincipalError: If no principal was supplied
    """
    require_principal(principal, operation)

    if principal.role not in (Role.STUDENT, Role.TEACHER):
        logger.warning("Unknown role %r for '%s'", principal.role, principal.username)
        raise AuthorizationFailure(
            AuthorizationFailureKind.UNKNOWN_ROLE,
            username=principal.username,
            operation=operation.value,
        )

    if principal.role not in required_roles(operation):
        logger.info(
            "Role %s of '%s' not allowed for %s",
            principal.role.value, principal.username, operation.value,
        )
        raise AuthorizationFailure(
            AuthorizationFailureKind.ROLE_MISMATCH,
            username=principal.username,
            operation=operation.value,
        )


def is_allowed(principal: Principal, operation: Operation) -> bool:
    """Non-raising variant of ``enforce_role``."""
    try:
        enforce_role(principal, operation)
    except AuthorizationFailure:
        return False
    return True
