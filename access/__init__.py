"""
Access module for the Academic Records system.

Holds the authorization engine: role model, principal resolution,
credential verification, method guard, ownership checks and route gate.
"""
from .exceptions import (
    AuthenticationFailure,
    AuthenticationFailureKind,
    AuthorizationFailure,
    AuthorizationFailureKind,
    OwnershipSubject,
    NotFoundFailure,
    ValidationError,
    MissingPrincipalError,
)

from .roles import (
    Role,
    Operation,
    CAPABILITIES,
    SELF_SCOPED,
    ANY_STUDENT_ACCESSIBLE,
    required_roles,
    has_capability,
    dashboard_path,
)

from .principal import (
    Principal,
    PrincipalResolver,
    get_principal_resolver,
    resolve_principal,
)

from .identity import (
    hash_password,
    verify_password,
    verify_credentials,
)

from .guards import (
    require_principal,
    enforce_role,
    is_allowed,
)

from .ownership import (
    check_student_access,
    check_teacher_self_service,
    check_ownership,
    missing_target,
)

from .route_gate import (
    Access,
    GateResult,
    DenyReason,
    RouteRule,
    RouteDecision,
    RouteGate,
    DEFAULT_RULES,
    default_gate,
    check_route,
)

__all__ = [
    # Exceptions
    "AuthenticationFailure",
    "AuthenticationFailureKind",
    "AuthorizationFailure",
    "AuthorizationFailureKind",
    "OwnershipSubject",
    "NotFoundFailure",
    "ValidationError",
    "MissingPrincipalError",
    # Roles
    "Role",
    "Operation",
    "CAPABILITIES",
    "SELF_SCOPED",
    "ANY_STUDENT_ACCESSIBLE",
    "required_roles",
    "has_capability",
    "dashboard_path",
    # Principal
    "Principal",
    "PrincipalResolver",
    "get_principal_resolver",
    "resolve_principal",
    # Identity
    "hash_password",
    "verify_password",
    "verify_credentials",
    # Guards
    "require_principal",
    "enforce_role",
    "is_allowed",
    # Ownership
    "check_student_access",
    "check_teacher_self_service",
    "check_ownership",
    "missing_target",
    # Route gate
    "Access",
    "GateResult",
    "DenyReason",
    "RouteRule",
    "RouteDecision",
    "RouteGate",
    "DEFAULT_RULES",
    "default_gate",
    "check_route",
]
