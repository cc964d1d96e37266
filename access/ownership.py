"""
Ownership checks for self-scoped operations.

Students may only read their own student record. Teachers may read and
change any student record, but may only update their own teacher record.
All checks compare ids carried by the Principal with the target id; they
never touch the database.
"""
import logging

from .exceptions import (
    AuthorizationFailure,
    AuthorizationFailureKind,
    NotFoundFailure,
    OwnershipSubject,
)
from .guards import require_principal
from .principal import Principal
from .roles import ANY_STUDENT_ACCESSIBLE, Operation, Role

logger = logging.getLogger(__name__)


def _deny(principal: Principal, kind, operation: Operation, subject: OwnershipSubject = None):
    logger.info(
        "Denied %s on %s record for '%s' (%s)",
        operation.value, subject.value if subject else "-", principal.username, kind.value,
    )
    return AuthorizationFailure(
        kind,
        username=principal.username,
        operation=operation.value,
        subject=subject,
    )


def check_student_access(
    principal: Principal,
    student_id: int,
    operation: Operation = Operation.READ_STUDENT,
) -> None:
    """
    Enforce access to a student record.

    Teachers pass for every student-record operation. Students pass only
    when ``student_id`` is their own profile.

    Raises:
        AuthorizationFailure: NOT_OWNER for a student probing another record,
            ROLE_MISMATCH for a teacher on a non student-record operation,
            UNKNOWN_ROLE for anything outside the closed role set
    """
    require_principal(principal, operation)

    if principal.role == Role.TEACHER:
        if operation in ANY_STUDENT_ACCESSIBLE:
            return
        raise _deny(principal, AuthorizationFailureKind.ROLE_MISMATCH, operation, OwnershipSubject.STUDENT)

    if principal.role == Role.STUDENT:
        if principal.owned_student_id is not None and principal.owned_student_id == student_id:
            return
        raise _deny(principal, AuthorizationFailureKind.NOT_OWNER, operation, OwnershipSubject.STUDENT)

    raise _deny(principal, AuthorizationFailureKind.UNKNOWN_ROLE, operation, OwnershipSubject.STUDENT)


def check_teacher_self_service(
    principal: Principal,
    teacher_id: int,
    operation: Operation = Operation.UPDATE_TEACHER,
) -> None:
    """
    Enforce that a teacher only changes their own teacher record.

    Raises:
        AuthorizationFailure: NOT_OWNER for another teacher's record,
            ROLE_MISMATCH for students, UNKNOWN_ROLE otherwise
    """
    require_principal(principal, operation)

    if principal.role == Role.TEACHER:
        if principal.owned_teacher_id is not None and principal.owned_teacher_id == teacher_id:
            return
        raise _deny(principal, AuthorizationFailureKind.NOT_OWNER, operation, OwnershipSubject.TEACHER)

    if principal.role == Role.STUDENT:
        raise _deny(principal, AuthorizationFailureKind.ROLE_MISMATCH, operation, OwnershipSubject.TEACHER)

    raise _deny(principal, AuthorizationFailureKind.UNKNOWN_ROLE, operation, OwnershipSubject.TEACHER)


def check_ownership(
    principal: Principal,
    subject: OwnershipSubject,
    target_id: int,
    operation: Operation,
) -> None:
    """Dispatch to the student or teacher ownership check."""
    if subject == OwnershipSubject.STUDENT:
        check_student_access(principal, target_id, operation)
    elif subject == OwnershipSubject.TEACHER:
        check_teacher_self_service(principal, target_id, operation)
    else:
        raise ValueError(f"Unknown ownership subject: {subject!r}")


def missing_target(
    principal: Principal,
    subject: OwnershipSubject,
    target_id: int,
    operation: Operation,
) -> NotFoundFailure:
    """
    Failure to raise when a self-scoped target does not exist.

    The ownership check runs first, so a caller outside their own scope gets
    the same denial whether the record exists or not. Only callers entitled
    to the target learn that it is missing.
    """
    check_ownership(principal, subject, target_id, operation)
    return NotFoundFailure(subject.value.capitalize(), target_id)
