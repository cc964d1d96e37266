"""
Role model for the Academic Records system.

Two roles, fixed capabilities. Every guarded operation is listed in
``CAPABILITIES`` with the roles allowed to call it; an operation missing
from the table is allowed for nobody.
"""
from enum import Enum
from typing import FrozenSet

from database.models import UserRole

Role = UserRole

STUDENT_ONLY = frozenset({Role.STUDENT})
TEACHER_ONLY = frozenset({Role.TEACHER})
ANY_ROLE = frozenset({Role.STUDENT, Role.TEACHER})


class Operation(str, Enum):
    """Guarded operations."""
    # Student records
    VIEW_OWN_STUDENT_PROFILE = "view_own_student_profile"
    LIST_STUDENTS = "list_students"
    READ_STUDENT = "read_student"
    CREATE_STUDENT = "create_student"
    UPDATE_STUDENT = "update_student"
    DELETE_STUDENT = "delete_student"

    # Teacher records
    VIEW_OWN_TEACHER_PROFILE = "view_own_teacher_profile"
    LIST_TEACHERS = "list_teachers"
    READ_TEACHER = "read_teacher"
    CREATE_TEACHER = "create_teacher"
    UPDATE_TEACHER = "update_teacher"
    DELETE_TEACHER = "delete_teacher"

    # Departments and courses
    READ_REFERENCE = "read_reference"
    WRITE_REFERENCE = "write_reference"

    # Account status (enable / disable / lock / unlock)
    SET_ACCOUNT_STATUS = "set_account_status"


CAPABILITIES = {
    Operation.VIEW_OWN_STUDENT_PROFILE: STUDENT_ONLY,
    Operation.LIST_STUDENTS: TEACHER_ONLY,
    Operation.READ_STUDENT: ANY_ROLE,
    Operation.CREATE_STUDENT: TEACHER_ONLY,
    Operation.UPDATE_STUDENT: TEACHER_ONLY,
    Operation.DELETE_STUDENT: TEACHER_ONLY,
    Operation.VIEW_OWN_TEACHER_PROFILE: TEACHER_ONLY,
    Operation.LIST_TEACHERS: TEACHER_ONLY,
    Operation.READ_TEACHER: TEACHER_ONLY,
    Operation.CREATE_TEACHER: TEACHER_ONLY,
    Operation.UPDATE_TEACHER: TEACHER_ONLY,
    Operation.DELETE_TEACHER: TEACHER_ONLY,
    Operation.READ_REFERENCE: ANY_ROLE,
    Operation.WRITE_REFERENCE: TEACHER_ONLY,
    Operation.SET_ACCOUNT_STATUS: TEACHER_ONLY,
}

# Operations whose outcome also depends on who owns the target record
SELF_SCOPED = frozenset({Operation.READ_STUDENT, Operation.UPDATE_TEACHER})

# Student-record operations a teacher may perform on any record
ANY_STUDENT_ACCESSIBLE = frozenset({
    Operation.READ_STUDENT,
    Operation.UPDATE_STUDENT,
    Operation.DELETE_STUDENT,
})


def required_roles(operation: Operation) -> FrozenSet[Role]:
    """Roles allowed to call ``operation``; empty when it is not registered."""
    return CAPABILITIES.get(operation, frozenset())


def has_capability(role, operation: Operation) -> bool:
    """Check whether ``role`` may call ``operation``."""
    return role in required_roles(operation)


def dashboard_path(role) -> str:
    """Landing page for a role after sign-in."""
    if role == Role.TEACHER:
        return "/teacher/dashboard"
    if role == Role.STUDENT:
        return "/student/dashboard"
    return "/login?error=true"
