"""
Services module for the Academic Records system.

Every operation takes the resolved Principal explicitly and checks it
before touching the database.
"""
from .accounts import (
    validate_new_account,
    get_account,
    set_account_status,
    get_dashboard_path,
)

from .reference import (
    list_departments,
    get_department,
    create_department,
    list_courses,
    get_course,
    create_course,
    update_course,
    delete_course,
)

from .students import (
    list_students,
    get_student,
    get_current_student,
    create_student,
    update_student,
    delete_student,
)

from .teachers import (
    list_teachers,
    get_teacher,
    get_current_teacher,
    create_teacher,
    update_teacher,
    delete_teacher,
)

__all__ = [
    # Accounts
    "validate_new_account",
    "get_account",
    "set_account_status",
    "get_dashboard_path",
    # Reference data
    "list_departments",
    "get_department",
    "create_department",
    "list_courses",
    "get_course",
    "create_course",
    "update_course",
    "delete_course",
    # Students
    "list_students",
    "get_student",
    "get_current_student",
    "create_student",
    "update_student",
    "delete_student",
    # Teachers
    "list_teachers",
    "get_teacher",
    "get_current_teacher",
    "create_teacher",
    "update_teacher",
    "delete_teacher",
]
