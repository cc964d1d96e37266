"""
Student record tools for the Academic Records system.

AUTHORIZATION:
- Teachers can list, read, create, update and delete any student record
- Students can only read their own record and never change it
"""
import logging
from typing import Dict, Any, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from access import (
    NotFoundFailure,
    Operation,
    OwnershipSubject,
    Principal,
    Role,
    ValidationError,
    check_student_access,
    enforce_role,
    hash_password,
    missing_target,
)
from database import Student, User
from .accounts import validate_new_account
from .reference import resolve_courses, resolve_department

logger = logging.getLogger(__name__)


def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Student).filter(Student.email == email)
    if exclude_id is not None:
        query = query.filter(Student.id != exclude_id)
    return query.first() is not None


def _require_text(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field.capitalize()} is required", field)
    return value


def list_students(db: Session, principal: Principal) -> List[Dict[str, Any]]:
    """
    List all student records.

    AUTHORIZATION: Teacher only.
    """
    enforce_role(principal, Operation.LIST_STUDENTS)
    return [s.to_dict() for s in db.query(Student).order_by(Student.id).all()]


def get_student(db: Session, principal: Principal, student_id: int) -> Dict[str, Any]:
    """
    Get a student record.

    AUTHORIZATION: Teachers read any record, students only their own.

    Args:
        db: Database session
        principal: The requesting principal
        student_id: The student record to read

    Returns:
        Student record data

    Raises:
        AuthorizationFailure: NOT_OWNER if a student asks for another record,
            whether that record exists or not
        NotFoundFailure: If the record does not exist and the caller may see it
    """
    enforce_role(principal, Operation.READ_STUDENT)

    student = db.query(Student).filter(Student.id == student_id).first()
    if not student:
        raise missing_target(principal, OwnershipSubject.STUDENT, student_id, Operation.READ_STUDENT)

    # ENFORCEMENT: Students can only see their own record
    check_student_access(principal, student.id, Operation.READ_STUDENT)
    return student.to_dict()


def get_current_student(db: Session, principal: Principal) -> Dict[str, Any]:
    """
    Get the student record owned by the requesting student.

    AUTHORIZATION: Student only.
    """
    enforce_role(principal, Operation.VIEW_OWN_STUDENT_PROFILE)

    student = db.query(Student).filter(Student.id == principal.owned_student_id).first()
    if not student:
        raise NotFoundFailure("Student", principal.owned_student_id)
    return student.to_dict()


def create_student(
    db: Session,
    principal: Principal,
    name: str,
    email: str,
    username: str,
    password: str,
    department_id: Optional[int] = None,
    course_ids: Optional[List[int]] = None
) -> Dict[str, Any]:
    """
    Create a student record together with its login account.

    Both rows are written in one transaction, so a record never exists
    without its account.

    AUTHORIZATION: Teacher only.

    Raises:
        AuthorizationFailure: If requester is not a teacher
        ValidationError: If the e-mail or username is taken or a reference is unknown
    """
    enforce_role(principal, Operation.CREATE_STUDENT)

    name = _require_text(name, "name")
    email = _require_text(email, "email")
    validate_new_account(db, username, password)
    if _email_taken(db, email):
        raise ValidationError(f"E-mail '{email}' is already in use", "email")

    student = Student(
        name=name,
        email=email,
        department=resolve_department(db, department_id),
        courses=resolve_courses(db, course_ids),
    )
    try:
        db.add(student)
        db.flush()
        account = User(
            username=username,
            password_hash=hash_password(password),
            role=Role.STUDENT.value,
            enabled=True,
            locked=False,
            student_id=student.id,
        )
        db.add(account)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationError("Student record or account conflicts with an existing one") from exc

    db.refresh(student)
    logger.info("Teacher '%s' created student %s (account '%s')", principal.username, student.id, username)
    result = student.to_dict()
    result["username"] = username
    return result


def update_student(
    db: Session,
    principal: Principal,
    student_id: int,
    name: Optional[str] = None,
    email: Optional[str] = None,
    department_id: Optional[int] = None,
    course_ids: Optional[List[int]] = None
) -> Dict[str, Any]:
    """
    Update a student record. Fields left as None are unchanged.

    AUTHORIZATION: Teacher only. Students cannot change any record,
    including their own.
    """
    enforce_role(principal, Operation.UPDATE_STUDENT)

    student = db.query(Student).filter(Student.id == student_id).first()
    if not student:
        raise NotFoundFailure("Student", student_id)
    check_student_access(principal, student.id, Operation.UPDATE_STUDENT)

    # Validate everything before touching the record, so a rejected update
    # leaves nothing behind in the session
    if name is not None:
        name = _require_text(name, "name")
    if email is not None:
        email = _require_text(email, "email")
        if _email_taken(db, email, exclude_id=student.id):
            raise ValidationError(f"E-mail '{email}' is already in use", "email")
    department = resolve_department(db, department_id)
    courses = resolve_courses(db, course_ids) if course_ids is not None else None

    if name is not None:
        student.name = name
    if email is not None:
        student.email = email
    if department is not None:
        student.department = department
    if courses is not None:
        student.courses = courses

    db.commit()
    db.refresh(student)
    return student.to_dict()


def delete_student(db: Session, principal: Principal, student_id: int) -> None:
    """
    Delete a student record and retire its login account.

    AUTHORIZATION: Teacher only.
    """
    enforce_role(principal, Operation.DELETE_STUDENT)

    student = db.query(Student).filter(Student.id == student_id).first()
    if not student:
        raise NotFoundFailure("Student", student_id)
    check_student_access(principal, student.id, Operation.DELETE_STUDENT)

    # No orphaned credentials: the account goes with the record
    db.query(User).filter(User.student_id == student.id).delete(synchronize_session=False)
    db.delete(student)
    db.commit()
    logger.info("Teacher '%s' deleted student %s", principal.username, student_id)
