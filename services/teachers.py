"""
Teacher record tools for the Academic Records system.

AUTHORIZATION:
- Only teachers can see teacher records; students are refused outright
- A teacher can update only their own record
- Any teacher can create and delete teacher records
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
    check_teacher_self_service,
    enforce_role,
    hash_password,
    missing_target,
)
from database import Teacher, User
from .accounts import validate_new_account
from .reference import resolve_department

logger = logging.getLogger(__name__)


def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Teacher).filter(Teacher.email == email)
    if exclude_id is not None:
        query = query.filter(Teacher.id != exclude_id)
    return query.first() is not None


def list_teachers(db: Session, principal: Principal) -> List[Dict[str, Any]]:
    """
    List all teacher records.

    AUTHORIZATION: Teacher only.
    """
    enforce_role(principal, Operation.LIST_TEACHERS)
    return [t.to_dict() for t in db.query(Teacher).order_by(Teacher.id).all()]


def get_teacher(db: Session, principal: Principal, teacher_id: int) -> Dict[str, Any]:
    """
    Get a teacher record.

    AUTHORIZATION: Teacher only (any record).
    """
    enforce_role(principal, Operation.READ_TEACHER)

    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if not teacher:
        raise NotFoundFailure("Teacher", teacher_id)
    return teacher.to_dict()


def get_current_teacher(db: Session, principal: Principal) -> Dict[str, Any]:
    """Get the teacher record owned by the requesting teacher."""
    enforce_role(principal, Operation.VIEW_OWN_TEACHER_PROFILE)

    teacher = db.query(Teacher).filter(Teacher.id == principal.owned_teacher_id).first()
    if not teacher:
        raise NotFoundFailure("Teacher", principal.owned_teacher_id)
    return teacher.to_dict()


def create_teacher(
    db: Session,
    principal: Principal,
    name: str,
    username: str,
    password: str,
    email: Optional[str] = None,
    department_id: Optional[int] = None
) -> Dict[str, Any]:
    """
    Create a teacher record together with its login account.

    AUTHORIZATION: Teacher only. There is no separate administrator role,
    so every teacher can provision other teachers.

    Raises:
        AuthorizationFailure: If requester is not a teacher
        ValidationError: If the e-mail or username is taken or a reference is unknown
    """
    enforce_role(principal, Operation.CREATE_TEACHER)

    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required", "name")
    email = email.strip() if email else None
    validate_new_account(db, username, password)
    if email and _email_taken(db, email):
        raise ValidationError(f"E-mail '{email}' is already in use", "email")

    teacher = Teacher(
        name=name,
        email=email,
        department=resolve_department(db, department_id),
    )
    try:
        db.add(teacher)
        db.flush()
        account = User(
            username=username,
            password_hash=hash_password(password),
            role=Role.TEACHER.value,
            enabled=True,
            locked=False,
            teacher_id=teacher.id,
        )
        db.add(account)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationError("Teacher record or account conflicts with an existing one") from exc

    db.refresh(teacher)
    logger.info("Teacher '%s' created teacher %s (account '%s')", principal.username, teacher.id, username)
    result = teacher.to_dict()
    result["username"] = username
    return result


def update_teacher(
    db: Session,
    principal: Principal,
    teacher_id: int,
    name: Optional[str] = None,
    email: Optional[str] = None,
    department_id: Optional[int] = None
) -> Dict[str, Any]:
    """
    Update a teacher record. Fields left as None are unchanged.

    AUTHORIZATION: Teacher only, and only their own record.

    Raises:
        AuthorizationFailure: ROLE_MISMATCH for students, NOT_OWNER for
            another teacher's record (existing or not)
        NotFoundFailure: If the caller's own record is gone
    """
    enforce_role(principal, Operation.UPDATE_TEACHER)

    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if not teacher:
        raise missing_target(principal, OwnershipSubject.TEACHER, teacher_id, Operation.UPDATE_TEACHER)

    # ENFORCEMENT: Teachers can only modify their own profile
    check_teacher_self_service(principal, teacher.id, Operation.UPDATE_TEACHER)

    # Validate everything before touching the record
    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("Name is required", "name")
    if email is not None:
        email = email.strip()
        if email and _email_taken(db, email, exclude_id=teacher.id):
            raise ValidationError(f"E-mail '{email}' is already in use", "email")
    department = resolve_department(db, department_id)

    if name is not None:
        teacher.name = name
    if email is not None:
        teacher.email = email or None
    if department is not None:
        teacher.department = department

    db.commit()
    db.refresh(teacher)
    return teacher.to_dict()


def delete_teacher(db: Session, principal: Principal, teacher_id: int) -> None:
    """
    Delete a teacher record and retire its login account.

    Courses given by the teacher stay and lose their teacher reference.

    AUTHORIZATION: Teacher only.
    """
    enforce_role(principal, Operation.DELETE_TEACHER)

    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if not teacher:
        raise NotFoundFailure("Teacher", teacher_id)

    for course in teacher.courses:
        course.teacher = None
    db.query(User).filter(User.teacher_id == teacher.id).delete(synchronize_session=False)
    db.delete(teacher)
    db.commit()
    logger.info("Teacher '%s' deleted teacher %s", principal.username, teacher_id)
