"""
Department and course tools for the Academic Records system.
Reference data is readable by any signed-in user and writable by teachers.
"""
from typing import Dict, Any, Iterable, List, Optional
from sqlalchemy.orm import Session

from access import (
    NotFoundFailure,
    Operation,
    Principal,
    ValidationError,
    enforce_role,
)
from database import Course, Department, Teacher


def resolve_department(db: Session, department_id: Optional[int]) -> Optional[Department]:
    """Look up a department reference; None stays None."""
    if department_id is None:
        return None
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        raise ValidationError(f"Department with id {department_id} not found", "department_id")
    return department


def resolve_courses(db: Session, course_ids: Optional[Iterable[int]]) -> List[Course]:
    """Look up a set of course references, failing on the first unknown id."""
    if not course_ids:
        return []
    wanted = sorted(set(course_ids))
    courses = db.query(Course).filter(Course.id.in_(wanted)).order_by(Course.id).all()
    found = {c.id for c in courses}
    for course_id in wanted:
        if course_id not in found:
            raise ValidationError(f"Course with id {course_id} not found", "course_ids")
    return courses


def list_departments(db: Session, principal: Principal) -> List[Dict[str, Any]]:
    enforce_role(principal, Operation.READ_REFERENCE)
    return [d.to_dict() for d in db.query(Department).order_by(Department.id).all()]


def get_department(db: Session, principal: Principal, department_id: int) -> Dict[str, Any]:
    enforce_role(principal, Operation.READ_REFERENCE)
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        raise NotFoundFailure("Department", department_id)
    return department.to_dict()


def create_department(db: Session, principal: Principal, name: str) -> Dict[str, Any]:
    """
    Create a department.

    AUTHORIZATION: Teacher only.

    Raises:
        AuthorizationFailure: If requester is not a teacher
        ValidationError: If the name is empty or already taken
    """
    enforce_role(principal, Operation.WRITE_REFERENCE)

    name = (name or "").strip()
    if not name:
        raise ValidationError("Department name is required", "name")
    if db.query(Department).filter(Department.name == name).first():
        raise ValidationError(f"Department '{name}' already exists", "name")

    department = Department(name=name)
    db.add(department)
    db.commit()
    db.refresh(department)
    return department.to_dict()


def list_courses(
    db: Session,
    principal: Principal,
    department_id: Optional[int] = None
) -> List[Dict[str, Any]]:
    """List courses, optionally filtered by department."""
    enforce_role(principal, Operation.READ_REFERENCE)
    query = db.query(Course)
    if department_id is not None:
        query = query.filter(Course.department_id == department_id)
    return [c.to_dict() for c in query.order_by(Course.id).all()]


def get_course(db: Session, principal: Principal, course_id: int) -> Dict[str, Any]:
    enforce_role(principal, Operation.READ_REFERENCE)
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundFailure("Course", course_id)
    return course.to_dict()


def _resolve_teacher(db: Session, teacher_id: Optional[int]) -> Optional[Teacher]:
    if teacher_id is None:
        return None
    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if not teacher:
        raise ValidationError(f"Teacher with id {teacher_id} not found", "teacher_id")
    return teacher


def create_course(
    db: Session,
    principal: Principal,
    title: str,
    description: Optional[str] = None,
    department_id: Optional[int] = None,
    teacher_id: Optional[int] = None
) -> Dict[str, Any]:
    """
    Create a course.

    AUTHORIZATION: Teacher only. The course is given by the creating
    teacher unless ``teacher_id`` names another one.
    """
    enforce_role(principal, Operation.WRITE_REFERENCE)

    title = (title or "").strip()
    if not title:
        raise ValidationError("Course title is required", "title")

    course = Course(
        title=title,
        description=description,
        department=resolve_department(db, department_id),
        teacher=_resolve_teacher(db, teacher_id or principal.owned_teacher_id),
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    return course.to_dict()


def update_course(
    db: Session,
    principal: Principal,
    course_id: int,
    title: Optional[str] = None,
    description: Optional[str] = None,
    department_id: Optional[int] = None,
    teacher_id: Optional[int] = None
) -> Dict[str, Any]:
    """
    Update a course. Fields left as None are unchanged.

    AUTHORIZATION: Teacher only.
    """
    enforce_role(principal, Operation.WRITE_REFERENCE)

    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundFailure("Course", course_id)

    if title is not None:
        title = title.strip()
        if not title:
            raise ValidationError("Course title is required", "title")
    department = resolve_department(db, department_id)
    teacher = _resolve_teacher(db, teacher_id)

    if title is not None:
        course.title = title
    if description is not None:
        course.description = description
    if department is not None:
        course.department = department
    if teacher is not None:
        course.teacher = teacher

    db.commit()
    db.refresh(course)
    return course.to_dict()


def delete_course(db: Session, principal: Principal, course_id: int) -> None:
    """
    Delete a course and its enrolments.

    AUTHORIZATION: Teacher only.
    """
    enforce_role(principal, Operation.WRITE_REFERENCE)

    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundFailure("Course", course_id)
    db.delete(course)
    db.commit()
