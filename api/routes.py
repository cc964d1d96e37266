"""
API routes for the Academic Records system.

Routes only translate HTTP to service calls. Role and ownership checks
live in the services, failures are mapped to responses in ``main``.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from access import Principal
from database import get_db
from services import (
    list_students,
    get_student,
    get_current_student,
    create_student,
    update_student,
    delete_student,
    list_teachers,
    get_teacher,
    get_current_teacher,
    create_teacher,
    update_teacher,
    delete_teacher,
    list_departments,
    get_department,
    create_department,
    list_courses,
    get_course,
    create_course,
    update_course,
    delete_course,
    get_account,
    set_account_status,
    get_dashboard_path,
)
from .dependencies import basic_scheme, get_current_principal
from .schemas import (
    StudentCreateRequest,
    StudentUpdateRequest,
    TeacherCreateRequest,
    TeacherUpdateRequest,
    AccountStatusRequest,
    DepartmentCreateRequest,
    CourseCreateRequest,
    CourseUpdateRequest,
    StudentResponse,
    TeacherResponse,
    DepartmentResponse,
    CourseResponse,
    AccountResponse,
)


# Router for sign-in and landing pages
auth_router = APIRouter(tags=["Auth"])

# Router for the student area
student_router = APIRouter(prefix="/student", tags=["Student"])

# Router for the teacher area (student and teacher management)
teacher_router = APIRouter(prefix="/teacher", tags=["Teacher"])

# Router for departments and courses
reference_router = APIRouter(tags=["Reference data"])


# ============== Auth Endpoints ==============

@auth_router.get("/login")
async def login(request: Request, error: Optional[bool] = None):
    """
    Sign-in entry point.

    Signed-in callers are sent to their dashboard; everyone else gets an
    HTTP Basic challenge.
    """
    principal = getattr(request.state, "principal", None)
    if principal is not None:
        return RedirectResponse(get_dashboard_path(principal), status_code=303)
    failed = error or getattr(request.state, "sign_in_failed", False)
    return JSONResponse(
        status_code=401,
        content={"detail": "Sign-in failed" if failed else "Sign-in required"},
        headers={"WWW-Authenticate": f'Basic realm="{basic_scheme.realm}"'},
    )


@auth_router.get("/dashboard")
async def dashboard(principal: Principal = Depends(get_current_principal)):
    """Redirect to the dashboard of the caller's role."""
    return RedirectResponse(get_dashboard_path(principal), status_code=307)


@auth_router.get("/access-denied")
async def access_denied():
    return JSONResponse(status_code=403, content={"detail": "Access denied"})


# ============== Student Endpoints ==============

@student_router.get("/dashboard", response_model=StudentResponse)
def student_dashboard(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """The caller's own student record."""
    return get_current_student(db, principal)


@student_router.get("/profile/{student_id}", response_model=StudentResponse)
def view_own_student_profile(
    student_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """View a student profile (students: own profile only)."""
    return get_student(db, principal, student_id)


# ============== Teacher Endpoints ==============

@teacher_router.get("/dashboard", response_model=TeacherResponse)
def teacher_dashboard(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """The caller's own teacher record."""
    return get_current_teacher(db, principal)


@teacher_router.get("/students", response_model=list[StudentResponse])
def list_students_endpoint(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return list_students(db, principal)


@teacher_router.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student_endpoint(
    request: StudentCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Create a student record and its login account."""
    return create_student(
        db,
        principal,
        name=request.name,
        email=request.email,
        username=request.username,
        password=request.password,
        department_id=request.department_id,
        course_ids=request.course_ids,
    )


@teacher_router.get("/students/{student_id}", response_model=StudentResponse)
def get_student_endpoint(
    student_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return get_student(db, principal, student_id)


@teacher_router.put("/students/{student_id}", response_model=StudentResponse)
def update_student_endpoint(
    student_id: int,
    request: StudentUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return update_student(
        db,
        principal,
        student_id,
        name=request.name,
        email=request.email,
        department_id=request.department_id,
        course_ids=request.course_ids,
    )


@teacher_router.delete("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student_endpoint(
    student_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Delete a student record and its login account."""
    delete_student(db, principal, student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@teacher_router.get("/teachers", response_model=list[TeacherResponse])
def list_teachers_endpoint(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return list_teachers(db, principal)


@teacher_router.post("/teachers", response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
def create_teacher_endpoint(
    request: TeacherCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Create a teacher record and its login account."""
    return create_teacher(
        db,
        principal,
        name=request.name,
        email=request.email,
        username=request.username,
        password=request.password,
        department_id=request.department_id,
    )


@teacher_router.get("/teachers/{teacher_id}", response_model=TeacherResponse)
def get_teacher_endpoint(
    teacher_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return get_teacher(db, principal, teacher_id)


@teacher_router.delete("/teachers/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_teacher_endpoint(
    teacher_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    delete_teacher(db, principal, teacher_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@teacher_router.get("/profile/{teacher_id}", response_model=TeacherResponse)
def view_teacher_profile(
    teacher_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return get_teacher(db, principal, teacher_id)


@teacher_router.put("/profile/{teacher_id}", response_model=TeacherResponse)
def update_teacher_profile(
    teacher_id: int,
    request: TeacherUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Update a teacher profile (own profile only)."""
    return update_teacher(
        db,
        principal,
        teacher_id,
        name=request.name,
        email=request.email,
        department_id=request.department_id,
    )


@teacher_router.get("/accounts/{username}", response_model=AccountResponse)
def get_account_endpoint(
    username: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return get_account(db, principal, username)


@teacher_router.patch("/accounts/{username}/status", response_model=AccountResponse)
def set_account_status_endpoint(
    username: str,
    request: AccountStatusRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Enable/disable or lock/unlock an account."""
    return set_account_status(
        db,
        principal,
        username,
        enabled=request.enabled,
        locked=request.locked,
    )


# ============== Reference Data Endpoints ==============

@reference_router.get("/departments", response_model=list[DepartmentResponse])
def list_departments_endpoint(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return list_departments(db, principal)


@reference_router.get("/departments/{department_id}", response_model=DepartmentResponse)
def get_department_endpoint(
    department_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return get_department(db, principal, department_id)


@reference_router.get("/courses", response_model=list[CourseResponse])
def list_courses_endpoint(
    department_id: Optional[int] = None,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return list_courses(db, principal, department_id=department_id)


@reference_router.get("/courses/{course_id}", response_model=CourseResponse)
def get_course_endpoint(
    course_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return get_course(db, principal, course_id)


@reference_router.post(
    "/courses/manage/departments",
    response_model=DepartmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_department_endpoint(
    request: DepartmentCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return create_department(db, principal, request.name)


@reference_router.post("/courses/manage", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course_endpoint(
    request: CourseCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return create_course(
        db,
        principal,
        title=request.title,
        description=request.description,
        department_id=request.department_id,
        teacher_id=request.teacher_id,
    )


@reference_router.put("/courses/manage/{course_id}", response_model=CourseResponse)
def update_course_endpoint(
    course_id: int,
    request: CourseUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return update_course(
        db,
        principal,
        course_id,
        title=request.title,
        description=request.description,
        department_id=request.department_id,
        teacher_id=request.teacher_id,
    )


@reference_router.delete("/courses/manage/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course_endpoint(
    course_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    delete_course(db, principal, course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
