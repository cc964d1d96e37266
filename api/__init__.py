"""API module for the Academic Records system."""
from .routes import auth_router, student_router, teacher_router, reference_router
from .middleware import RouteGateMiddleware
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
    ErrorResponse,
)

__all__ = [
    "auth_router",
    "student_router",
    "teacher_router",
    "reference_router",
    "RouteGateMiddleware",
    "basic_scheme",
    "get_current_principal",
    "StudentCreateRequest",
    "StudentUpdateRequest",
    "TeacherCreateRequest",
    "TeacherUpdateRequest",
    "AccountStatusRequest",
    "DepartmentCreateRequest",
    "CourseCreateRequest",
    "CourseUpdateRequest",
    "StudentResponse",
    "TeacherResponse",
    "DepartmentResponse",
    "CourseResponse",
    "AccountResponse",
    "ErrorResponse",
]
