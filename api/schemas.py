"""
Pydantic schemas for API requests and responses.
"""
from typing import Optional, List
from pydantic import BaseModel, Field


# Request schemas
class StudentCreateRequest(BaseModel):
    """Request to create a student record and its account."""
    name: str = Field(..., description="Full name", min_length=1)
    email: str = Field(..., description="Unique e-mail address", min_length=3)
    username: str = Field(..., description="Login name for the new account", min_length=1)
    password: str = Field(..., description="Initial password", min_length=8)
    department_id: Optional[int] = Field(None, description="Department ID")
    course_ids: List[int] = Field(default_factory=list, description="Enrolled course IDs")


class StudentUpdateRequest(BaseModel):
    """Request to update a student record."""
    name: Optional[str] = Field(None, description="New name")
    email: Optional[str] = Field(None, description="New e-mail address")
    department_id: Optional[int] = Field(None, description="New department ID")
    course_ids: Optional[List[int]] = Field(None, description="Replacement set of course IDs")


class TeacherCreateRequest(BaseModel):
    """Request to create a teacher record and its account."""
    name: str = Field(..., description="Full name", min_length=1)
    email: Optional[str] = Field(None, description="Unique e-mail address")
    username: str = Field(..., description="Login name for the new account", min_length=1)
    password: str = Field(..., description="Initial password", min_length=8)
    department_id: Optional[int] = Field(None, description="Department ID")


class TeacherUpdateRequest(BaseModel):
    """Request to update the caller's own teacher record."""
    name: Optional[str] = Field(None, description="New name")
    email: Optional[str] = Field(None, description="New e-mail address")
    department_id: Optional[int] = Field(None, description="New department ID")


class AccountStatusRequest(BaseModel):
    """Request to enable/disable or lock/unlock an account."""
    enabled: Optional[bool] = Field(None, description="Whether the account may sign in")
    locked: Optional[bool] = Field(None, description="Whether the account is locked")


class DepartmentCreateRequest(BaseModel):
    name: str = Field(..., description="Department name", min_length=1)


class CourseCreateRequest(BaseModel):
    title: str = Field(..., description="Course title", min_length=1)
    description: Optional[str] = Field(None, description="Course description", max_length=1000)
    department_id: Optional[int] = Field(None, description="Department ID")
    teacher_id: Optional[int] = Field(None, description="Teacher ID (defaults to the caller)")


class CourseUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, description="New title")
    description: Optional[str] = Field(None, description="New description", max_length=1000)
    department_id: Optional[int] = Field(None, description="New department ID")
    teacher_id: Optional[int] = Field(None, description="New teacher ID")


# Response schemas
class DepartmentResponse(BaseModel):
    id: int
    name: str


class CourseResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    department_id: Optional[int]
    teacher_id: Optional[int]


class StudentResponse(BaseModel):
    """Student record response."""
    id: int
    name: str
    email: str
    department_id: Optional[int]
    department_name: Optional[str]
    course_ids: List[int]
    username: Optional[str] = None


class TeacherResponse(BaseModel):
    """Teacher record response."""
    id: int
    name: str
    email: Optional[str]
    department_id: Optional[int]
    department_name: Optional[str]
    course_ids: List[int]
    username: Optional[str] = None


class AccountResponse(BaseModel):
    """Account status response (never carries the password hash)."""
    id: int
    username: str
    role: str
    enabled: bool
    locked: bool
    student_id: Optional[int]
    teacher_id: Optional[int]


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str
