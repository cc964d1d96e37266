"""Database module."""
from .models import Base, User, Student, Teacher, Department, Course, UserRole, student_courses
from .connection import engine, SessionLocal, get_db, get_db_context, init_db

__all__ = [
    "Base",
    "User",
    "Student",
    "Teacher",
    "Department",
    "Course",
    "UserRole",
    "student_courses",
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "init_db",
]
