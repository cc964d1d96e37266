"""
Database models for the Academic Records system.
Defines the SQLAlchemy models for accounts, student and teacher profiles,
and the department/course reference data.
"""
from enum import Enum as PyEnum
from sqlalchemy import (
    Boolean, CheckConstraint, Column, Integer, String, Enum, ForeignKey, Table
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


class UserRole(str, PyEnum):
    """Closed set of account roles."""
    STUDENT = "student"
    TEACHER = "teacher"


student_courses = Table(
    "student_courses",
    Base.metadata,
    Column("student_id", Integer, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("course_id", Integer, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
)


class Department(Base):
    """
    Departments table (reference data).

    Attributes:
        id: Unique identifier
        name: Department name (e.g., "Computer Science")
    """
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)

    def __repr__(self):
        return f"<Department(id={self.id}, name='{self.name}')>"

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class Course(Base):
    """
    Courses table (reference data).

    Attributes:
        id: Unique identifier
        title: Course title
        description: Optional free text
        department_id: Owning department
        teacher_id: Teacher giving the course
    """
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    department = relationship("Department")
    teacher = relationship("Teacher", back_populates="courses")

    def __repr__(self):
        return f"<Course(id={self.id}, title='{self.title}')>"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "department_id": self.department_id,
            "teacher_id": self.teacher_id,
        }


class Student(Base):
    """
    Students table - student profile records.

    The owning account points at the profile through ``User.student_id``;
    the profile holds no back-reference.

    Attributes:
        id: Unique identifier
        name: Full name
        email: Unique e-mail address
        department_id: Department reference
        courses: Enrolled courses
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    department = relationship("Department")
    courses = relationship("Course", secondary=student_courses, order_by="Course.id")

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}')>"

    def to_dict(self):
        """Convert student profile to dictionary for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department_id": self.department_id,
            "department_name": self.department.name if self.department else None,
            "course_ids": [c.id for c in self.courses],
        }


class Teacher(Base):
    """
    Teachers table - teacher profile records.

    Attributes:
        id: Unique identifier
        name: Full name
        email: Unique e-mail address
        department_id: Department reference
        courses: Courses given by this teacher
    """
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    department = relationship("Department")
    courses = relationship("Course", back_populates="teacher", order_by="Course.id")

    def __repr__(self):
        return f"<Teacher(id={self.id}, name='{self.name}')>"

    def to_dict(self):
        """Convert teacher profile to dictionary for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department_id": self.department_id,
            "department_name": self.department.name if self.department else None,
            "course_ids": [c.id for c in self.courses],
        }


class User(Base):
    """
    Users table - login accounts.

    Exactly one of ``student_id`` / ``teacher_id`` is set and it matches
    ``role``. The check constraint enforces this on every write.

    Attributes:
        id: Unique identifier
        username: Unique login name
        password_hash: bcrypt hash of the password
        role: Either 'student' or 'teacher'
        enabled: Whether the account may sign in
        locked: Whether the account is locked
        student_id: Owned student profile (students only)
        teacher_id: Owned teacher profile (teachers only)
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "(role = 'student' AND student_id IS NOT NULL AND teacher_id IS NULL) OR "
            "(role = 'teacher' AND teacher_id IS NOT NULL AND student_id IS NULL)",
            name="ck_users_role_owned_profile",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum("student", "teacher", name="user_role"), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    locked = Column(Boolean, nullable=False, default=False)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=True, unique=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=True, unique=True)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"

    def to_dict(self):
        """Account view without the password hash."""
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "enabled": self.enabled,
            "locked": self.locked,
            "student_id": self.student_id,
            "teacher_id": self.teacher_id,
        }
