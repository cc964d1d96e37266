"""
Shared fixtures for the Academic Records tests.

Settings are read at import time, so the environment is prepared before
any project module is imported.
"""
import os
import sys

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["DEBUG"] = "false"

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from access import Principal, Role, hash_password
from database import (
    Base, SessionLocal, engine, get_db_context, init_db,
    User, Student, Teacher, Department, Course, student_courses,
)

PASSWORD = "password123"


def load_sample_data():
    """
    Sample records and accounts.

    Students 1-3 (accounts s1, s2, sdisabled), teachers 10-12 (accounts
    t1, t2, tlocked), departments 1-2, courses 1-2.
    """
    with get_db_context() as db:
        db.add_all([
            Department(id=1, name="Computer Science"),
            Department(id=2, name="Mathematics"),
        ])
        db.flush()

        db.add_all([
            Teacher(id=10, name="Dr. Alice Brown", email="alice.brown@teacher.edu", department_id=1),
            Teacher(id=11, name="Prof. Charlie Wilson", email="charlie.wilson@teacher.edu", department_id=2),
            Teacher(id=12, name="Dr. Dana Locke", email="dana.locke@teacher.edu", department_id=2),
        ])
        db.flush()

        db.add_all([
            Course(id=1, title="Introduction to Programming", department_id=1, teacher_id=10),
            Course(id=2, title="Calculus I", department_id=2, teacher_id=11),
        ])
        db.add_all([
            Student(id=1, name="John Doe", email="john.doe@student.edu", department_id=1),
            Student(id=2, name="Jane Smith", email="jane.smith@student.edu", department_id=1),
            Student(id=3, name="Bob Johnson", email="bob.johnson@student.edu", department_id=2),
        ])
        db.flush()
        db.execute(student_courses.insert().values(student_id=1, course_id=1))

        password_hash = hash_password(PASSWORD)
        db.add_all([
            User(username="s1", password_hash=password_hash, role="student", student_id=1),
            User(username="s2", password_hash=password_hash, role="student", student_id=2),
            User(username="sdisabled", password_hash=password_hash, role="student", student_id=3,
                 enabled=False),
            User(username="t1", password_hash=password_hash, role="teacher", teacher_id=10),
            User(username="t2", password_hash=password_hash, role="teacher", teacher_id=11),
            User(username="tlocked", password_hash=password_hash, role="teacher", teacher_id=12,
                 locked=True),
        ])


@pytest.fixture
def seeded():
    """Fresh schema with the sample data loaded."""
    init_db()
    load_sample_data()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(seeded):
    """Database session over the sample data."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def student_principal():
    return Principal(user_id=1, username="s1", role=Role.STUDENT, owned_student_id=1)


@pytest.fixture
def other_student_principal():
    return Principal(user_id=2, username="s2", role=Role.STUDENT, owned_student_id=2)


@pytest.fixture
def teacher_principal():
    return Principal(user_id=4, username="t1", role=Role.TEACHER, owned_teacher_id=10)


@pytest.fixture
def other_teacher_principal():
    return Principal(user_id=5, username="t2", role=Role.TEACHER, owned_teacher_id=11)
