"""
Seed data script for the Academic Records system.
Creates sample data for testing and demonstration.
"""
import logging

from access.identity import hash_password
from database import (
    get_db_context, init_db,
    User, Student, Teacher, Department, Course
)

logger = logging.getLogger(__name__)

SAMPLE_PASSWORD = "password123"


def seed_database():
    """Populate an empty database with sample data. Skips if accounts exist."""

    with get_db_context() as db:
        if db.query(User).count() > 0:
            logger.info("Database already initialized. Skipping data creation.")
            return

        # Create Departments
        cs = Department(name="Computer Science")
        math = Department(name="Mathematics")
        physics = Department(name="Physics")
        db.add_all([cs, math, physics])
        db.flush()

        # Create Teachers
        teachers = [
            Teacher(name="Dr. Alice Brown", email="alice.brown@teacher.edu", department=cs),
            Teacher(name="Prof. Charlie Wilson", email="charlie.wilson@teacher.edu", department=math),
        ]
        db.add_all(teachers)
        db.flush()

        # Create Courses
        courses = [
            Course(title="Introduction to Programming", description="Learn the basics of programming",
                   department=cs, teacher=teachers[0]),
            Course(title="Data Structures", description="Advanced data structures and algorithms",
                   department=cs, teacher=teachers[0]),
            Course(title="Calculus I", description="Introduction to differential calculus",
                   department=math, teacher=teachers[1]),
        ]
        db.add_all(courses)
        db.flush()

        # Create Students with their enrolments
        students = [
            Student(name="John Doe", email="john.doe@student.edu", department=cs,
                    courses=[courses[0], courses[1]]),
            Student(name="Jane Smith", email="jane.smith@student.edu", department=cs,
                    courses=[courses[0]]),
            Student(name="Bob Johnson", email="bob.johnson@student.edu", department=math,
                    courses=[courses[2]]),
        ]
        db.add_all(students)
        db.flush()

        # Create one account per profile
        password_hash = hash_password(SAMPLE_PASSWORD)
        accounts = [
            User(username=f"student{i}", password_hash=password_hash, role="student", student_id=s.id)
            for i, s in enumerate(students, start=1)
        ] + [
            User(username=f"teacher{i}", password_hash=password_hash, role="teacher", teacher_id=t.id)
            for i, t in enumerate(teachers, start=1)
        ]
        db.add_all(accounts)
        db.commit()

        logger.info(
            "Sample data created: %d departments, %d teachers, %d students, %d courses",
            3, len(teachers), len(students), len(courses),
        )
        logger.info(
            "Sample accounts: %s (password: %s)",
            ", ".join(a.username for a in accounts), SAMPLE_PASSWORD,
        )


if __name__ == "__main__":
    from config import setup_logging

    setup_logging()
    init_db()
    seed_database()
