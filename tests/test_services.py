"""
Tests for the guarded record operations.
"""
import pytest

from access import (
    AuthenticationFailure,
    AuthenticationFailureKind,
    AuthorizationFailure,
    AuthorizationFailureKind,
    NotFoundFailure,
    PrincipalResolver,
    ValidationError,
    verify_credentials,
)
from database import Course, Student, Teacher, User
from services import (
    create_course,
    create_department,
    create_student,
    create_teacher,
    delete_course,
    delete_student,
    delete_teacher,
    get_account,
    get_course,
    get_current_student,
    get_current_teacher,
    get_student,
    get_teacher,
    list_courses,
    list_departments,
    list_students,
    list_teachers,
    set_account_status,
    update_course,
    update_student,
    update_teacher,
)


class TestStudentTools:
    """Tests for student record operations."""

    def test_student_reads_own_record(self, db, student_principal):
        """Scenario A."""
        result = get_student(db, student_principal, 1)
        assert result["id"] == 1
        assert result["name"] == "John Doe"
        assert result["course_ids"] == [1]

    def test_student_cannot_read_other_record(self, db, student_principal):
        """Scenario B."""
        with pytest.raises(AuthorizationFailure) as exc_info:
            get_student(db, student_principal, 2)
        assert exc_info.value.kind == AuthorizationFailureKind.NOT_OWNER

    def test_student_asking_for_missing_record_is_denied(self, db, student_principal):
        with pytest.raises(AuthorizationFailure) as exc_info:
            get_student(db, student_principal, 9999)
        assert exc_info.value.kind == AuthorizationFailureKind.NOT_OWNER

    def test_teacher_reads_any_student(self, db, teacher_principal):
        for student_id in (1, 2, 3):
            assert get_student(db, teacher_principal, student_id)["id"] == student_id

    def test_teacher_sees_missing_record(self, db, teacher_principal):
        with pytest.raises(NotFoundFailure):
            get_student(db, teacher_principal, 9999)

    def test_current_student(self, db, student_principal, teacher_principal):
        assert get_current_student(db, student_principal)["id"] == 1
        with pytest.raises(AuthorizationFailure):
            get_current_student(db, teacher_principal)

    def test_list_students(self, db, student_principal, teacher_principal):
        assert [s["id"] for s in list_students(db, teacher_principal)] == [1, 2, 3]
        with pytest.raises(AuthorizationFailure) as exc_info:
            list_students(db, student_principal)
        assert exc_info.value.kind == AuthorizationFailureKind.ROLE_MISMATCH

    def test_teacher_updates_any_student(self, db, teacher_principal):
        """Scenario D."""
        result = update_student(db, teacher_principal, 2, name="Jane Q. Smith", course_ids=[1, 2])
        assert result["name"] == "Jane Q. Smith"
        assert result["course_ids"] == [1, 2]
        assert result["email"] == "jane.smith@student.edu"

    def test_student_cannot_update_own_record(self, db, student_principal):
        with pytest.raises(AuthorizationFailure) as exc_info:
            update_student(db, student_principal, 1, name="Hacked")
        assert exc_info.value.kind == AuthorizationFailureKind.ROLE_MISMATCH
        assert db.query(Student).filter(Student.id == 1).first().name == "John Doe"

    def test_student_cannot_update_other_record(self, db, student_principal):
        with pytest.raises(AuthorizationFailure):
            update_student(db, student_principal, 2, name="Hacked")

    def test_student_cannot_delete(self, db, student_principal):
        with pytest.raises(AuthorizationFailure) as exc_info:
            delete_student(db, student_principal, 1)
        assert exc_info.value.kind == AuthorizationFailureKind.ROLE_MISMATCH
        assert db.query(Student).count() == 3

    def test_update_rejects_taken_email(self, db, teacher_principal):
        with pytest.raises(ValidationError) as exc_info:
            update_student(db, teacher_principal, 2, email="john.doe@student.edu")
        assert exc_info.value.field == "email"

    def test_update_rejects_unknown_course(self, db, teacher_principal):
        with pytest.raises(ValidationError):
            update_student(db, teacher_principal, 2, course_ids=[42])

    def test_rejected_update_leaves_record_unchanged(self, db, teacher_principal):
        with pytest.raises(ValidationError):
            update_student(db, teacher_principal, 2, name="Half Applied", email="john.doe@student.edu")
        assert get_student(db, teacher_principal, 2)["name"] == "Jane Smith"

        with pytest.raises(ValidationError):
            update_student(db, teacher_principal, 2, name="Half Applied", course_ids=[1, 42])
        result = get_student(db, teacher_principal, 2)
        assert result["name"] == "Jane Smith"
        assert result["course_ids"] == []

    def test_create_student_rejects_unsendable_credentials(self, db, teacher_principal):
        with pytest.raises(ValidationError) as exc_info:
            create_student(
                db, teacher_principal,
                name="Eve Adams", email="eve.adams@student.edu",
                username="eve", password="pässwörd-123",
            )
        assert exc_info.value.field == "password"

        for username in ("eve:adams", "évé"):
            with pytest.raises(ValidationError) as exc_info:
                create_student(
                    db, teacher_principal,
                    name="Eve Adams", email="eve.adams@student.edu",
                    username=username, password="s3cret-pass",
                )
            assert exc_info.value.field == "username"
        assert db.query(Student).filter(Student.email == "eve.adams@student.edu").first() is None

    def test_create_student_provisions_account(self, db, teacher_principal):
        result = create_student(
            db, teacher_principal,
            name="Eve Adams", email="eve.adams@student.edu",
            username="eve", password="s3cret-pass",
            department_id=1, course_ids=[1],
        )
        assert result["username"] == "eve"
        assert result["department_name"] == "Computer Science"

        principal = verify_credentials(db, "eve", "s3cret-pass")
        assert principal.owned_student_id == result["id"]
        assert get_student(db, principal, result["id"])["name"] == "Eve Adams"

    def test_create_student_is_atomic(self, db, teacher_principal):
        with pytest.raises(ValidationError):
            create_student(
                db, teacher_principal,
                name="Dup", email="dup@student.edu",
                username="s1", password="s3cret-pass",
            )
        assert db.query(Student).filter(Student.email == "dup@student.edu").first() is None

    def test_create_student_conflict_keeps_database_error(self, db, teacher_principal, monkeypatch):
        from sqlalchemy.exc import IntegrityError

        # Skip the pre-check so the unique constraint is what rejects the row
        monkeypatch.setattr("services.students._email_taken", lambda *args, **kwargs: False)
        with pytest.raises(ValidationError) as exc_info:
            create_student(
                db, teacher_principal,
                name="Copy Cat", email="john.doe@student.edu",
                username="copycat", password="s3cret-pass",
            )
        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert db.query(User).filter(User.username == "copycat").first() is None

    def test_create_student_rejects_short_password(self, db, teacher_principal):
        with pytest.raises(ValidationError) as exc_info:
            create_student(
                db, teacher_principal,
                name="Short", email="short@student.edu",
                username="short", password="123",
            )
        assert exc_info.value.field == "password"

    def test_student_cannot_create(self, db, student_principal):
        with pytest.raises(AuthorizationFailure):
            create_student(
                db, student_principal,
                name="Mallory", email="mallory@student.edu",
                username="mallory", password="s3cret-pass",
            )
        assert db.query(User).filter(User.username == "mallory").first() is None

    def test_delete_student_retires_account(self, db, teacher_principal):
        delete_student(db, teacher_principal, 2)
        assert db.query(Student).filter(Student.id == 2).first() is None
        assert db.query(User).filter(User.username == "s2").first() is None

    def test_delete_missing_student(self, db, teacher_principal):
        with pytest.raises(NotFoundFailure):
            delete_student(db, teacher_principal, 9999)


class TestTeacherTools:
    """Tests for teacher record operations."""

    def test_teacher_reads_any_teacher(self, db, teacher_principal):
        assert get_teacher(db, teacher_principal, 11)["name"] == "Prof. Charlie Wilson"
        assert [t["id"] for t in list_teachers(db, teacher_principal)] == [10, 11, 12]

    def test_student_cannot_read_teachers(self, db, student_principal):
        for call in (
            lambda: get_teacher(db, student_principal, 10),
            lambda: list_teachers(db, student_principal),
            lambda: get_current_teacher(db, student_principal),
        ):
            with pytest.raises(AuthorizationFailure) as exc_info:
                call()
            assert exc_info.value.kind == AuthorizationFailureKind.ROLE_MISMATCH

    def test_teacher_updates_own_record(self, db, teacher_principal):
        result = update_teacher(db, teacher_principal, 10, name="Dr. Alice Brown-Green")
        assert result["name"] == "Dr. Alice Brown-Green"
        assert get_current_teacher(db, teacher_principal)["name"] == "Dr. Alice Brown-Green"

    def test_rejected_update_leaves_teacher_unchanged(self, db, teacher_principal):
        with pytest.raises(ValidationError):
            update_teacher(db, teacher_principal, 10, name="Half Applied", department_id=99)
        assert get_current_teacher(db, teacher_principal)["name"] == "Dr. Alice Brown"

    def test_teacher_cannot_update_other_teacher(self, db, teacher_principal):
        """Scenario C."""
        with pytest.raises(AuthorizationFailure) as exc_info:
            update_teacher(db, teacher_principal, 11, name="Renamed")
        assert exc_info.value.kind == AuthorizationFailureKind.NOT_OWNER
        assert db.query(Teacher).filter(Teacher.id == 11).first().name == "Prof. Charlie Wilson"

    def test_update_of_missing_teacher_is_denied(self, db, teacher_principal):
        with pytest.raises(AuthorizationFailure) as exc_info:
            update_teacher(db, teacher_principal, 9999, name="Nobody")
        assert exc_info.value.kind == AuthorizationFailureKind.NOT_OWNER

    def test_student_cannot_update_teacher(self, db, student_principal):
        with pytest.raises(AuthorizationFailure) as exc_info:
            update_teacher(db, student_principal, 10, name="Hacked")
        assert exc_info.value.kind == AuthorizationFailureKind.ROLE_MISMATCH

    def test_create_and_delete_teacher(self, db, teacher_principal):
        result = create_teacher(
            db, teacher_principal,
            name="Dr. Frank Hall", email="frank.hall@teacher.edu",
            username="fhall", password="s3cret-pass", department_id=2,
        )
        principal = PrincipalResolver(db).resolve("fhall")
        assert principal.owned_teacher_id == result["id"]

        delete_teacher(db, teacher_principal, result["id"])
        assert db.query(User).filter(User.username == "fhall").first() is None

    def test_delete_teacher_keeps_courses(self, db, teacher_principal):
        delete_teacher(db, teacher_principal, 11)
        course = db.query(Course).filter(Course.id == 2).first()
        assert course is not None
        assert course.teacher_id is None

    def test_student_cannot_create_teacher(self, db, student_principal):
        with pytest.raises(AuthorizationFailure) as exc_info:
            create_teacher(
                db, student_principal,
                name="Mallory", username="mallory", password="s3cret-pass",
            )
        assert exc_info.value.kind == AuthorizationFailureKind.ROLE_MISMATCH
        assert db.query(User).filter(User.username == "mallory").first() is None

    def test_student_cannot_delete_teacher(self, db, student_principal):
        with pytest.raises(AuthorizationFailure) as exc_info:
            delete_teacher(db, student_principal, 10)
        assert exc_info.value.kind == AuthorizationFailureKind.ROLE_MISMATCH
        assert db.query(Teacher).filter(Teacher.id == 10).first() is not None


class TestReferenceTools:
    """Tests for departments and courses."""

    def test_everyone_reads_reference_data(self, db, student_principal, teacher_principal):
        for principal in (student_principal, teacher_principal):
            assert [d["name"] for d in list_departments(db, principal)] == ["Computer Science", "Mathematics"]
            assert len(list_courses(db, principal)) == 2
            assert get_course(db, principal, 1)["title"] == "Introduction to Programming"

    def test_courses_filtered_by_department(self, db, student_principal):
        assert [c["id"] for c in list_courses(db, student_principal, department_id=2)] == [2]

    def test_student_cannot_write_reference_data(self, db, student_principal):
        with pytest.raises(AuthorizationFailure):
            create_department(db, student_principal, "Physics")
        with pytest.raises(AuthorizationFailure):
            create_course(db, student_principal, "Quantum Mechanics")
        with pytest.raises(AuthorizationFailure):
            delete_course(db, student_principal, 1)

    def test_teacher_manages_courses(self, db, teacher_principal):
        department = create_department(db, teacher_principal, "Physics")
        course = create_course(db, teacher_principal, "Mechanics", department_id=department["id"])
        assert course["teacher_id"] == 10

        course = update_course(db, teacher_principal, course["id"], description="Newtonian mechanics")
        assert course["description"] == "Newtonian mechanics"

        delete_course(db, teacher_principal, course["id"])
        with pytest.raises(NotFoundFailure):
            get_course(db, teacher_principal, course["id"])

    def test_duplicate_department(self, db, teacher_principal):
        with pytest.raises(ValidationError):
            create_department(db, teacher_principal, "Mathematics")


class TestAccountTools:
    """Tests for account status changes."""

    def test_disable_account_blocks_resolution(self, db, teacher_principal):
        result = set_account_status(db, teacher_principal, "s1", enabled=False)
        assert result["enabled"] is False
        assert "password_hash" not in result

        with pytest.raises(AuthenticationFailure) as exc_info:
            PrincipalResolver(db).resolve("s1")
        assert exc_info.value.kind == AuthenticationFailureKind.DISABLED

    def test_unlock_account(self, db, teacher_principal):
        set_account_status(db, teacher_principal, "tlocked", locked=False)
        assert PrincipalResolver(db).resolve("tlocked").owned_teacher_id == 12

    def test_role_is_unchanged(self, db, teacher_principal):
        set_account_status(db, teacher_principal, "s2", locked=True)
        assert get_account(db, teacher_principal, "s2")["role"] == "student"

    def test_student_cannot_change_status(self, db, student_principal):
        with pytest.raises(AuthorizationFailure):
            set_account_status(db, student_principal, "s2", enabled=False)

    def test_cannot_change_own_status(self, db, teacher_principal):
        with pytest.raises(ValidationError):
            set_account_status(db, teacher_principal, "t1", enabled=False)

    def test_unknown_account(self, db, teacher_principal):
        with pytest.raises(NotFoundFailure):
            set_account_status(db, teacher_principal, "nobody", enabled=False)

    def test_nothing_to_change(self, db, teacher_principal):
        with pytest.raises(ValidationError):
            set_account_status(db, teacher_principal, "s2")


class TestAccountInvariant:
    """The owned-profile invariant is enforced by the database."""

    def test_student_account_with_teacher_profile_is_rejected(self, db):
        from sqlalchemy.exc import IntegrityError

        db.add(User(username="bad", password_hash="x", role="student", teacher_id=10))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_account_without_profile_is_rejected(self, db):
        from sqlalchemy.exc import IntegrityError

        db.add(User(username="bad", password_hash="x", role="teacher"))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()
