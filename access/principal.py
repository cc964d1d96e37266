"""
Principal model and resolver.

A Principal is the already-authenticated identity handed to every guarded
operation. It is built from the ``users`` row on each resolution, so account
status changes take effect on the next request.
"""
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator
from sqlalchemy.orm import Session

from database import User
from .exceptions import AuthenticationFailure, AuthenticationFailureKind
from .roles import Role

logger = logging.getLogger(__name__)


class Principal(BaseModel):
    """
    Authenticated identity with its role and owned profile reference.

    Attributes:
        user_id: Account row id
        username: Unique login name
        role: Student or Teacher
        enabled: Account may sign in
        locked: Account is locked
        owned_student_id: Student profile owned by a student principal
        owned_teacher_id: Teacher profile owned by a teacher principal
    """
    model_config = ConfigDict(frozen=True)

    user_id: Optional[int] = None
    username: str
    role: Role
    enabled: bool = True
    locked: bool = False
    owned_student_id: Optional[int] = None
    owned_teacher_id: Optional[int] = None

    @model_validator(mode="after")
    def _check_owned_profile(self):
        if self.role == Role.STUDENT:
            if self.owned_student_id is None or self.owned_teacher_id is not None:
                raise ValueError("student principal must own exactly one student profile")
        elif self.role == Role.TEACHER:
            if self.owned_teacher_id is None or self.owned_student_id is not None:
                raise ValueError("teacher principal must own exactly one teacher profile")
        return self

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            user_id=user.id,
            username=user.username,
            role=Role(user.role),
            enabled=user.enabled,
            locked=user.locked,
            owned_student_id=user.student_id,
            owned_teacher_id=user.teacher_id,
        )


class PrincipalResolver:
    """
    Maps a verified username to an active Principal.
    Status is re-checked on every call, never cached.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_account(self, username: str) -> User:
        """
        Get the account row for a username.

        Raises:
            AuthenticationFailure: NOT_FOUND if no such account exists
        """
        user = self.db.query(User).filter(User.username == username).first()
        if not user:
            raise AuthenticationFailure(AuthenticationFailureKind.NOT_FOUND, username)
        return user

    def resolve(self, username: str) -> Principal:
        """
        Resolve a verified username to a Principal.

        Args:
            username: Username that already passed credential verification

        Returns:
            Principal carrying the owned profile id

        Raises:
            AuthenticationFailure: NOT_FOUND, DISABLED or LOCKED
        """
        return self.resolve_account(self.get_account(username))

    def resolve_account(self, user: User) -> Principal:
        """Status checks shared by resolution and credential verification."""
        if not user.enabled:
            logger.info("Rejected disabled account '%s'", user.username)
            raise AuthenticationFailure(AuthenticationFailureKind.DISABLED, user.username)
        if user.locked:
            logger.info("Rejected locked account '%s'", user.username)
            raise AuthenticationFailure(AuthenticationFailureKind.LOCKED, user.username)
        return Principal.from_user(user)


def get_principal_resolver(db: Session) -> PrincipalResolver:
    """Factory function to create PrincipalResolver."""
    return PrincipalResolver(db)


def resolve_principal(db: Session, username: str) -> Principal:
    """Shortcut for ``PrincipalResolver(db).resolve(username)``."""
    return PrincipalResolver(db).resolve(username)
