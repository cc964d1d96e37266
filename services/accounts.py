"""
Account tools for the Academic Records system.

Accounts are created together with their student or teacher record (see
``services.students`` and ``services.teachers``). Afterwards only their
status changes: enabled/disabled and locked/unlocked. The role of an
account never changes.
"""
import logging
from typing import Dict, Any, Optional
from sqlalchemy.orm import Session

from access import (
    NotFoundFailure,
    Operation,
    Principal,
    ValidationError,
    dashboard_path,
    enforce_role,
)
from database import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def validate_new_account(db: Session, username: str, password: str) -> None:
    """
    Validate credentials for an account about to be provisioned.

    Credentials travel in HTTP Basic headers, so they must be ASCII and the
    username cannot contain ``:``.

    Raises:
        ValidationError: If the username is empty, taken or not sendable, or
            the password is too short or not sendable
    """
    if not username or not username.strip():
        raise ValidationError("Username is required", "username")
    if username != username.strip():
        raise ValidationError("Username must not start or end with whitespace", "username")
    if not username.isascii() or ":" in username:
        raise ValidationError("Username must be ASCII and must not contain ':'", "username")
    if db.query(User).filter(User.username == username).first():
        raise ValidationError(f"Username '{username}' is already taken", "username")
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", "password"
        )
    if not password.isascii():
        raise ValidationError("Password must be ASCII", "password")


def get_account(db: Session, principal: Principal, username: str) -> Dict[str, Any]:
    """
    Get an account's status.

    AUTHORIZATION: Teacher only.
    """
    enforce_role(principal, Operation.SET_ACCOUNT_STATUS)
    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise NotFoundFailure("Account", username)
    return user.to_dict()


def set_account_status(
    db: Session,
    principal: Principal,
    username: str,
    enabled: Optional[bool] = None,
    locked: Optional[bool] = None
) -> Dict[str, Any]:
    """
    Enable/disable or lock/unlock an account.

    The change applies from the account's next request on, since every
    request resolves the principal again.

    AUTHORIZATION: Teacher only. A teacher cannot change their own account.

    Raises:
        AuthorizationFailure: If requester is not a teacher
        NotFoundFailure: If the account does not exist
        ValidationError: If nothing would change or the account is the caller's own
    """
    enforce_role(principal, Operation.SET_ACCOUNT_STATUS)

    if enabled is None and locked is None:
        raise ValidationError("Nothing to change: give 'enabled' and/or 'locked'")

    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise NotFoundFailure("Account", username)
    if user.username == principal.username:
        raise ValidationError("You cannot change the status of your own account", "username")

    if enabled is not None:
        user.enabled = enabled
    if locked is not None:
        user.locked = locked

    db.commit()
    db.refresh(user)
    logger.info(
        "Teacher '%s' set account '%s' enabled=%s locked=%s",
        principal.username, user.username, user.enabled, user.locked,
    )
    return user.to_dict()


def get_dashboard_path(principal: Principal) -> str:
    """Landing page for the principal's role."""
    return dashboard_path(principal.role)
