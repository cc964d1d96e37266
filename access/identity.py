"""
Credential verification.

Checks a username/password pair against the stored bcrypt hash and hands
the account to the principal resolver, so disabled and locked accounts
are refused here as well.
"""
import logging

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from config.settings import settings
from database import User
from .exceptions import AuthenticationFailure, AuthenticationFailureKind
from .principal import Principal, PrincipalResolver

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def verify_credentials(db: Session, username: str, password: str) -> Principal:
    """
    Verify a username/password pair and resolve the Principal.

    Raises:
        AuthenticationFailure: NOT_FOUND, BAD_CREDENTIALS, DISABLED or LOCKED
    """
    user = db.query(User).filter(User.username == username).first()
    if not user:
        # Burn a hash round so unknown usernames cost the same as wrong passwords
        pwd_context.dummy_verify()
        logger.info("Sign-in failed for unknown username '%s'", username)
        raise AuthenticationFailure(AuthenticationFailureKind.NOT_FOUND, username)
    if not verify_password(password, user.password_hash):
        logger.info("Sign-in failed for '%s': bad credentials", username)
        raise AuthenticationFailure(AuthenticationFailureKind.BAD_CREDENTIALS, username)
    return PrincipalResolver(db).resolve_account(user)
