"""
Request dependencies: credential parsing and the current principal.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.orm import Session

from access import (
    AuthenticationFailure,
    AuthenticationFailureKind,
    Principal,
    verify_credentials,
)
from database import get_db

basic_scheme = HTTPBasic(auto_error=False, realm="Academic Records")


def get_current_principal(
    request: Request,
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Principal for the current request.

    Reuses the principal the route gate middleware resolved; otherwise
    verifies the request's own credentials, so routes stay protected when
    mounted without the middleware.

    Raises:
        AuthenticationFailure: If the request carries no valid credentials
    """
    principal = getattr(request.state, "principal", None)
    if principal is not None:
        return principal
    if credentials is None:
        raise AuthenticationFailure(AuthenticationFailureKind.NOT_FOUND)
    return verify_credentials(db, credentials.username, credentials.password)
