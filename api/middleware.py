"""
Route gate middleware.

Runs before routing: resolves the caller from HTTP Basic credentials,
checks the path against the route gate and either lets the request through
or answers it directly.
"""
import logging

from fastapi import HTTPException
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from access import (
    AuthenticationFailure,
    DenyReason,
    RouteGate,
    default_gate,
    verify_credentials,
)
from config.settings import settings
from database import SessionLocal
from .dependencies import basic_scheme

logger = logging.getLogger(__name__)


def _verify(session_factory, username: str, password: str):
    db = session_factory()
    try:
        return verify_credentials(db, username, password)
    finally:
        db.close()


class RouteGateMiddleware(BaseHTTPMiddleware):
    """
    Apply the route gate to every request.

    Args:
        app: ASGI application
        gate: Route gate to apply
        session_factory: Callable returning a database session
        login_path: Where unauthenticated requests are sent
    """

    def __init__(self, app, gate: RouteGate = None, session_factory=None, login_path: str = None):
        super().__init__(app)
        self.gate = gate or default_gate
        self.session_factory = session_factory or SessionLocal
        self.login_path = login_path or settings.login_path

    async def _authenticate(self, request: Request):
        """Return (principal, failed) for the request's Basic credentials."""
        try:
            credentials = await basic_scheme(request)
        except HTTPException:
            # Malformed Authorization header
            return None, True
        if credentials is None:
            return None, False
        try:
            principal = await run_in_threadpool(
                _verify, self.session_factory, credentials.username, credentials.password
            )
        except AuthenticationFailure as exc:
            logger.info("Sign-in failed for '%s' (%s)", exc.username, exc.kind.value)
            return None, True
        return principal, False

    async def dispatch(self, request: Request, call_next):
        principal, failed = await self._authenticate(request)
        request.state.principal = principal
        request.state.sign_in_failed = failed

        decision = self.gate.check(request.url.path, principal)
        if decision.allowed:
            return await call_next(request)

        if decision.reason == DenyReason.UNAUTHENTICATED:
            target = self.login_path + ("?error=true" if failed else "")
            return RedirectResponse(target, status_code=303)

        return JSONResponse(status_code=403, content={"detail": "Access denied"})
