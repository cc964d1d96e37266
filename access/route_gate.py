"""
Route gate for the Academic Records system.

Coarse role check made on the request path before a request is dispatched.
Rules are evaluated in order and the first matching pattern wins, so more
specific patterns must come before general ones. A path no rule matches
still requires a signed-in principal.

DEFENSE IN DEPTH:
- Route gate: rejects whole path spaces by role
- Method guard: every operation re-checks the role itself
- Ownership checker: compares the caller with the target record
"""
import logging
import posixpath
import re
from enum import Enum
from typing import NamedTuple, Optional, Pattern, Sequence

from .principal import Principal
from .roles import Role

logger = logging.getLogger(__name__)


class Access(str, Enum):
    """Requirement attached to a path pattern."""
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    STUDENT = "student"
    TEACHER = "teacher"


class GateResult(Enum):
    """Result of a route gate check."""
    ALLOW = "allow"
    DENY = "deny"


class DenyReason(str, Enum):
    ROLE_MISMATCH = "role_mismatch"
    UNAUTHENTICATED = "unauthenticated"


class RouteRule(NamedTuple):
    pattern: str
    access: Access


class RouteDecision(NamedTuple):
    result: GateResult
    reason: Optional[DenyReason]
    rule: RouteRule

    @property
    def allowed(self) -> bool:
        return self.result == GateResult.ALLOW


ROLE_ACCESS = {
    Access.STUDENT: Role.STUDENT,
    Access.TEACHER: Role.TEACHER,
}

CATCH_ALL = RouteRule("/**", Access.AUTHENTICATED)

# Order matters: most specific first, catch-all last
DEFAULT_RULES = (
    RouteRule("/", Access.PUBLIC),
    RouteRule("/login", Access.PUBLIC),
    RouteRule("/health", Access.PUBLIC),
    RouteRule("/api/status", Access.PUBLIC),
    RouteRule("/error", Access.PUBLIC),
    RouteRule("/access-denied", Access.PUBLIC),
    RouteRule("/favicon.ico", Access.PUBLIC),
    RouteRule("/static/**", Access.PUBLIC),
    RouteRule("/css/**", Access.PUBLIC),
    RouteRule("/js/**", Access.PUBLIC),
    RouteRule("/images/**", Access.PUBLIC),
    RouteRule("/docs/**", Access.PUBLIC),
    RouteRule("/redoc", Access.PUBLIC),
    RouteRule("/openapi.json", Access.PUBLIC),
    RouteRule("/student/**", Access.STUDENT),
    RouteRule("/teacher/**", Access.TEACHER),
    RouteRule("/courses/manage/**", Access.TEACHER),
    CATCH_ALL,
)


def compile_pattern(pattern: str) -> Pattern:
    """
    Compile an Ant-style path pattern.

    ``**`` matches any number of segments (including none), ``*`` matches
    within a single segment, everything else is literal.
    """
    if pattern in ("*", "**", "/**"):
        return re.compile(r"^/.*$")

    parts = []
    for segment in pattern.strip("/").split("/"):
        if segment == "**":
            parts.append(r"(?:/.*)?")
        else:
            parts.append("/" + re.escape(segment).replace(r"\*", "[^/]*"))
    return re.compile("^" + "".join(parts) + "/?$")


def normalize_path(path: str) -> str:
    """Collapse duplicate slashes and dot segments before matching."""
    if not path:
        return "/"
    path = re.sub(r"/{2,}", "/", path)
    if not path.startswith("/"):
        path = "/" + path
    normalized = posixpath.normpath(path)
    return "/" if normalized in (".", "") else normalized


def _shadows(earlier: str, later: str) -> bool:
    """True if every path matched by ``later`` is already matched by ``earlier``."""
    if earlier in ("*", "**", "/**"):
        return True
    if earlier.endswith("/**"):
        prefix = earlier[:-3]
        return later == prefix or later.startswith(prefix + "/")
    return earlier == later


class RouteGate:
    """
    Ordered first-match path gate.

    Args:
        rules: Ordered (pattern, access) rules; a catch-all requiring
            authentication is appended when missing
    """

    def __init__(self, rules: Sequence[RouteRule] = DEFAULT_RULES):
        rules = list(rules)
        if not rules or rules[-1].pattern not in ("*", "**", "/**"):
            rules.append(CATCH_ALL)
        self._check_order(rules)
        self.rules = tuple(rules)
        self._compiled = [(rule, compile_pattern(rule.pattern)) for rule in self.rules]

    @staticmethod
    def _check_order(rules):
        for i, later in enumerate(rules):
            for earlier in rules[:i]:
                if _shadows(earlier.pattern, later.pattern):
                    raise ValueError(
                        f"Route rule '{later.pattern}' is unreachable behind '{earlier.pattern}'"
                    )

    def match(self, path: str) -> RouteRule:
        """Return the first rule whose pattern matches ``path``."""
        path = normalize_path(path)
        for rule, regex in self._compiled:
            if regex.match(path):
                return rule
        return CATCH_ALL

    def is_public(self, path: str) -> bool:
        return self.match(path).access == Access.PUBLIC

    def check(self, path: str, principal: Optional[Principal]) -> RouteDecision:
        """
        Decide whether ``principal`` may reach ``path``.

        Args:
            path: Request path
            principal: Resolved caller, or None when not signed in

        Returns:
            RouteDecision with the matched rule and the deny reason, if any
        """
        rule = self.match(path)

        if rule.access == Access.PUBLIC:
            return RouteDecision(GateResult.ALLOW, None, rule)

        if principal is None:
            return RouteDecision(GateResult.DENY, DenyReason.UNAUTHENTICATED, rule)

        if rule.access == Access.AUTHENTICATED:
            return RouteDecision(GateResult.ALLOW, None, rule)

        if principal.role == ROLE_ACCESS.get(rule.access):
            return RouteDecision(GateResult.ALLOW, None, rule)

        logger.info(
            "Route gate denied '%s' to '%s' (requires %s)",
            path, principal.username, rule.access.value,
        )
        return RouteDecision(GateResult.DENY, DenyReason.ROLE_MISMATCH, rule)


default_gate = RouteGate()


def check_route(path: str, principal: Optional[Principal]) -> RouteDecision:
    """Convenience function to check a path against the default rules."""
    return default_gate.check(path, principal)
