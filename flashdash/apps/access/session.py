"""
Client session context and route guard.

The browser keeps token, role and name together; here they are one immutable
`SessionContext` held by a `SessionStore`. Logout swaps the whole context for
None in a single assignment, so no half-cleared state is observable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from flashdash.apps.access.services import DEFAULT_RULES, Rules, has_permission

LOGIN_PATH = "/login"
HOME_PATH = "/"

# Route -> permission flag it needs. Longest matching prefix wins.
ROUTE_PERMISSIONS = {
    "/": "dashboard",
    "/reports": "reports",
    "/flash-form": "leadIntake",
    "/admin/user-mapping": "userMapping",
    "/admin/access-control": "accessControl",
}

ADMIN_ONLY_PREFIX = "/admin"


@dataclass(frozen=True)
class SessionContext:
    token: str
    role: str
    email: str = ""
    agent_name: str = "Agent"

    @classmethod
    def from_login(cls, body: Mapping[str, Any]) -> "SessionContext":
        """Build from a `/auth/login` response body."""
        user = body.get("user") or {}
        return cls(
            token=body["token"],
            role=user.get("role") or "agent",
            email=user.get("email") or "",
            agent_name=user.get("agentName") or "Agent",
        )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def auth_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class SessionStore:
    """Holds at most one session."""

    def __init__(self) -> None:
        self._current: Optional[SessionContext] = None

    @property
    def current(self) -> Optional[SessionContext]:
        return self._current

    def login(self, context: SessionContext) -> SessionContext:
        self._current = context
        return context

    def logout(self) -> None:
        self._current = None


class GuardOutcome(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class RouteDecision:
    outcome: GuardOutcome
    location: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome is GuardOutcome.ALLOW


def _permission_for(path: str) -> Optional[str]:
    matches = [
        prefix for prefix in ROUTE_PERMISSIONS
        if path == prefix or (prefix != HOME_PATH and path.startswith(prefix + "/"))
    ]
    if not matches:
        return None
    return ROUTE_PERMISSIONS[max(matches, key=len)]


def guard(path: str, session: Optional[SessionContext], rules: Rules = DEFAULT_RULES) -> RouteDecision:
    """
    Decide whether `session` may open `path`.

    - no session: redirect to /login (except for /login itself)
    - /admin/* for a non-admin: redirect home
    - a role lacking the route's permission flag: redirect home
    """
    if path == LOGIN_PATH:
        return RouteDecision(GuardOutcome.ALLOW)

    if session is None:
        return RouteDecision(GuardOutcome.REDIRECT, LOGIN_PATH)

    if (path == ADMIN_ONLY_PREFIX or path.startswith(ADMIN_ONLY_PREFIX + "/")) and not session.is_admin:
        return RouteDecision(GuardOutcome.REDIRECT, HOME_PATH)

    flag = _permission_for(path)
    if flag is not None and not has_permission(rules, session.role, flag):
        # Home is the fallback target; never bounce from home to home.
        if path == HOME_PATH:
            return RouteDecision(GuardOutcome.REDIRECT, LOGIN_PATH)
        return RouteDecision(GuardOutcome.REDIRECT, HOME_PATH)

    return RouteDecision(GuardOutcome.ALLOW)
