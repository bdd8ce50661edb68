from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import session

# Roles allowed to read and write academy records
OPERATOR_ROLES = frozenset({"admin", "staff"})


class NotAuthenticated(Exception):
    """No operator is signed in."""


class NotAuthorized(Exception):
    """The signed-in operator's role may not touch academy records."""


@dataclass(frozen=True)
class AccessContext:
    """Who is acting. Passed explicitly to every data-access call."""

    operator_id: int
    role: str
    email: Optional[str] = None

    @property
    def is_operator(self) -> bool:
        return self.role in OPERATOR_ROLES

    def ensure_operator(self) -> "AccessContext":
        if not self.is_operator:
            raise NotAuthorized(f"Role '{self.role}' may not access academy records")
        return self


def login_session(profile) -> AccessContext:
    session.clear()
    session["operator_id"] = int(profile.id)
    session["role"] = profile.role
    session["email"] = profile.email
    return AccessContext(operator_id=int(profile.id), role=profile.role, email=profile.email)


def logout_session() -> None:
    session.clear()


def current_access() -> AccessContext:
    operator_id = session.get("operator_id")
    if not operator_id:
        raise NotAuthenticated("Not authenticated")
    return AccessContext(
        operator_id=int(operator_id),
        role=session.get("role") or "",
        email=session.get("email"),
    )
