"""Request-scoped dependencies: caller identity and email senders."""

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from agenthub.db import Profile, get_db
from agenthub.errors import Forbidden, Unauthorized
from agenthub.tools.email import send_application_confirmation, send_status_change_email

STAFF_ROLES = ("admin", "recruiter")


@dataclass(frozen=True)
class Identity:
    """Who is calling. ``agent_id`` is set only for agent profiles."""

    profile_id: str
    role: str
    agent_id: str | None = None

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


def get_identity(
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db),
) -> Identity:
    """Resolve the X-User-ID header set by the auth gateway to a profile."""
    if not x_user_id:
        raise Unauthorized("Authentication required")

    profile = db.query(Profile).filter(Profile.id == x_user_id).first()
    if not profile or not profile.is_active:
        raise Unauthorized("Unknown user")

    agent_id = profile.agent.id if profile.agent else None
    return Identity(profile_id=profile.id, role=profile.role, agent_id=agent_id)


def require_agent(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.agent_id is None:
        raise Forbidden("Agent account required")
    return identity


def require_staff(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_staff:
        raise Forbidden("Staff access required")
    return identity


def get_confirmation_sender() -> Callable[..., bool]:
    return send_application_confirmation


def get_status_sender() -> Callable[..., bool]:
    return send_status_change_email
