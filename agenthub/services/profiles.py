"""Profile read/update and username lookup."""

import logging
from datetime import UTC, date, datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from agenthub.db import Profile, atomic
from agenthub.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("first_name", "middle_name", "last_name", "sex", "date_of_birth", "phone", "username")
REQUIRED_FIELDS = ("first_name", "last_name")


def get_profile(db: Session, profile_id: str) -> Profile:
    profile = db.query(Profile).options(selectinload(Profile.agent)).filter(Profile.id == profile_id).first()
    if not profile:
        raise NotFound("Profile not found")
    return profile


def update_profile(db: Session, profile_id: str, changes: dict) -> Profile:
    """Partial update. Blank optional values are stored as null."""
    fields = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if not fields:
        raise ValidationFailed("No fields to update")

    for key, value in list(fields.items()):
        if isinstance(value, str):
            value = value.strip()
        if key in REQUIRED_FIELDS:
            if not value:
                raise ValidationFailed(f"'{key}' cannot be empty")
        elif value == "":
            value = None
        if key == "date_of_birth" and isinstance(value, str):
            try:
                value = date.fromisoformat(value)
            except ValueError:
                raise ValidationFailed("Date of birth must be YYYY-MM-DD") from None
        fields[key] = value

    profile = get_profile(db, profile_id)

    username = fields.get("username")
    if username:
        taken = (
            db.query(Profile)
            .filter(func.lower(Profile.username) == username.lower(), Profile.id != profile_id)
            .first()
        )
        if taken:
            raise ValidationFailed("Username is already taken")

    try:
        with atomic(db):
            for key, value in fields.items():
                setattr(profile, key, value)
            profile.updated_at = datetime.now(UTC)
    except IntegrityError as e:
        raise ValidationFailed("Username is already taken") from e

    db.refresh(profile)
    logger.info(f"[{profile_id}] Profile updated: {', '.join(sorted(fields))}")
    return profile


def lookup_username(db: Session, username: str) -> str:
    """Email for a username, matched case-insensitively."""
    username = (username or "").strip()
    if not username:
        raise ValidationFailed("Username is required")

    profile = db.query(Profile).filter(func.lower(Profile.username) == username.lower()).first()
    if not profile:
        raise NotFound("Username not found")
    return profile.email
