"""Profile endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from agenthub.api.deps import Identity, get_identity
from agenthub.api.limiter import limiter
from agenthub.api.schemas import ProfileResponse, ProfileUpdate, UsernameLookup, UsernameLookupResponse
from agenthub.config import settings
from agenthub.db import get_db
from agenthub.services import profiles

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """Get the caller's profile and agent record."""
    return ProfileResponse.model_validate(profiles.get_profile(db, identity.profile_id))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """Update the caller's personal details."""
    profile = profiles.update_profile(db, identity.profile_id, data.model_dump(exclude_unset=True))
    return ProfileResponse.model_validate(profile)


@router.post("/lookup-username", response_model=UsernameLookupResponse)
@limiter.limit(settings.lookup_rate_limit)
def lookup_username(
    request: Request,
    data: UsernameLookup,
    db: Session = Depends(get_db),
):
    """Resolve a username to the email used to sign in."""
    return UsernameLookupResponse(email=profiles.lookup_username(db, data.username))
