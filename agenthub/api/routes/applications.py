"""Application endpoints."""

from collections.abc import Callable

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from agenthub.api.deps import (
    Identity,
    get_confirmation_sender,
    get_identity,
    get_status_sender,
    require_agent,
    require_staff,
)
from agenthub.api.limiter import limiter
from agenthub.api.schemas import ApplicationCreate, ApplicationListResponse, ApplicationResponse, StatusUpdate
from agenthub.config import settings
from agenthub.db import get_db
from agenthub.errors import Forbidden, NotFound
from agenthub.services import applications as service

router = APIRouter()


@router.post("", response_model=ApplicationResponse, status_code=201)
@limiter.limit(settings.submission_rate_limit)
def submit_application(
    request: Request,
    data: ApplicationCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_agent),
    send_confirmation: Callable[..., bool] = Depends(get_confirmation_sender),
):
    """Submit an application with answers to the opportunity's questions."""
    if data.agent_id and data.agent_id != identity.agent_id:
        raise Forbidden("Cannot apply on behalf of another agent")

    answers = [{"question_id": a.question_id, "value": a.value} for a in data.answers]
    application = service.submit_application(
        db, identity.agent_id, data.opportunity_id, answers, send_confirmation=send_confirmation
    )
    return ApplicationResponse.model_validate(service.get_application(db, application.id))


@router.get("", response_model=ApplicationListResponse)
def list_applications(
    agent_id: str | None = Query(None, alias="agentId"),
    opportunity_id: str | None = Query(None, alias="opportunityId"),
    status: str | None = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """List applications, newest first. Agents only see their own."""
    if not identity.is_staff:
        agent_id = identity.agent_id
        if agent_id is None:
            return ApplicationListResponse(applications=[])

    applications = service.list_applications(db, agent_id=agent_id, opportunity_id=opportunity_id, status=status)
    return ApplicationListResponse(applications=[ApplicationResponse.model_validate(a) for a in applications])


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """Get one application with its answers."""
    application = service.get_application(db, application_id)
    if not identity.is_staff and application.agent_id != identity.agent_id:
        raise NotFound("Application not found")
    return ApplicationResponse.model_validate(application)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: str,
    data: StatusUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_staff),
    send_update: Callable[..., bool] = Depends(get_status_sender),
):
    """Move an application through review."""
    application = service.update_status(
        db, application_id, data.status, identity.profile_id, notes=data.notes, send_update=send_update
    )
    return ApplicationResponse.model_validate(application)
