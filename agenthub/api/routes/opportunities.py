"""Opportunity endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agenthub.api.deps import Identity, get_identity, require_staff
from agenthub.api.schemas import (
    OpportunityCreate,
    OpportunityDetailResponse,
    OpportunityListResponse,
    OpportunityResponse,
    OpportunityUpdate,
)
from agenthub.db import get_db
from agenthub.errors import NotFound
from agenthub.services import opportunities as service

router = APIRouter()


def _detail(opportunity, include_questions: bool = True) -> OpportunityDetailResponse:
    response = OpportunityDetailResponse.model_validate(opportunity)
    if not include_questions:
        response.questions = []
    return response


@router.get("", response_model=OpportunityListResponse)
def list_opportunities(
    status: str | None = None,
    include_questions: bool = Query(False, alias="includeQuestions"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """List opportunities, newest first. Agents only see active ones."""
    if not identity.is_staff:
        status = "active"
    opportunities = service.list_opportunities(db, status=status, include_questions=include_questions)
    return OpportunityListResponse(opportunities=[_detail(o, include_questions) for o in opportunities])


@router.post("", response_model=OpportunityResponse, status_code=201)
def create_opportunity(
    data: OpportunityCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_staff),
):
    """Create an opportunity (draft by default)."""
    return OpportunityResponse.model_validate(service.create_opportunity(db, data.model_dump()))


@router.get("/{opportunity_id}", response_model=OpportunityDetailResponse)
def get_opportunity(
    opportunity_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """Get an opportunity with its ordered questions."""
    opportunity = service.get_opportunity(db, opportunity_id)
    if not identity.is_staff and opportunity.status != "active":
        raise NotFound("Opportunity not found")
    return _detail(opportunity)


@router.put("/{opportunity_id}", response_model=OpportunityResponse)
def update_opportunity(
    opportunity_id: str,
    data: OpportunityUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_staff),
):
    """Update only the fields present in the body."""
    opportunity = service.update_opportunity(db, opportunity_id, data.model_dump(exclude_unset=True))
    return OpportunityResponse.model_validate(opportunity)


@router.delete("/{opportunity_id}", response_model=OpportunityResponse)
def close_opportunity(
    opportunity_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_staff),
):
    """Close an opportunity. Nothing is removed."""
    return OpportunityResponse.model_validate(service.close_opportunity(db, opportunity_id))
