"""Opportunity listing and management."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session, selectinload

from agenthub.db import Opportunity, atomic
from agenthub.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)

OPPORTUNITY_STATUSES = ("draft", "active", "paused", "closed")

EDITABLE_FIELDS = (
    "name",
    "description",
    "client",
    "status",
    "category",
    "requirements",
    "compensation",
    "schedule",
    "training",
    "tags",
    "max_agents",
    "current_agents",
    "open_positions",
)
NON_NULLABLE_FIELDS = (
    "name",
    "description",
    "client",
    "status",
    "tags",
    "max_agents",
    "current_agents",
    "open_positions",
)


def _check_status(status: str | None) -> None:
    if status is not None and status not in OPPORTUNITY_STATUSES:
        raise ValidationFailed(f"Unknown opportunity status '{status}'")


def list_opportunities(
    db: Session, status: str | None = None, include_questions: bool = False
) -> list[Opportunity]:
    """Opportunities, newest first, optionally filtered by status."""
    query = db.query(Opportunity)
    if include_questions:
        query = query.options(selectinload(Opportunity.questions))
    if status:
        query = query.filter(Opportunity.status == status)
    return query.order_by(Opportunity.created_at.desc()).all()


def get_opportunity(db: Session, opportunity_id: str) -> Opportunity:
    opportunity = (
        db.query(Opportunity)
        .options(selectinload(Opportunity.questions))
        .filter(Opportunity.id == opportunity_id)
        .first()
    )
    if not opportunity:
        raise NotFound("Opportunity not found")
    return opportunity


def create_opportunity(db: Session, data: dict) -> Opportunity:
    fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS and v is not None}
    if not str(fields.get("name", "")).strip() or not str(fields.get("client", "")).strip():
        raise ValidationFailed("Name and client are required")
    _check_status(fields.get("status"))

    opportunity = Opportunity(**fields)
    with atomic(db):
        db.add(opportunity)
    db.refresh(opportunity)
    logger.info(f"[{opportunity.id}] Created opportunity '{opportunity.name}'")
    return opportunity


def update_opportunity(db: Session, opportunity_id: str, changes: dict) -> Opportunity:
    """Apply only the provided fields."""
    opportunity = get_opportunity(db, opportunity_id)
    fields = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    for key in NON_NULLABLE_FIELDS:
        if key in fields and fields[key] is None:
            raise ValidationFailed(f"'{key}' cannot be cleared")
    for key in ("name", "client", "status"):
        if key in fields and not str(fields[key]).strip():
            raise ValidationFailed(f"'{key}' cannot be cleared")
    _check_status(fields.get("status"))

    with atomic(db):
        for key, value in fields.items():
            setattr(opportunity, key, value)
        opportunity.updated_at = datetime.now(UTC)
    db.refresh(opportunity)
    return opportunity


def close_opportunity(db: Session, opportunity_id: str) -> Opportunity:
    """Soft delete: the opportunity and its applications stay on record."""
    opportunity = get_opportunity(db, opportunity_id)
    with atomic(db):
        opportunity.status = "closed"
        opportunity.updated_at = datetime.now(UTC)
    db.refresh(opportunity)
    logger.info(f"[{opportunity_id}] Closed opportunity")
    return opportunity
