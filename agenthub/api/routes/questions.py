"""Application question endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agenthub.api.deps import Identity, get_identity, require_staff
from agenthub.api.schemas import (
    QuestionCreate,
    QuestionListResponse,
    QuestionResponse,
    QuestionUpdate,
    ReorderRequest,
    SyncRequest,
)
from agenthub.db import get_db
from agenthub.services import questions as store

router = APIRouter()


def _fields(data: QuestionUpdate | QuestionCreate, exclude_unset: bool = True) -> dict:
    """Snake-case field dict; nested options/validation keep their wire keys."""
    fields = data.model_dump(exclude_unset=exclude_unset)
    if fields.get("options") is not None:
        fields["options"] = [o.model_dump(by_alias=True, exclude_none=True) for o in data.options]
    if fields.get("validation") is not None:
        fields["validation"] = data.validation.model_dump(exclude_none=True)
    return fields


def _listing(questions) -> QuestionListResponse:
    return QuestionListResponse(questions=[QuestionResponse.model_validate(q) for q in questions])


@router.get("/opportunities/{opportunity_id}/questions", response_model=QuestionListResponse)
def list_questions(
    opportunity_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """List an opportunity's questions in order."""
    return _listing(store.list_questions(db, opportunity_id))


@router.post("/opportunities/{opportunity_id}/questions", response_model=QuestionResponse, status_code=201)
def create_question(
    opportunity_id: str,
    data: QuestionCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_staff),
):
    """Create a question; appends unless an order is given."""
    question = store.create_question(db, opportunity_id, _fields(data, exclude_unset=False))
    return QuestionResponse.model_validate(question)


@router.put("/opportunities/{opportunity_id}/questions", response_model=QuestionListResponse)
def reorder_questions(
    opportunity_id: str,
    data: ReorderRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_staff),
):
    """Apply new orders to questions; the result must stay 1..N."""
    items = [{"id": q.id, "order": q.order} for q in data.questions]
    return _listing(store.reorder_questions(db, opportunity_id, items))


@router.put("/opportunities/{opportunity_id}/questions/sync", response_model=QuestionListResponse)
def sync_questions(
    opportunity_id: str,
    data: SyncRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_staff),
):
    """Replace the question list: update, create and delete in one go."""
    desired = [_fields(item) for item in data.questions]
    return _listing(store.sync_questions(db, opportunity_id, desired))


@router.get("/questions/{question_id}", response_model=QuestionResponse)
def get_question(
    question_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """Get a single question."""
    return QuestionResponse.model_validate(store.get_question(db, question_id))


@router.put("/questions/{question_id}", response_model=QuestionResponse)
def update_question(
    question_id: str,
    data: QuestionUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_staff),
):
    """Update only the fields present in the body."""
    return QuestionResponse.model_validate(store.update_question(db, question_id, _fields(data)))


@router.delete("/questions/{question_id}")
def delete_question(
    question_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_staff),
):
    """Delete a question and renumber the rest."""
    store.delete_question(db, question_id)
    return {"message": "Question deleted"}
