"""
Question store.

CRUD and ordering over the application questions of one opportunity.
Orders are kept dense: for N questions they are exactly 1..N.

- create without an order appends; with an order it inserts and shifts
- update with an order moves the question and shifts its siblings
- delete closes the gap
- reorder and sync rewrite all positions in one transaction
"""

import logging
import re
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agenthub.db import ApplicationQuestion, Opportunity, atomic
from agenthub.errors import NotFound, StorageFailure, ValidationFailed
from agenthub.utils.answers import CHOICE_TYPES, QUESTION_TYPES

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "question",
    "question_es",
    "type",
    "required",
    "options",
    "placeholder",
    "placeholder_es",
    "validation",
)
NON_NULLABLE_FIELDS = ("question", "type", "required")

# Retries when a concurrent writer took the same order first
CREATE_ATTEMPTS = 3


def _get_opportunity(db: Session, opportunity_id: str, lock: bool = False) -> Opportunity:
    query = db.query(Opportunity).filter(Opportunity.id == opportunity_id)
    if lock:
        # Serializes order assignment per opportunity on databases that support it
        query = query.with_for_update()
    opportunity = query.first()
    if not opportunity:
        raise NotFound("Opportunity not found")
    return opportunity


def _siblings(db: Session, opportunity_id: str) -> list[ApplicationQuestion]:
    return (
        db.query(ApplicationQuestion)
        .filter(ApplicationQuestion.opportunity_id == opportunity_id)
        .order_by(ApplicationQuestion.order)
        .all()
    )


def _renumber(db: Session, questions: list[ApplicationQuestion]) -> None:
    """Assign orders 1..N following list position.

    Rows pass through negative placeholders first so no intermediate state
    collides with the (opportunity_id, order) unique constraint.
    """
    for i, q in enumerate(questions):
        q.order = -(i + 1)
    db.flush()
    for i, q in enumerate(questions):
        q.order = i + 1
    db.flush()


def _clean_fields(fields: dict, creating: bool = False) -> dict:
    """Keep editable fields; blank optional values clear the field."""
    cleaned = {}
    for key, value in fields.items():
        if key not in EDITABLE_FIELDS:
            continue
        if key in NON_NULLABLE_FIELDS:
            if value is None:
                raise ValidationFailed(f"'{key}' cannot be cleared")
        elif value in ("", [], {}):
            value = None
        cleaned[key] = value

    if "question" in cleaned and not str(cleaned["question"]).strip():
        raise ValidationFailed("Question text is required")
    if creating:
        if "question" not in cleaned:
            raise ValidationFailed("Question text is required")
        cleaned.setdefault("type", "text")
        cleaned.setdefault("required", False)
    return cleaned


def _check_shape(question_type: str, options: list | None, validation: dict | None = None) -> None:
    if question_type not in QUESTION_TYPES:
        raise ValidationFailed(f"Unknown question type '{question_type}'")
    if question_type in CHOICE_TYPES and not options:
        raise ValidationFailed(f"'{question_type}' questions need at least one option")
    pattern = (validation or {}).get("pattern")
    if pattern:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValidationFailed(f"Invalid validation pattern: {e}") from None


def list_questions(db: Session, opportunity_id: str) -> list[ApplicationQuestion]:
    """Questions of an opportunity, ascending by order. Empty if there are none."""
    return _siblings(db, opportunity_id)


def get_question(db: Session, question_id: str) -> ApplicationQuestion:
    question = db.query(ApplicationQuestion).filter(ApplicationQuestion.id == question_id).first()
    if not question:
        raise NotFound("Question not found")
    return question


def create_question(db: Session, opportunity_id: str, draft: dict) -> ApplicationQuestion:
    """Create a question, appending unless ``draft['order']`` asks for a position.

    An explicit order is clamped to 1..N+1 and shifts the questions at or
    after that position down by one.
    """
    fields = _clean_fields(draft, creating=True)
    _check_shape(fields["type"], fields.get("options"), fields.get("validation"))
    position = draft.get("order")

    for attempt in range(1, CREATE_ATTEMPTS + 1):
        try:
            with atomic(db):
                _get_opportunity(db, opportunity_id, lock=True)
                siblings = _siblings(db, opportunity_id)
                next_order = siblings[-1].order + 1 if siblings else 1
                question = ApplicationQuestion(opportunity_id=opportunity_id, order=next_order, **fields)
                db.add(question)
                if position is not None and position < next_order:
                    siblings.insert(max(position, 1) - 1, question)
                    _renumber(db, siblings)
            db.refresh(question)
            logger.info(f"[{opportunity_id}] Created question {question.id} at order {question.order}")
            return question
        except IntegrityError as e:
            logger.warning(f"[{opportunity_id}] Question order conflict (attempt {attempt}): {e}")

    raise StorageFailure("Could not save the question, please try again")


def update_question(db: Session, question_id: str, changes: dict) -> ApplicationQuestion:
    """Apply only the provided fields. An ``order`` moves the question."""
    question = get_question(db, question_id)
    fields = _clean_fields(changes)
    if "order" in changes and changes["order"] is None:
        raise ValidationFailed("'order' cannot be cleared")
    position = changes.get("order")

    _check_shape(
        fields.get("type", question.type),
        fields.get("options", question.options),
        fields.get("validation", question.validation),
    )

    try:
        with atomic(db):
            for key, value in fields.items():
                setattr(question, key, value)
            if position is not None:
                _get_opportunity(db, question.opportunity_id, lock=True)
                siblings = [q for q in _siblings(db, question.opportunity_id) if q.id != question.id]
                index = min(max(position, 1), len(siblings) + 1) - 1
                siblings.insert(index, question)
                _renumber(db, siblings)
            question.updated_at = datetime.now(UTC)
    except IntegrityError as e:
        logger.warning(f"[{question_id}] Question order conflict on update: {e}")
        raise StorageFailure("Could not save the question, please try again") from e

    db.refresh(question)
    return question


def delete_question(db: Session, question_id: str) -> None:
    """Delete a question and close the gap it leaves."""
    question = get_question(db, question_id)
    opportunity_id = question.opportunity_id

    try:
        with atomic(db):
            _get_opportunity(db, opportunity_id, lock=True)
            db.delete(question)
            db.flush()
            _renumber(db, _siblings(db, opportunity_id))
    except IntegrityError as e:
        logger.warning(f"[{question_id}] Question order conflict on delete: {e}")
        raise StorageFailure("Could not delete the question, please try again") from e

    logger.info(f"[{opportunity_id}] Deleted question {question_id}")


def reorder_questions(db: Session, opportunity_id: str, items: list[dict]) -> list[ApplicationQuestion]:
    """Apply ``[{id, order}]`` to the named questions and return the new order.

    The resulting orders, including questions not named, must be exactly 1..N.
    """
    try:
        with atomic(db):
            _get_opportunity(db, opportunity_id, lock=True)
            siblings = _siblings(db, opportunity_id)
            target = {q.id: q.order for q in siblings}
            seen: set[str] = set()

            for item in items:
                question_id, order = item["id"], item["order"]
                if question_id not in target:
                    raise NotFound(f"Question {question_id} not found on this opportunity")
                if question_id in seen:
                    raise ValidationFailed(f"Question {question_id} listed more than once", question_id=question_id)
                seen.add(question_id)
                target[question_id] = order

            if sorted(target.values()) != list(range(1, len(siblings) + 1)):
                raise ValidationFailed("Question orders must be exactly 1..N with no gaps or duplicates")

            _renumber(db, sorted(siblings, key=lambda q: target[q.id]))
    except IntegrityError as e:
        logger.warning(f"[{opportunity_id}] Question order conflict on reorder: {e}")
        raise StorageFailure("Could not reorder the questions, please try again") from e

    return _siblings(db, opportunity_id)


def sync_questions(db: Session, opportunity_id: str, desired: list[dict]) -> list[ApplicationQuestion]:
    """Make the question set match ``desired`` in one transaction.

    Items with an ``id`` update that question, items without one are created,
    and questions missing from the list are deleted. List position is order.
    """
    try:
        with atomic(db):
            _get_opportunity(db, opportunity_id, lock=True)
            siblings = _siblings(db, opportunity_id)
            by_id = {q.id: q for q in siblings}
            seen: set[str] = set()
            final: list[ApplicationQuestion] = []

            for item in desired:
                question_id = item.get("id")
                if question_id is None:
                    fields = _clean_fields(item, creating=True)
                    _check_shape(fields["type"], fields.get("options"), fields.get("validation"))
                    question = ApplicationQuestion(opportunity_id=opportunity_id, order=0, **fields)
                    db.add(question)
                else:
                    if question_id not in by_id:
                        raise NotFound(f"Question {question_id} not found on this opportunity")
                    if question_id in seen:
                        raise ValidationFailed(f"Question {question_id} listed more than once", question_id=question_id)
                    seen.add(question_id)
                    question = by_id[question_id]
                    fields = _clean_fields(item)
                    _check_shape(
                        fields.get("type", question.type),
                        fields.get("options", question.options),
                        fields.get("validation", question.validation),
                    )
                    for key, value in fields.items():
                        setattr(question, key, value)
                    question.updated_at = datetime.now(UTC)
                final.append(question)

            # Placeholders keep inserts and updates clear of rows still being deleted
            for i, question in enumerate(final):
                question.order = -(i + 1)
            removed = [q for q in siblings if q.id not in seen]
            for question in removed:
                db.delete(question)
            db.flush()
            _renumber(db, final)
    except IntegrityError as e:
        logger.warning(f"[{opportunity_id}] Question order conflict on sync: {e}")
        raise StorageFailure("Could not save the questions, please try again") from e

    logger.info(f"[{opportunity_id}] Synced questions: {len(final)} kept/created, {len(removed)} deleted")
    return _siblings(db, opportunity_id)
