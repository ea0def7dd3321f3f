"""
Application submission and review.

Submission steps, each a hard precondition for the next:
1. Reject a second application for the same (agent, opportunity)
2. Load the opportunity and the agent
3. Validate answers against the opportunity's current questions
4. Store the application and its answers in one transaction
5. Best effort: confirmation email and inbox notification
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from agenthub.db import Agent, Application, ApplicationAnswer, ApplicationQuestion, Opportunity, atomic
from agenthub.errors import DuplicateApplication, NotFound, ValidationFailed
from agenthub.services import inbox
from agenthub.tools.email import send_application_confirmation, send_status_change_email
from agenthub.utils.answers import AnswerError, AnswerValue, coerce_answer, is_empty

logger = logging.getLogger(__name__)

APPLICATION_STATUSES = ("pending", "reviewing", "accepted", "rejected")

DUPLICATE_MESSAGE = "You have already applied to this opportunity"
REQUIRED_MESSAGE = "This field is required"


def validate_answers(
    questions: list[ApplicationQuestion], answers: list[dict]
) -> list[tuple[ApplicationQuestion, AnswerValue]]:
    """Check raw ``[{question_id, value}]`` against a question snapshot.

    Returns typed answers in question order, skipping empty optional ones.
    Raises ValidationFailed naming the first offending question and carrying
    every per-question error.
    """
    questions = sorted(questions, key=lambda q: q.order)
    by_id = {q.id: q for q in questions}
    provided: dict[str, object] = {}
    errors: dict[str, str] = {}

    for answer in answers:
        question_id = answer.get("question_id")
        if question_id not in by_id:
            errors[str(question_id)] = "Unknown question"
        elif question_id in provided:
            errors[question_id] = "Answered more than once"
        else:
            provided[question_id] = answer.get("value")

    typed = []
    for question in questions:
        value = provided.get(question.id)
        if is_empty(value):
            if question.required:
                errors[question.id] = REQUIRED_MESSAGE
            continue
        try:
            typed.append((question, coerce_answer(question.type, value, question.options, question.validation)))
        except AnswerError as e:
            errors.setdefault(question.id, str(e))

    if errors:
        first = next((q.id for q in questions if q.id in errors), next(iter(errors)))
        if errors[first] == REQUIRED_MESSAGE:
            message = f"Answer required for question {first}"
        else:
            message = f"Invalid answer for question {first}: {errors[first]}"
        raise ValidationFailed(message, question_id=first, errors=errors)

    return typed


def submit_application(
    db: Session,
    agent_id: str,
    opportunity_id: str,
    answers: list[dict],
    send_confirmation: Callable[..., bool] = send_application_confirmation,
) -> Application:
    """Create a pending application with its answers."""
    existing = (
        db.query(Application)
        .filter(Application.agent_id == agent_id, Application.opportunity_id == opportunity_id)
        .first()
    )
    if existing:
        raise DuplicateApplication(DUPLICATE_MESSAGE)

    opportunity = db.query(Opportunity).filter(Opportunity.id == opportunity_id).first()
    agent = db.query(Agent).filter(Agent.id == agent_id).first()
    if not opportunity or not agent:
        raise NotFound("Opportunity or agent not found")

    typed = validate_answers(opportunity.questions, answers)

    application = Application(agent_id=agent_id, opportunity_id=opportunity_id, status="pending")
    for position, (question, answer) in enumerate(typed):
        application.answers.append(
            ApplicationAnswer(
                question_id=question.id,
                kind=answer.kind,
                value=answer.value,
                question_text=question.question,
                position=position,
            )
        )

    try:
        with atomic(db):
            db.add(application)
    except IntegrityError as e:
        # The unique constraint catches concurrent duplicates the check above missed
        logger.info(f"Duplicate application rejected on insert: agent={agent_id} opportunity={opportunity_id}")
        raise DuplicateApplication(DUPLICATE_MESSAGE) from e

    db.refresh(application)
    logger.info(f"[{application.id}] Application submitted: agent={agent_id} opportunity={opportunity_id}")

    _confirm_submission(db, application, agent, opportunity, send_confirmation)
    return application


def _confirm_submission(
    db: Session,
    application: Application,
    agent: Agent,
    opportunity: Opportunity,
    send_confirmation: Callable[..., bool],
) -> None:
    """Email and notify the agent. Failures are logged, never raised."""
    try:
        sent = send_confirmation(
            db,
            to=agent.user.email,
            agent_name=agent.user.full_name,
            opportunity_name=opportunity.name,
            application_id=application.id,
            client_name=opportunity.client,
        )
    except Exception:
        logger.exception(f"[{application.id}] Confirmation email failed")
        db.rollback()
        sent = False

    if sent:
        try:
            with atomic(db):
                application.confirmation_email_sent = True
                application.confirmation_email_sent_at = datetime.now(UTC)
                inbox.record_message(
                    db,
                    agent.id,
                    subject=f"Application Received: {opportunity.name}",
                    content=f"Your application to {opportunity.name} ({opportunity.client}) was received. "
                    f"Application ID: {application.id}",
                    type="email",
                    extra_data={"applicationId": application.id},
                )
        except Exception:
            logger.exception(f"[{application.id}] Could not record confirmation email")

    try:
        with atomic(db):
            inbox.push_notification(
                db,
                agent.id,
                title="Application submitted",
                message=f"Your application to {opportunity.name} is pending review.",
                type="status_change",
                action_url="/applications",
            )
    except Exception:
        logger.exception(f"[{application.id}] Could not add submission notification")

    db.refresh(application)


def _with_details(query):
    return query.options(
        selectinload(Application.opportunity),
        selectinload(Application.agent).selectinload(Agent.user),
        selectinload(Application.answers).selectinload(ApplicationAnswer.question),
    )


def list_applications(
    db: Session,
    agent_id: str | None = None,
    opportunity_id: str | None = None,
    status: str | None = None,
) -> list[Application]:
    """Applications matching the given filters, newest first."""
    query = _with_details(db.query(Application))
    if agent_id:
        query = query.filter(Application.agent_id == agent_id)
    if opportunity_id:
        query = query.filter(Application.opportunity_id == opportunity_id)
    if status:
        query = query.filter(Application.status == status)
    return query.order_by(Application.submitted_at.desc()).all()


def get_application(db: Session, application_id: str) -> Application:
    application = _with_details(db.query(Application)).filter(Application.id == application_id).first()
    if not application:
        raise NotFound("Application not found")
    return application


def update_status(
    db: Session,
    application_id: str,
    status: str,
    reviewer_id: str,
    notes: str | None = None,
    send_update: Callable[..., bool] = send_status_change_email,
) -> Application:
    """Move an application to a review status and tell the agent."""
    if status not in APPLICATION_STATUSES:
        raise ValidationFailed(f"Unknown application status '{status}'")

    application = get_application(db, application_id)
    old_status = application.status
    if old_status == status and notes is None:
        return application

    with atomic(db):
        application.status = status
        application.reviewed_at = datetime.now(UTC)
        application.reviewed_by = reviewer_id
        if notes is not None:
            application.notes = notes
    logger.info(f"[{application_id}] Status {old_status} -> {status} by {reviewer_id}")

    if old_status != status:
        agent, opportunity = application.agent, application.opportunity
        try:
            send_update(
                db,
                to=agent.user.email,
                agent_name=agent.user.full_name,
                opportunity_name=opportunity.name,
                old_status=old_status,
                new_status=status,
                application_id=application.id,
            )
        except Exception:
            logger.exception(f"[{application_id}] Status change email failed")
            db.rollback()

        try:
            with atomic(db):
                inbox.push_notification(
                    db,
                    agent.id,
                    title="Application status updated",
                    message=f"Your application to {opportunity.name} is now {status}.",
                    type="status_change",
                    action_url="/applications",
                )
        except Exception:
            logger.exception(f"[{application_id}] Could not add status notification")

    db.refresh(application)
    return application
