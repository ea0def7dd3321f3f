"""Notification and message endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agenthub.api.deps import Identity, require_agent
from agenthub.api.schemas import (
    MessageListResponse,
    MessageResponse,
    NotificationListResponse,
    NotificationResponse,
)
from agenthub.db import get_db
from agenthub.services import inbox

router = APIRouter()


@router.get("/notifications", response_model=NotificationListResponse)
def list_notifications(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_agent),
):
    """List the caller's notifications, newest first."""
    notifications = inbox.list_notifications(db, identity.agent_id)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=inbox.unread_count(notifications),
    )


@router.post("/notifications/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_agent),
):
    """Mark a notification read. Repeating this is harmless."""
    notification = inbox.mark_notification_read(db, notification_id, agent_id=identity.agent_id)
    return NotificationResponse.model_validate(notification)


@router.get("/messages", response_model=MessageListResponse)
def list_messages(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_agent),
):
    """List the caller's messages, newest first."""
    messages = inbox.list_messages(db, identity.agent_id)
    return MessageListResponse(
        messages=[MessageResponse.model_validate(m) for m in messages],
        unread_count=inbox.unread_count(messages),
    )


@router.post("/messages/{message_id}/read", response_model=MessageResponse)
def mark_message_read(
    message_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_agent),
):
    """Mark a message read."""
    message = inbox.mark_message_read(db, message_id, agent_id=identity.agent_id)
    return MessageResponse.model_validate(message)
