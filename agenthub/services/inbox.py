"""Agent inbox: notifications and messages with one-way read state."""

from datetime import UTC, datetime

from sqlalchemy.orm import Session

from agenthub.db import Message, Notification, atomic
from agenthub.errors import NotFound


def list_notifications(db: Session, agent_id: str) -> list[Notification]:
    """Notifications for an agent, newest first."""
    return (
        db.query(Notification)
        .filter(Notification.agent_id == agent_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )


def push_notification(
    db: Session,
    agent_id: str,
    title: str,
    message: str,
    type: str = "system",
    action_url: str | None = None,
) -> Notification:
    """Append a notification. The caller owns the transaction."""
    notification = Notification(agent_id=agent_id, type=type, title=title, message=message, action_url=action_url)
    db.add(notification)
    return notification


def mark_notification_read(db: Session, notification_id: str, agent_id: str | None = None) -> Notification:
    """Mark read. Already-read notifications are returned untouched."""
    query = db.query(Notification).filter(Notification.id == notification_id)
    if agent_id is not None:
        query = query.filter(Notification.agent_id == agent_id)
    notification = query.first()
    if not notification:
        raise NotFound("Notification not found")

    if not notification.read:
        with atomic(db):
            notification.read = True
        db.refresh(notification)
    return notification


def list_messages(db: Session, agent_id: str) -> list[Message]:
    """Messages for an agent, newest first."""
    return (
        db.query(Message)
        .filter(Message.agent_id == agent_id)
        .order_by(Message.sent_at.desc(), Message.id.desc())
        .all()
    )


def record_message(
    db: Session,
    agent_id: str,
    subject: str,
    content: str,
    type: str = "in_app",
    extra_data: dict | None = None,
) -> Message:
    """Append a message. The caller owns the transaction."""
    message = Message(agent_id=agent_id, type=type, subject=subject, content=content, extra_data=extra_data)
    db.add(message)
    return message


def mark_message_read(db: Session, message_id: str, agent_id: str | None = None) -> Message:
    """Mark read and stamp ``read_at`` on the first transition only."""
    query = db.query(Message).filter(Message.id == message_id)
    if agent_id is not None:
        query = query.filter(Message.agent_id == agent_id)
    message = query.first()
    if not message:
        raise NotFound("Message not found")

    if not message.read:
        with atomic(db):
            message.read = True
            message.read_at = datetime.now(UTC)
        db.refresh(message)
    return message


def unread_count(items: list[Notification] | list[Message]) -> int:
    return sum(1 for item in items if not item.read)
