"""Database package."""

from agenthub.db.base import Base, atomic, get_db, init_db
from agenthub.db.tables import (
    Agent,
    Application,
    ApplicationAnswer,
    ApplicationQuestion,
    EmailLog,
    Message,
    Notification,
    Opportunity,
    Profile,
)

__all__ = [
    "Base",
    "atomic",
    "get_db",
    "init_db",
    "Profile",
    "Agent",
    "Opportunity",
    "ApplicationQuestion",
    "Application",
    "ApplicationAnswer",
    "Notification",
    "Message",
    "EmailLog",
]
