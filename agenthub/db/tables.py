"""Database table models."""

import uuid
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agenthub.db.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Profile(Base):
    """Account profile for agents and staff."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    username: Mapped[str | None] = mapped_column(String(50), unique=True, default=None)
    first_name: Mapped[str] = mapped_column(String(100), default="")
    middle_name: Mapped[str | None] = mapped_column(String(100), default=None)
    last_name: Mapped[str] = mapped_column(String(100), default="")
    phone: Mapped[str | None] = mapped_column(String(30), default=None)
    sex: Mapped[str | None] = mapped_column(String(20), default=None)
    date_of_birth: Mapped[date | None] = mapped_column(Date, default=None)
    role: Mapped[str] = mapped_column(String(20), default="agent")  # agent/admin/recruiter
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    agent: Mapped["Agent | None"] = relationship(back_populates="user", uselist=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Agent(Base):
    """Independent contractor record attached to an agent profile."""

    __tablename__ = "agents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"), unique=True)
    pipeline_status: Mapped[str] = mapped_column(String(30), default="applied")
    preferred_language: Mapped[str] = mapped_column(String(2), default="en")
    timezone: Mapped[str] = mapped_column(String(64), default="America/New_York")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    user: Mapped["Profile"] = relationship(back_populates="agent")
    applications: Mapped[list["Application"]] = relationship(back_populates="agent")


class Opportunity(Base):
    """A job/engagement posting agents apply to."""

    __tablename__ = "opportunities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    client: Mapped[str] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(String(20), default="draft")  # draft/active/paused/closed
    category: Mapped[str | None] = mapped_column(String(100), default=None)
    requirements: Mapped[dict | None] = mapped_column(JSON, default=None)
    compensation: Mapped[dict | None] = mapped_column(JSON, default=None)
    schedule: Mapped[dict | None] = mapped_column(JSON, default=None)
    training: Mapped[dict | None] = mapped_column(JSON, default=None)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    max_agents: Mapped[int] = mapped_column(Integer, default=50)
    current_agents: Mapped[int] = mapped_column(Integer, default=0)
    open_positions: Mapped[int] = mapped_column(Integer, default=50)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    questions: Mapped[list["ApplicationQuestion"]] = relationship(
        back_populates="opportunity", order_by="ApplicationQuestion.order"
    )


class ApplicationQuestion(Base):
    """One item of an opportunity's ordered application form."""

    __tablename__ = "application_questions"
    __table_args__ = (UniqueConstraint("opportunity_id", "order", name="uq_question_order"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    opportunity_id: Mapped[str] = mapped_column(ForeignKey("opportunities.id"), index=True)
    question: Mapped[str] = mapped_column(Text)
    question_es: Mapped[str | None] = mapped_column(Text, default=None)
    type: Mapped[str] = mapped_column(String(20), default="text")
    required: Mapped[bool] = mapped_column(Boolean, default=False)
    order: Mapped[int] = mapped_column(Integer)
    options: Mapped[list | None] = mapped_column(JSON, default=None)  # [{value, label, labelEs}]
    placeholder: Mapped[str | None] = mapped_column(Text, default=None)
    placeholder_es: Mapped[str | None] = mapped_column(Text, default=None)
    validation: Mapped[dict | None] = mapped_column(JSON, default=None)  # {min, max, pattern, message}
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    opportunity: Mapped["Opportunity"] = relationship(back_populates="questions")


class Application(Base):
    """One agent's submission against one opportunity."""

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("agent_id", "opportunity_id", name="uq_application_agent_opportunity"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    agent_id: Mapped[str] = mapped_column(ForeignKey("agents.id"), index=True)
    opportunity_id: Mapped[str] = mapped_column(ForeignKey("opportunities.id"), index=True)
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending/reviewing/accepted/rejected
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)
    reviewed_by: Mapped[str | None] = mapped_column(String(36), default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    confirmation_email_sent: Mapped[bool] = mapped_column(Boolean, default=False)
    confirmation_email_sent_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)

    agent: Mapped["Agent"] = relationship(back_populates="applications")
    opportunity: Mapped["Opportunity"] = relationship()
    answers: Mapped[list["ApplicationAnswer"]] = relationship(
        back_populates="application", order_by="ApplicationAnswer.position"
    )


class ApplicationAnswer(Base):
    """An immutable answer; ``kind`` tags how ``value`` is shaped."""

    __tablename__ = "application_answers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    application_id: Mapped[str] = mapped_column(ForeignKey("applications.id"), index=True)
    question_id: Mapped[str | None] = mapped_column(
        ForeignKey("application_questions.id", ondelete="SET NULL"), nullable=True
    )
    kind: Mapped[str] = mapped_column(String(20))  # text/multi_text/choice/multi_choice/bool/number
    value: Mapped[Any] = mapped_column(JSON)
    question_text: Mapped[str] = mapped_column(Text, default="")
    position: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    application: Mapped["Application"] = relationship(back_populates="answers")
    question: Mapped["ApplicationQuestion | None"] = relationship()


class Notification(Base):
    """In-app notification shown in the agent inbox."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    agent_id: Mapped[str] = mapped_column(ForeignKey("agents.id"), index=True)
    type: Mapped[str] = mapped_column(String(30), default="system")
    title: Mapped[str] = mapped_column(String(255))
    message: Mapped[str] = mapped_column(Text)
    read: Mapped[bool] = mapped_column(Boolean, default=False)
    action_url: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Message(Base):
    """Message delivered to an agent (email, sms or in-app)."""

    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    agent_id: Mapped[str] = mapped_column(ForeignKey("agents.id"), index=True)
    type: Mapped[str] = mapped_column(String(20), default="in_app")
    subject: Mapped[str] = mapped_column(String(255))
    content: Mapped[str] = mapped_column(Text)
    read: Mapped[bool] = mapped_column(Boolean, default=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    read_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)
    extra_data: Mapped[dict | None] = mapped_column("metadata", JSON, default=None)


class EmailLog(Base):
    """Record of every outbound email attempt."""

    __tablename__ = "email_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    to: Mapped[str] = mapped_column(String(255))
    subject: Mapped[str] = mapped_column(String(255))
    template: Mapped[str] = mapped_column(String(50))
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending/sent/failed
    error: Mapped[str | None] = mapped_column(Text, default=None)
    extra_data: Mapped[dict | None] = mapped_column("metadata", JSON, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)
