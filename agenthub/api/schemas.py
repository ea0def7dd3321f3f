"""API request/response schemas.

Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Question schemas
class QuestionOption(CamelModel):
    value: str
    label: str
    label_es: str | None = None


class QuestionValidation(CamelModel):
    min: int | float | None = None
    max: int | float | None = None
    pattern: str | None = None
    message: str | None = None


class QuestionCreate(CamelModel):
    question: str
    question_es: str | None = None
    type: str = "text"
    required: bool = False
    order: int | None = Field(default=None, description="Insert position; appends when omitted")
    options: list[QuestionOption] | None = None
    placeholder: str | None = None
    placeholder_es: str | None = None
    validation: QuestionValidation | None = None


class QuestionUpdate(CamelModel):
    """Partial update: only fields present in the body are applied."""

    question: str | None = None
    question_es: str | None = None
    type: str | None = None
    required: bool | None = None
    order: int | None = None
    options: list[QuestionOption] | None = None
    placeholder: str | None = None
    placeholder_es: str | None = None
    validation: QuestionValidation | None = None


class QuestionSyncItem(QuestionUpdate):
    id: str | None = None


class QuestionOrder(CamelModel):
    id: str
    order: int


class ReorderRequest(CamelModel):
    questions: list[QuestionOrder]


class SyncRequest(CamelModel):
    questions: list[QuestionSyncItem]


class QuestionResponse(CamelModel):
    id: str
    opportunity_id: str
    question: str
    question_es: str | None
    type: str
    required: bool
    order: int
    options: list[dict] | None
    placeholder: str | None
    placeholder_es: str | None
    validation: dict | None


class QuestionListResponse(CamelModel):
    questions: list[QuestionResponse]


# Opportunity schemas
class OpportunityCreate(CamelModel):
    name: str
    client: str
    description: str = ""
    status: str = "draft"
    category: str | None = None
    requirements: dict | None = None
    compensation: dict | None = None
    schedule: dict | None = None
    training: dict | None = None
    tags: list[str] = []
    max_agents: int = 50
    current_agents: int = 0
    open_positions: int = 50


class OpportunityUpdate(CamelModel):
    name: str | None = None
    client: str | None = None
    description: str | None = None
    status: str | None = None
    category: str | None = None
    requirements: dict | None = None
    compensation: dict | None = None
    schedule: dict | None = None
    training: dict | None = None
    tags: list[str] | None = None
    max_agents: int | None = None
    current_agents: int | None = None
    open_positions: int | None = None


class OpportunityResponse(CamelModel):
    id: str
    name: str
    description: str
    client: str
    status: str
    category: str | None
    requirements: dict | None
    compensation: dict | None
    schedule: dict | None
    training: dict | None
    tags: list[str]
    max_agents: int
    current_agents: int
    open_positions: int
    created_at: datetime
    updated_at: datetime


class OpportunityDetailResponse(OpportunityResponse):
    questions: list[QuestionResponse] = []


class OpportunityListResponse(CamelModel):
    opportunities: list[OpportunityDetailResponse]


# Application schemas
class AnswerInput(CamelModel):
    question_id: str
    value: Any = None


class ApplicationCreate(CamelModel):
    opportunity_id: str
    agent_id: str | None = Field(default=None, description="Defaults to the caller's agent record")
    answers: list[AnswerInput] = []


class StatusUpdate(CamelModel):
    status: str
    notes: str | None = None


class AnswerQuestionResponse(CamelModel):
    id: str
    question: str
    question_es: str | None
    type: str


class AnswerResponse(CamelModel):
    id: str
    question_id: str | None
    kind: str
    value: Any
    question_text: str
    question: AnswerQuestionResponse | None = None


class ApplicantProfileResponse(CamelModel):
    first_name: str
    last_name: str
    email: str


class ApplicantResponse(CamelModel):
    id: str
    user: ApplicantProfileResponse


class ApplicationOpportunityResponse(CamelModel):
    id: str
    name: str
    client: str
    status: str


class ApplicationResponse(CamelModel):
    id: str
    agent_id: str
    opportunity_id: str
    status: str
    submitted_at: datetime
    reviewed_at: datetime | None
    reviewed_by: str | None
    notes: str | None
    confirmation_email_sent: bool
    confirmation_email_sent_at: datetime | None
    opportunity: ApplicationOpportunityResponse | None = None
    agent: ApplicantResponse | None = None
    answers: list[AnswerResponse] = []


class ApplicationListResponse(CamelModel):
    applications: list[ApplicationResponse]


# Inbox schemas
class NotificationResponse(CamelModel):
    id: str
    type: str
    title: str
    message: str
    read: bool
    action_url: str | None
    created_at: datetime


class NotificationListResponse(CamelModel):
    notifications: list[NotificationResponse]
    unread_count: int


class MessageResponse(CamelModel):
    id: str
    type: str
    subject: str
    content: str
    read: bool
    sent_at: datetime
    read_at: datetime | None
    metadata: dict | None = Field(default=None, validation_alias="extra_data")


class MessageListResponse(CamelModel):
    messages: list[MessageResponse]
    unread_count: int


# Profile schemas
class AgentResponse(CamelModel):
    id: str
    pipeline_status: str
    preferred_language: str
    timezone: str


class ProfileResponse(CamelModel):
    id: str
    email: str
    username: str | None
    first_name: str
    middle_name: str | None
    last_name: str
    phone: str | None
    sex: str | None
    date_of_birth: date | None
    role: str
    agent: AgentResponse | None = None


class ProfileUpdate(CamelModel):
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    sex: str | None = None
    date_of_birth: date | str | None = None
    phone: str | None = None
    username: str | None = None


class UsernameLookup(CamelModel):
    username: str


class UsernameLookupResponse(CamelModel):
    email: str
