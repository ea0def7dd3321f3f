"""initial_schema

Revision ID: 4f1a2b9c7d10
Revises:
Create Date: 2026-10-19 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1a2b9c7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all application tables."""
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('username', sa.String(50), nullable=True, unique=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('middle_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('sex', sa.String(20), nullable=True),
        sa.Column('date_of_birth', sa.Date, nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='agent'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'agents',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id'), unique=True, nullable=False),
        sa.Column('pipeline_status', sa.String(30), nullable=False, server_default='applied'),
        sa.Column('preferred_language', sa.String(2), nullable=False, server_default='en'),
        sa.Column('timezone', sa.String(64), nullable=False, server_default='America/New_York'),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'opportunities',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('client', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('requirements', sa.JSON, nullable=True),
        sa.Column('compensation', sa.JSON, nullable=True),
        sa.Column('schedule', sa.JSON, nullable=True),
        sa.Column('training', sa.JSON, nullable=True),
        sa.Column('tags', sa.JSON, nullable=False),
        sa.Column('max_agents', sa.Integer, nullable=False, server_default='50'),
        sa.Column('current_agents', sa.Integer, nullable=False, server_default='0'),
        sa.Column('open_positions', sa.Integer, nullable=False, server_default='50'),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'application_questions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('opportunity_id', sa.String(36), sa.ForeignKey('opportunities.id'), nullable=False, index=True),
        sa.Column('question', sa.Text, nullable=False),
        sa.Column('question_es', sa.Text, nullable=True),
        sa.Column('type', sa.String(20), nullable=False, server_default='text'),
        sa.Column('required', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('order', sa.Integer, nullable=False),
        sa.Column('options', sa.JSON, nullable=True),
        sa.Column('placeholder', sa.Text, nullable=True),
        sa.Column('placeholder_es', sa.Text, nullable=True),
        sa.Column('validation', sa.JSON, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
        sa.UniqueConstraint('opportunity_id', 'order', name='uq_question_order'),
    )

    op.create_table(
        'applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('agent_id', sa.String(36), sa.ForeignKey('agents.id'), nullable=False, index=True),
        sa.Column('opportunity_id', sa.String(36), sa.ForeignKey('opportunities.id'), nullable=False, index=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('submitted_at', sa.DateTime, nullable=False),
        sa.Column('reviewed_at', sa.DateTime, nullable=True),
        sa.Column('reviewed_by', sa.String(36), nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('confirmation_email_sent', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('confirmation_email_sent_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('agent_id', 'opportunity_id', name='uq_application_agent_opportunity'),
    )

    op.create_table(
        'application_answers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('application_id', sa.String(36), sa.ForeignKey('applications.id'), nullable=False, index=True),
        sa.Column(
            'question_id',
            sa.String(36),
            sa.ForeignKey('application_questions.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('kind', sa.String(20), nullable=False),
        sa.Column('value', sa.JSON, nullable=False),
        sa.Column('question_text', sa.Text, nullable=False, server_default=''),
        sa.Column('position', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('agent_id', sa.String(36), sa.ForeignKey('agents.id'), nullable=False, index=True),
        sa.Column('type', sa.String(30), nullable=False, server_default='system'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text, nullable=False),
        sa.Column('read', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('action_url', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('agent_id', sa.String(36), sa.ForeignKey('agents.id'), nullable=False, index=True),
        sa.Column('type', sa.String(20), nullable=False, server_default='in_app'),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('read', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('sent_at', sa.DateTime, nullable=False),
        sa.Column('read_at', sa.DateTime, nullable=True),
        sa.Column('metadata', sa.JSON, nullable=True),
    )

    op.create_table(
        'email_logs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('to', sa.String(255), nullable=False),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('template', sa.String(50), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('error', sa.Text, nullable=True),
        sa.Column('metadata', sa.JSON, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('sent_at', sa.DateTime, nullable=True),
    )


def downgrade() -> None:
    """Drop all application tables."""
    op.drop_table('email_logs')
    op.drop_table('messages')
    op.drop_table('notifications')
    op.drop_table('application_answers')
    op.drop_table('applications')
    op.drop_table('application_questions')
    op.drop_table('opportunities')
    op.drop_table('agents')
    op.drop_table('profiles')
