"""Initial schema: users, admins, settings, form fields, submissions,
invitees, invitation/stage settings and the notification log.

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255)),
        sa.Column('role', sa.String(50)),
        *_timestamps(),
    )
    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_index('ix_admins_email', 'admins', ['email'])
    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('key', sa.String(128), nullable=False, unique=True),
        sa.Column('value', sa.Text()),
        *_timestamps(),
    )
    op.create_index('ix_settings_key', 'settings', ['key'])
    op.create_table(
        'form_fields',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('field_name', sa.String(120), nullable=False),
        sa.Column('label', sa.String(255), nullable=False),
        sa.Column('field_type', sa.String(20), nullable=False),
        sa.Column('placeholder', sa.String(255)),
        sa.Column('options', sa.JSON()),
        sa.Column('validation_rules', sa.JSON()),
        sa.Column('is_required', sa.Boolean()),
        sa.Column('display_order', sa.Integer()),
        sa.Column('stage', sa.Integer(), nullable=False),
        sa.Column('has_weight', sa.Boolean()),
        sa.Column('is_ai_calculated', sa.Boolean()),
        sa.Column('ai_prompt', sa.JSON()),
        sa.Column('question_title', sa.String(255)),
        *_timestamps(),
    )
    op.create_index('ix_form_fields_field_name', 'form_fields', ['field_name'])
    op.create_index('ix_form_fields_stage', 'form_fields', ['stage'])
    op.create_table(
        'form_submissions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_email', sa.String(254), nullable=False, unique=True),
        sa.Column('stage', sa.Integer(), nullable=False),
        sa.Column('data', sa.JSON()),
        sa.Column('data_stage_2', sa.JSON()),
        sa.Column('data_stage_3', sa.JSON()),
        sa.Column('ai_evaluations', sa.JSON()),
        sa.Column('ai_evaluations_stage_2', sa.JSON()),
        sa.Column('ai_evaluations_stage_3', sa.JSON()),
        sa.Column('filtering_decision', sa.String(20), nullable=False, server_default='auto'),
        sa.Column('channel', sa.String(100)),
        sa.Column('note', sa.Text()),
        *_timestamps(),
    )
    op.create_index('ix_form_submissions_user_email', 'form_submissions', ['user_email'])
    op.create_index('ix_form_submissions_stage', 'form_submissions', ['stage'])
    op.create_index('ix_form_submissions_filtering_decision', 'form_submissions', ['filtering_decision'])
    op.create_index('ix_form_submissions_channel', 'form_submissions', ['channel'])
    op.create_table(
        'invitees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('email', sa.String(254)),
        sa.Column('phone', sa.String(40)),
        sa.Column('city', sa.String(120)),
        sa.Column('gender', sa.String(20)),
        sa.Column('channel', sa.String(100)),
        sa.Column('note', sa.Text()),
        sa.Column('email_sent', sa.Boolean()),
        sa.Column('whatsapp_sent', sa.Boolean()),
        sa.Column('invited_at', sa.DateTime()),
        *_timestamps(),
    )
    op.create_index('ix_invitees_email', 'invitees', ['email'])
    op.create_table(
        'invitation_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email_subject', sa.String(255)),
        sa.Column('email_content', sa.Text()),
        sa.Column('whatsapp_template', sa.String(120)),
        sa.Column('whatsapp_image', sa.String(512)),
        sa.Column('whatsapp_param_2', sa.String(255)),
        sa.Column('whatsapp_url_button', sa.String(512)),
        *_timestamps(),
    )
    op.create_table(
        'stage_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('stage', sa.Integer(), nullable=False, unique=True),
        sa.Column('status', sa.String(20)),
        sa.Column('welcome_message', sa.Text()),
        sa.Column('user_agreement', sa.Text()),
        sa.Column('success_message', sa.Text()),
        sa.Column('pre_stage_messages', sa.JSON()),
        sa.Column('post_stage_messages', sa.JSON()),
        *_timestamps(),
    )
    op.create_index('ix_stage_settings_stage', 'stage_settings', ['stage'])
    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('kind', sa.String(20)),
        sa.Column('sent_to', sa.String(255)),
        sa.Column('subject', sa.String(255)),
        sa.Column('template', sa.String(120)),
        sa.Column('group_name', sa.String(50)),
        sa.Column('status', sa.String(20)),
        sa.Column('error', sa.Text()),
        sa.Column('sent_at', sa.DateTime()),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in ('notifications', 'stage_settings', 'invitation_settings', 'invitees',
                  'form_submissions', 'form_fields', 'settings', 'admins', 'users'):
        op.drop_table(table)
