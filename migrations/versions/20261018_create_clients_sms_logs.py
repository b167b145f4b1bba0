"""create clients and sms_logs tables

Revision ID: 20261018initial
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261018initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'clients',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('api_key', sa.String(64), nullable=False),
        sa.Column('api_secret_hash', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('rate_limit', sa.Integer(), nullable=False, server_default='100'),
        sa.Column('daily_limit', sa.Integer(), nullable=False, server_default='10000'),
        sa.Column('monthly_limit', sa.Integer(), nullable=False, server_default='300000'),
        sa.Column('daily_usage', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('monthly_usage', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_reset', sa.DateTime(), nullable=True),
        sa.Column('last_monthly_reset', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_clients_email', 'clients', ['email'], unique=True)
    op.create_index('ix_clients_api_key', 'clients', ['api_key'], unique=True)
    op.create_index('ix_clients_is_active', 'clients', ['is_active'])
    op.create_index('ix_clients_deleted_at', 'clients', ['deleted_at'])

    op.create_table(
        'sms_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('client_id', sa.Uuid(), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('recipient', sa.String(32), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('sender_id', sa.String(64), nullable=True),
        sa.Column('priority', sa.String(8), nullable=True),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('provider_status', sa.String(64), nullable=True),
        sa.Column('provider_message', sa.Text(), nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.String(512), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_sms_logs_client_id', 'sms_logs', ['client_id'])
    op.create_index('ix_sms_logs_status', 'sms_logs', ['status'])
    op.create_index('ix_sms_logs_created_at', 'sms_logs', ['created_at'])


def downgrade():
    op.drop_table('sms_logs')
    op.drop_table('clients')
