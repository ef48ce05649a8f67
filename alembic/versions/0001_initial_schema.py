"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-10-01 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
	return [
		sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
	]


def upgrade() -> None:
	"""Upgrade schema."""
	op.create_table(
		'users',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('email', sa.String(), nullable=False),
		sa.Column('name', sa.String(), nullable=False),
		sa.Column('avatar_url', sa.String(), nullable=True),
		sa.Column('hashed_password', sa.String(), nullable=False),
		sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
		*_timestamps(),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_users_id', 'users', ['id'], unique=False)
	op.create_index('ix_users_email', 'users', ['email'], unique=True)

	op.create_table(
		'revoked_tokens',
		sa.Column('jti', sa.String(length=64), nullable=False),
		sa.Column('user_id', sa.Integer(), nullable=False),
		sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
		sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
		sa.PrimaryKeyConstraint('jti')
	)
	op.create_index('ix_revoked_tokens_user_id', 'revoked_tokens', ['user_id'], unique=False)

	op.create_table(
		'connection_codes',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('code', sa.String(length=16), nullable=False),
		sa.Column('created_by', sa.Integer(), nullable=False),
		sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
		sa.Column('used_by', sa.Integer(), nullable=True),
		sa.Column('used_at', sa.DateTime(timezone=True), nullable=True),
		sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='CASCADE'),
		sa.ForeignKeyConstraint(['used_by'], ['users.id'], ondelete='SET NULL'),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_connection_codes_id', 'connection_codes', ['id'], unique=False)
	op.create_index('ix_connection_codes_code', 'connection_codes', ['code'], unique=True)
	op.create_index('ix_connection_codes_created_by', 'connection_codes', ['created_by'], unique=False)

	op.create_table(
		'shared_connections',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('user_id_1', sa.Integer(), nullable=False),
		sa.Column('user_id_2', sa.Integer(), nullable=False),
		sa.Column('user_1_accepted', sa.Boolean(), nullable=False, server_default=sa.false()),
		sa.Column('user_2_accepted', sa.Boolean(), nullable=False, server_default=sa.false()),
		sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
		*_timestamps(),
		sa.ForeignKeyConstraint(['user_id_1'], ['users.id'], ondelete='CASCADE'),
		sa.ForeignKeyConstraint(['user_id_2'], ['users.id'], ondelete='CASCADE'),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_shared_connections_id', 'shared_connections', ['id'], unique=False)
	op.create_index('ix_shared_connections_user_id_1', 'shared_connections', ['user_id_1'], unique=True)
	op.create_index('ix_shared_connections_user_id_2', 'shared_connections', ['user_id_2'], unique=True)
	op.create_index('ix_shared_connections_status', 'shared_connections', ['status'], unique=False)

	op.create_table(
		'bills',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('created_by', sa.Integer(), nullable=False),
		sa.Column('shared_connection_id', sa.Integer(), nullable=True),
		sa.Column('name', sa.String(length=100), nullable=False),
		sa.Column('amount', sa.Numeric(12, 2), nullable=False),
		sa.Column('due_date', sa.Date(), nullable=False),
		sa.Column('frequency', sa.String(length=16), nullable=False, server_default='one-time'),
		sa.Column('notes', sa.Text(), nullable=True),
		sa.Column('paid_by_user_1', sa.Boolean(), nullable=False, server_default=sa.false()),
		sa.Column('paid_by_user_2', sa.Boolean(), nullable=False, server_default=sa.false()),
		*_timestamps(),
		sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='CASCADE'),
		sa.ForeignKeyConstraint(['shared_connection_id'], ['shared_connections.id'], ondelete='SET NULL'),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_bills_id', 'bills', ['id'], unique=False)
	op.create_index('ix_bills_created_by', 'bills', ['created_by'], unique=False)
	op.create_index('ix_bills_shared_connection_id', 'bills', ['shared_connection_id'], unique=False)
	op.create_index('ix_bills_due_date', 'bills', ['due_date'], unique=False)

	op.create_table(
		'bill_activities',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('bill_id', sa.Integer(), nullable=False),
		sa.Column('user_id', sa.Integer(), nullable=False),
		sa.Column('action', sa.String(length=16), nullable=False),
		sa.Column('details', sa.JSON(), nullable=False),
		sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_bill_activities_id', 'bill_activities', ['id'], unique=False)
	op.create_index('ix_bill_activities_bill_id', 'bill_activities', ['bill_id'], unique=False)
	op.create_index('ix_bill_activities_user_id', 'bill_activities', ['user_id'], unique=False)
	op.create_index('ix_bill_activities_created_at', 'bill_activities', ['created_at'], unique=False)

	op.create_table(
		'bill_splits',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('bill_id', sa.Integer(), nullable=False),
		sa.Column('shared_connection_id', sa.Integer(), nullable=False),
		sa.Column('user_1_percentage', sa.Numeric(5, 2), nullable=False),
		sa.Column('user_2_percentage', sa.Numeric(5, 2), nullable=False),
		*_timestamps(),
		sa.ForeignKeyConstraint(['bill_id'], ['bills.id'], ondelete='CASCADE'),
		sa.ForeignKeyConstraint(['shared_connection_id'], ['shared_connections.id'], ondelete='CASCADE'),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_bill_splits_id', 'bill_splits', ['id'], unique=False)
	op.create_index('ix_bill_splits_bill_id', 'bill_splits', ['bill_id'], unique=True)
	op.create_index('ix_bill_splits_shared_connection_id', 'bill_splits', ['shared_connection_id'], unique=False)

	op.create_table(
		'notification_preferences',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('user_id', sa.Integer(), nullable=False),
		sa.Column('days_before_due', sa.JSON(), nullable=False),
		sa.Column('notify_on_paid', sa.Boolean(), nullable=False, server_default=sa.true()),
		sa.Column('notify_on_overdue', sa.Boolean(), nullable=False, server_default=sa.true()),
		*_timestamps(),
		sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_notification_preferences_id', 'notification_preferences', ['id'], unique=False)
	op.create_index('ix_notification_preferences_user_id', 'notification_preferences', ['user_id'], unique=True)

	op.create_table(
		'request_logs',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.Column('correlation_id', sa.String(length=64), nullable=False),
		sa.Column('method', sa.String(length=16), nullable=True),
		sa.Column('path_template', sa.String(length=512), nullable=True),
		sa.Column('raw_path', sa.String(length=512), nullable=True),
		sa.Column('status_code', sa.Integer(), nullable=True),
		sa.Column('duration_ms', sa.Integer(), nullable=False),
		sa.Column('client_ip', sa.String(length=64), nullable=True),
		sa.Column('user_agent', sa.String(length=256), nullable=True),
		sa.Column('auth_type', sa.String(length=16), nullable=True),
		sa.Column('user_id', sa.Integer(), nullable=True),
		sa.PrimaryKeyConstraint('id')
	)
	op.create_index('ix_request_logs_id', 'request_logs', ['id'], unique=False)
	op.create_index('ix_request_logs_created_at', 'request_logs', ['created_at'], unique=False)
	op.create_index('ix_request_logs_correlation_id', 'request_logs', ['correlation_id'], unique=False)
	op.create_index('ix_request_logs_path_template', 'request_logs', ['path_template'], unique=False)
	op.create_index('ix_request_logs_status_code', 'request_logs', ['status_code'], unique=False)
	op.create_index('ix_request_logs_user_id', 'request_logs', ['user_id'], unique=False)


def downgrade() -> None:
	"""Downgrade schema."""
	op.drop_table('request_logs')
	op.drop_table('notification_preferences')
	op.drop_table('bill_splits')
	op.drop_table('bill_activities')
	op.drop_table('bills')
	op.drop_table('shared_connections')
	op.drop_table('connection_codes')
	op.drop_table('revoked_tokens')
	op.drop_table('users')
