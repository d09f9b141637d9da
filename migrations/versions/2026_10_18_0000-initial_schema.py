"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - accounts table: Registered garages and their credentials
    - service_records table: Vehicle service entries owned by an account
    """
    # Tables may already exist when the app created them at startup
    bind = op.get_bind()
    inspector = inspect(bind)
    existing_tables = inspector.get_table_names()

    if 'accounts' not in existing_tables:
        op.create_table(
            'accounts',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('email', sa.String(length=320), nullable=False),
            sa.Column('password_hash', sa.String(length=128), nullable=False),
            sa.Column('garage_name', sa.String(length=255), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )

        op.create_index(
            'ix_accounts_email',
            'accounts',
            ['email'],
            unique=True
        )

    if 'service_records' not in existing_tables:
        op.create_table(
            'service_records',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('account_id', sa.Integer(), nullable=False),
            sa.Column('owner_name', sa.String(length=255), nullable=False),
            sa.Column('phone', sa.String(length=64), nullable=False),
            sa.Column('vehicle_number', sa.String(length=64), nullable=False),
            sa.Column('make', sa.String(length=100), nullable=False),
            sa.Column('model', sa.String(length=100), nullable=False),
            sa.Column('last_service_date', sa.Date(), nullable=False),
            sa.Column('next_service_date', sa.Date(), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(
                ['account_id'],
                ['accounts.id'],
                name='fk_service_records_account_id',
                ondelete='CASCADE'
            ),
            sa.PrimaryKeyConstraint('id'),
            sqlite_autoincrement=True
        )

        op.create_index(
            'ix_service_records_account_id',
            'service_records',
            ['account_id']
        )

        op.create_index(
            'ix_service_records_next_service_date',
            'service_records',
            ['next_service_date']
        )


def downgrade() -> None:
    """
    Drop all tables and indexes.
    """
    op.drop_index('ix_service_records_next_service_date', table_name='service_records')
    op.drop_index('ix_service_records_account_id', table_name='service_records')
    op.drop_table('service_records')

    op.drop_index('ix_accounts_email', table_name='accounts')
    op.drop_table('accounts')
