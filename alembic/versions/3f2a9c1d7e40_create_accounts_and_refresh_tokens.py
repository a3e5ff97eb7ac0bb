"""create_accounts_and_refresh_tokens

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the accounts and refresh_tokens tables."""
    op.create_table(
        'accounts',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('username', sa.Text(), nullable=False),
        sa.Column('password_hash', sa.Text(), server_default='', nullable=False),
        sa.Column('role', sa.Text(), server_default='USER', nullable=False),
        sa.Column('enabled', sa.Integer(), server_default='1', nullable=False),
        sa.Column('account_non_expired', sa.Integer(), server_default='1', nullable=False),
        sa.Column('account_non_locked', sa.Integer(), server_default='1', nullable=False),
        sa.Column('credentials_non_expired', sa.Integer(), server_default='1', nullable=False),
        sa.Column('is_verified', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )
    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('token', sa.Text(), nullable=False),
        sa.Column('account_id', sa.String(), nullable=False),
        sa.Column('expires_at', sa.Text(), nullable=False),
        sa.Column('created_at', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
    )
    op.create_index('idx_refresh_tokens_account_id', 'refresh_tokens', ['account_id'], unique=False)
    op.create_index('idx_refresh_tokens_expires_at', 'refresh_tokens', ['expires_at'], unique=False)


def downgrade() -> None:
    """Drop the refresh_tokens and accounts tables."""
    op.drop_index('idx_refresh_tokens_expires_at', table_name='refresh_tokens')
    op.drop_index('idx_refresh_tokens_account_id', table_name='refresh_tokens')
    op.drop_table('refresh_tokens')
    op.drop_table('accounts')
