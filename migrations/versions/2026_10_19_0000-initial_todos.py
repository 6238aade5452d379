"""Create todos table

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

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
    Create the todos table and its expires_at index.

    Skipped when the table already exists (e.g. created by init_db on startup).
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'todos' not in existing_tables:
        op.create_table(
            'todos',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('title', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=False, server_default=''),
            sa.Column('expires_at', sa.DateTime(timezone=False), nullable=False),
            sa.Column('progress', sa.Float(), nullable=False, server_default='0'),
            sa.PrimaryKeyConstraint('id'),
            sqlite_autoincrement=True,
        )

        op.create_index(
            'ix_todos_expires_at',
            'todos',
            ['expires_at']
        )


def downgrade() -> None:
    """Drop the todos table."""
    op.drop_index('ix_todos_expires_at', table_name='todos')
    op.drop_table('todos')
