"""create_todos

Revision ID: 001_create_todos
Revises:
Create Date: 2024-10-21 18:02:11.481305

"""
from typing import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001_create_todos'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'todos',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id', name='pk_todos'),
    )
    op.create_index('ix_todos_created_at', 'todos', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_todos_created_at', table_name='todos')
    op.drop_table('todos')
