"""seed system action types

Revision ID: 8e4d2c6a0b57
Revises: 3c1f9a2b7d10
Create Date: 2025-06-02 00:10:00.000000

"""
from datetime import datetime, timezone
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8e4d2c6a0b57'
down_revision: Union[str, None] = '3c1f9a2b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SYSTEM_NAMES = ('apply', 'submit', 'attend', 'review')


def upgrade() -> None:
    action_types = sa.table(
        'action_types',
        sa.column('name', sa.String),
        sa.column('order', sa.Integer),
        sa.column('is_system', sa.Boolean),
        sa.column('is_active', sa.Boolean),
        sa.column('created_at', sa.DateTime(timezone=True)),
        sa.column('updated_at', sa.DateTime(timezone=True)),
    )
    now = datetime.now(timezone.utc)
    op.bulk_insert(
        action_types,
        [
            {'name': name, 'order': i, 'is_system': True, 'is_active': True,
             'created_at': now, 'updated_at': now}
            for i, name in enumerate(SYSTEM_NAMES)
        ],
    )


def downgrade() -> None:
    op.execute(
        sa.text("DELETE FROM action_types WHERE is_system = :flag").bindparams(flag=True)
    )
