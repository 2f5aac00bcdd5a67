"""create watch later

Revision ID: 8c41e0b25a9d
Revises: 3f2a9c1d7b40
Create Date: 2026-10-19 15:40:07.532911
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '8c41e0b25a9d'
down_revision: Union[str, None] = '3f2a9c1d7b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'watch_later',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('video_id', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_watch_later_video_id', 'watch_later', ['video_id'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_watch_later_video_id', table_name='watch_later')
    op.drop_table('watch_later')
