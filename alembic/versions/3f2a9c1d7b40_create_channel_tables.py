"""create channel tables

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-19 09:12:44.118302
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'channels',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('channel_id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('custom_url', sa.String(255), nullable=True),
        sa.Column('thumbnail_url', sa.String(500), nullable=True),
        sa.Column('subscriber_count', sa.String(32), nullable=True),
        sa.Column('video_count', sa.Integer(), nullable=True),
        sa.Column('view_count', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_channels_channel_id', 'channels', ['channel_id'], unique=True)

    op.create_table(
        'videos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('video_id', sa.String(20), nullable=False),
        sa.Column('channel_id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('thumbnail_url', sa.String(500), nullable=True),
        sa.Column('published_at', sa.String(32), nullable=True),
        sa.Column('duration', sa.String(32), nullable=True),
        sa.Column('view_count', sa.String(32), nullable=True),
        sa.Column('like_count', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_videos_video_id', 'videos', ['video_id'], unique=True)
    op.create_index('ix_videos_channel_id', 'videos', ['channel_id'])

    op.create_table(
        'playlists',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('playlist_id', sa.String(64), nullable=False),
        sa.Column('channel_id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('thumbnail_url', sa.String(500), nullable=True),
        sa.Column('item_count', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_playlists_playlist_id', 'playlists', ['playlist_id'], unique=True)
    op.create_index('ix_playlists_channel_id', 'playlists', ['channel_id'])

    # No unique constraint on (playlist_id, video_id): sync checks before inserting
    op.create_table(
        'playlist_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('playlist_id', sa.String(64), nullable=False),
        sa.Column('video_id', sa.String(20), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_playlist_items_playlist_position', 'playlist_items', ['playlist_id', 'position'])
    op.create_index('ix_playlist_items_playlist_video', 'playlist_items', ['playlist_id', 'video_id'])


def downgrade() -> None:
    op.drop_index('ix_playlist_items_playlist_video', table_name='playlist_items')
    op.drop_index('ix_playlist_items_playlist_position', table_name='playlist_items')
    op.drop_table('playlist_items')
    op.drop_index('ix_playlists_channel_id', table_name='playlists')
    op.drop_index('ix_playlists_playlist_id', table_name='playlists')
    op.drop_table('playlists')
    op.drop_index('ix_videos_channel_id', table_name='videos')
    op.drop_index('ix_videos_video_id', table_name='videos')
    op.drop_table('videos')
    op.drop_index('ix_channels_channel_id', table_name='channels')
    op.drop_table('channels')
