"""create_content_tables

Revision ID: 3c9e1a7d52b0
Revises:
Create Date: 2026-10-19 10:12:41.518204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9e1a7d52b0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'texts',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('page_id', sa.String(), nullable=False),
        sa.Column('page_slug', sa.String(), nullable=False),
        *_audit_columns(),
        sa.Column('last_updated_by', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_texts_slug'), 'texts', ['slug'], unique=False)
    op.create_index(op.f('ix_texts_page_id'), 'texts', ['page_id'], unique=False)
    op.create_index(op.f('ix_texts_page_slug'), 'texts', ['page_slug'], unique=False)

    op.create_table(
        'images',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('object_url', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('location', sa.String(), nullable=False),
        *_audit_columns(),
        sa.Column('last_updated_by', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_images_slug'), 'images', ['slug'], unique=False)

    op.create_table(
        'timeline_entries',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.Column('last_updated_by', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_timeline_entries_date'), 'timeline_entries', ['date'], unique=False)

    op.create_table(
        'gallery_events',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('image_urls', sa.JSON(), nullable=False),
        sa.Column('image_ids', sa.JSON(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_gallery_events_date'), 'gallery_events', ['date'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_gallery_events_date'), table_name='gallery_events')
    op.drop_table('gallery_events')
    op.drop_index(op.f('ix_timeline_entries_date'), table_name='timeline_entries')
    op.drop_table('timeline_entries')
    op.drop_index(op.f('ix_images_slug'), table_name='images')
    op.drop_table('images')
    op.drop_index(op.f('ix_texts_page_slug'), table_name='texts')
    op.drop_index(op.f('ix_texts_page_id'), table_name='texts')
    op.drop_index(op.f('ix_texts_slug'), table_name='texts')
    op.drop_table('texts')
