"""create photo tables

Revision ID: 3b1f7c2d9a40
Revises: 
Create Date: 2026-10-19 10:02:11.218733

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f7c2d9a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 하객 사진
    op.create_table(
        'photos',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('guest_name', sa.String(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('storage_path', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_photos_created_at', 'photos', ['created_at'])

    # 커플 사진 (단일 row)
    op.create_table(
        'couple_photo',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('storage_path', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    # 역순 삭제
    op.drop_table('couple_photo')
    op.drop_index('idx_photos_created_at', table_name='photos')
    op.drop_table('photos')
