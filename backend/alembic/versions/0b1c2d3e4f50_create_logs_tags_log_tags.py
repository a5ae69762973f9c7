"""create_logs_tags_log_tags

Revision ID: 0b1c2d3e4f50
Revises:
Create Date: 2026-01-10 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0b1c2d3e4f50'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create logs, tags and the log_tags association table."""
    op.create_table(
        'logs',
        sa.Column('id', sa.String(26), primary_key=True),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('updated_at', sa.BigInteger(), nullable=False),
    )
    op.create_index('idx_logs_timestamp', 'logs', ['timestamp'])
    op.create_index('idx_logs_type', 'logs', ['type'])
    op.create_index('idx_logs_created_at', 'logs', ['created_at'])
    op.create_index('idx_logs_timestamp_id', 'logs', ['timestamp', 'id'])

    op.create_table(
        'tags',
        sa.Column('id', sa.String(26), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('color', sa.String(32), nullable=True),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.UniqueConstraint('name', name='tags_name_unique'),
    )

    op.create_table(
        'log_tags',
        sa.Column(
            'log_id',
            sa.String(26),
            sa.ForeignKey('logs.id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column(
            'tag_id',
            sa.String(26),
            sa.ForeignKey('tags.id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )
    op.create_index('idx_log_tags_log_id', 'log_tags', ['log_id'])
    op.create_index('idx_log_tags_tag_id', 'log_tags', ['tag_id'])


def downgrade() -> None:
    """Drop log_tags, tags and logs."""
    op.drop_index('idx_log_tags_tag_id', table_name='log_tags')
    op.drop_index('idx_log_tags_log_id', table_name='log_tags')
    op.drop_table('log_tags')
    op.drop_table('tags')
    op.drop_index('idx_logs_timestamp_id', table_name='logs')
    op.drop_index('idx_logs_created_at', table_name='logs')
    op.drop_index('idx_logs_type', table_name='logs')
    op.drop_index('idx_logs_timestamp', table_name='logs')
    op.drop_table('logs')
