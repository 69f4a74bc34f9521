"""Create item, match, rejected_pair and user_rejection_stats tables

Revision ID: 001
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
    ]


def upgrade():
    op.create_table(
        'item',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('item_type', sa.Text(), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('community', sa.Text(), nullable=False),
        sa.Column('area', sa.Text(), nullable=True),
        sa.Column('item_name', sa.Text(), nullable=False),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), server_default='', nullable=False),
        sa.Column('purpose', sa.Text(), nullable=True),
        sa.Column('location', sa.Text(), nullable=False),
        sa.Column('gps_latitude', sa.Float(), nullable=True),
        sa.Column('gps_longitude', sa.Float(), nullable=True),
        sa.Column('location_accuracy', sa.Float(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('image_embedding', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('contact_name', sa.Text(), nullable=True),
        sa.Column('contact_info', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), server_default='active', nullable=False),
        sa.Column('event_at', sa.TIMESTAMP(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_item'),
        sa.CheckConstraint("item_type IN ('lost', 'found')", name='ck_item_item_type'),
        sa.CheckConstraint("status IN ('active', 'matched', 'returned')", name='ck_item_status'),
    )

    # Candidate pool: opposite type, same community, active
    op.create_index('idx_item_pool', 'item', ['item_type', 'community', 'status'])
    op.create_index('idx_item_user', 'item', ['user_id'])

    op.create_table(
        'match',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('lost_item_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('found_item_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('score', sa.Integer(), server_default='0', nullable=False),
        sa.Column('breakdown', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('owner_accepted', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('finder_accepted', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('status', sa.Text(), server_default='pending', nullable=False),
        sa.Column('rejected_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('rejection_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('feedback', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('returned_at', sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_match'),
        sa.ForeignKeyConstraint(['lost_item_id'], ['item.id'], name='fk_match_lost_item_id_item', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['found_item_id'], ['item.id'], name='fk_match_found_item_id_item', ondelete='CASCADE'),
        sa.UniqueConstraint('lost_item_id', 'found_item_id', name='uq_match_lost_found'),
        sa.CheckConstraint("status IN ('pending', 'success', 'rejected')", name='ck_match_status'),
    )

    op.create_index('idx_match_lost', 'match', ['lost_item_id'])
    op.create_index('idx_match_found', 'match', ['found_item_id'])

    op.create_table(
        'rejected_pair',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('lost_item_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('found_item_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rejected_by', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_rejected_pair'),
        sa.ForeignKeyConstraint(
            ['lost_item_id'], ['item.id'], name='fk_rejected_pair_lost_item_id_item', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['found_item_id'], ['item.id'], name='fk_rejected_pair_found_item_id_item', ondelete='CASCADE',
        ),
        # Idempotency guard for blacklist inserts
        sa.UniqueConstraint('lost_item_id', 'found_item_id', name='uq_rejected_pair'),
    )

    op.create_index('idx_rejected_pair_found', 'rejected_pair', ['found_item_id'])

    op.create_table(
        'user_rejection_stats',
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('total_rejections', sa.Integer(), server_default='0', nullable=False),
        sa.Column('high_score_rejections', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_acceptances', sa.Integer(), server_default='0', nullable=False),
        sa.Column('suspicious_flag', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('rewards_disabled', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('user_id', name='pk_user_rejection_stats'),
    )

    # Admin listing of flagged users
    op.create_index(
        'idx_user_rejection_stats_suspicious',
        'user_rejection_stats',
        ['suspicious_flag'],
        postgresql_where=sa.text('suspicious_flag'),
    )


def downgrade():
    op.drop_index('idx_user_rejection_stats_suspicious', table_name='user_rejection_stats')
    op.drop_table('user_rejection_stats')

    op.drop_index('idx_rejected_pair_found', table_name='rejected_pair')
    op.drop_table('rejected_pair')

    op.drop_index('idx_match_found', table_name='match')
    op.drop_index('idx_match_lost', table_name='match')
    op.drop_table('match')

    op.drop_index('idx_item_user', table_name='item')
    op.drop_index('idx_item_pool', table_name='item')
    op.drop_table('item')
