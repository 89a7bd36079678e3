"""Create card tables

Revision ID: 001_create_card_tables
Revises: 
Create Date: 2024-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_create_card_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create card table
    op.create_table(
        'card',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('subject', sa.String(), nullable=False),
        sa.Column('module', sa.String(), nullable=True),
        sa.Column('chapter', sa.String(), nullable=True),
        sa.Column('section', sa.String(), nullable=True),
        sa.Column('topic', sa.String(), nullable=True),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('keywords', sa.JSON(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('next_review', sa.DateTime(), nullable=True),
        sa.Column('schedule_stage', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('schedule_next_review', sa.DateTime(), nullable=True),
        sa.Column('created_by', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_card_subject', 'card', ['subject'])
    op.create_index('ix_card_module', 'card', ['module'])
    op.create_index('ix_card_topic', 'card', ['topic'])
    op.create_index('ix_card_schedule_next_review', 'card', ['schedule_next_review'])
    op.create_index('ix_card_created_by', 'card', ['created_by'])
    
    # Create review_history table (legacy per-card log)
    op.create_table(
        'review_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('card_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('remembered', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['card_id'], ['card.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_review_history_card_id', 'review_history', ['card_id'])
    
    # Create schedule_log table (staged scheduler transitions)
    op.create_table(
        'schedule_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('card_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('stage', sa.Integer(), nullable=False),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('performance', sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(['card_id'], ['card.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_schedule_log_card_id', 'schedule_log', ['card_id'])
    
    # Create forgotten_blanks table (one entry per card and user)
    op.create_table(
        'forgotten_blanks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('card_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('blanks', sa.JSON(), nullable=True),
        sa.Column('stats', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['card_id'], ['card.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('card_id', 'user_id', name='uq_forgotten_blanks_card_user')
    )
    op.create_index('ix_forgotten_blanks_card_id', 'forgotten_blanks', ['card_id'])


def downgrade() -> None:
    op.drop_index('ix_forgotten_blanks_card_id', table_name='forgotten_blanks')
    op.drop_table('forgotten_blanks')
    op.drop_index('ix_schedule_log_card_id', table_name='schedule_log')
    op.drop_table('schedule_log')
    op.drop_index('ix_review_history_card_id', table_name='review_history')
    op.drop_table('review_history')
    op.drop_index('ix_card_created_by', table_name='card')
    op.drop_index('ix_card_schedule_next_review', table_name='card')
    op.drop_index('ix_card_topic', table_name='card')
    op.drop_index('ix_card_module', table_name='card')
    op.drop_index('ix_card_subject', table_name='card')
    op.drop_table('card')
