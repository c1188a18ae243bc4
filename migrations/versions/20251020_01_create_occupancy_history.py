"""Create occupancy history table

Revision ID: 20251020_01
Revises: 
Create Date: 2025-10-20 00:00:00
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20251020_01'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'occupancy_history',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('bed_id', sa.Integer(), sa.ForeignKey('bed.id'), nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=True),
        sa.Column('hospital_id', sa.Integer(), nullable=True),
        sa.Column('bed_number', sa.String(length=20), nullable=True),
        sa.Column('bed_status', sa.String(length=20), nullable=True),
        sa.Column('scale', sa.String(length=40), nullable=True),
        sa.Column('total_score', sa.Integer(), nullable=True),
        sa.Column('classification', sa.String(length=60), nullable=True),
        sa.Column('items', sa.JSON(), nullable=True),
        sa.Column('author_id', sa.Integer(), nullable=True),
        sa.Column('author_name', sa.String(length=100), nullable=True),
        sa.Column('start', sa.DateTime(), nullable=False),
        sa.Column('end', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_occupancy_history_bed_start', 'occupancy_history', ['bed_id', 'start'])

def downgrade():
    op.drop_index('ix_occupancy_history_bed_start', table_name='occupancy_history')
    op.drop_table('occupancy_history')
