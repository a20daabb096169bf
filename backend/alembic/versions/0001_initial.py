"""companies table

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('companies',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('ticket_number', sa.Text(), nullable=False),
        sa.Column('opening_time', sa.Text(), nullable=False),
        sa.Column('closing_time', sa.Text(), nullable=False),
        sa.Column('jodi_info', sa.Text(), nullable=True),
        sa.Column('panel_info', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_companies_created_at', 'companies', ['created_at'])

def downgrade():
    op.drop_index('ix_companies_created_at', table_name='companies')
    op.drop_table('companies')
