"""add string_inventory table

Revision ID: 8d41f6a2c7e9
Revises: 3b7e1c90d2a4
Create Date: 2026-10-06 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '8d41f6a2c7e9'
down_revision: Union[str, Sequence[str], None] = '3b7e1c90d2a4'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'string_inventory',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('stringer_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('string_brand_id', sa.Integer(), sa.ForeignKey('string_brand.id'), nullable=True),
        sa.Column('string_model_id', sa.Integer(), sa.ForeignKey('string_model.id'), nullable=True),
        sa.Column('gauge', sa.String(), nullable=True),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('length_meters', sa.Float(), nullable=False, server_default='12'),
        sa.Column('stock_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('min_stock_level', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('cost_per_set', sa.Numeric(10, 2), nullable=False, server_default='0'),
    )
    op.create_index('ix_string_inventory_stringer_id', 'string_inventory', ['stringer_id'])
    op.create_index('ix_string_inventory_string_model_id', 'string_inventory', ['string_model_id'])


def downgrade() -> None:
    op.drop_index('ix_string_inventory_string_model_id', table_name='string_inventory')
    op.drop_index('ix_string_inventory_stringer_id', table_name='string_inventory')
    op.drop_table('string_inventory')
