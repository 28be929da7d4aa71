"""add brand choice to job_stringing_details

Revision ID: c52e9b7d1f03
Revises: 8d41f6a2c7e9
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'c52e9b7d1f03'
down_revision: Union[str, Sequence[str], None] = '8d41f6a2c7e9'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    for side in ('main', 'cross'):
        op.add_column('job_stringing_details', sa.Column(f'{side}_brand_id', sa.Integer(), nullable=True))
        op.create_foreign_key(
            f'fk_job_stringing_details_{side}_brand_id',
            'job_stringing_details', 'string_brand',
            [f'{side}_brand_id'], ['id'],
        )


def downgrade() -> None:
    for side in ('cross', 'main'):
        op.drop_constraint(f'fk_job_stringing_details_{side}_brand_id', 'job_stringing_details', type_='foreignkey')
        op.drop_column('job_stringing_details', f'{side}_brand_id')
