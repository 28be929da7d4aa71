"""initial stringing schema

Revision ID: 3b7e1c90d2a4
Revises:
Create Date: 2026-09-28 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3b7e1c90d2a4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JOB_TYPE_VALUES = ('stringing', 'regrip', 'repair', 'other')
JOB_STATUS_VALUES = ('pending', 'in_progress', 'completed', 'picked_up')
USER_ROLE_VALUES = ('stringer', 'customer')


def _audit_columns():
    return [
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        *_audit_columns(),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=True),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('role', sa.Enum(*USER_ROLE_VALUES, name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    for brand_table, model_table in (('string_brand', 'string_model'), ('brands', 'models')):
        op.create_table(
            brand_table,
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(), nullable=False),
        )
        op.create_table(
            model_table,
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('brand_id', sa.Integer(), sa.ForeignKey(f'{brand_table}.id'), nullable=False),
        )
        op.create_index(f'ix_{model_table}_brand_id', model_table, ['brand_id'])

    op.create_table(
        'clients',
        *_audit_columns(),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('default_tension_main', sa.Float(), nullable=True),
        sa.Column('default_tension_cross', sa.Float(), nullable=True),
        sa.Column('preferred_main_brand_id', sa.Integer(), sa.ForeignKey('string_brand.id'), nullable=True),
        sa.Column('preferred_main_model_id', sa.Integer(), sa.ForeignKey('string_model.id'), nullable=True),
        sa.Column('preferred_cross_brand_id', sa.Integer(), sa.ForeignKey('string_brand.id'), nullable=True),
        sa.Column('preferred_cross_model_id', sa.Integer(), sa.ForeignKey('string_model.id'), nullable=True),
        sa.Column('stringer_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('customer_user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=True),
    )
    op.create_index('ix_clients_stringer_id', 'clients', ['stringer_id'])
    op.create_index('ix_clients_customer_user_id', 'clients', ['customer_user_id'])

    op.create_table(
        'racquets',
        *_audit_columns(),
        sa.Column('client_id', sa.Uuid(), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('brand_id', sa.Integer(), sa.ForeignKey('brands.id'), nullable=False),
        sa.Column('model_id', sa.Integer(), sa.ForeignKey('models.id'), nullable=False),
        sa.Column('head_size', sa.Integer(), nullable=True),
        sa.Column('string_pattern', sa.String(), nullable=True),
        sa.Column('weight_grams', sa.Float(), nullable=True),
        sa.Column('balance_point', sa.String(), nullable=True),
        sa.Column('stiffness_rating', sa.Integer(), nullable=True),
        sa.Column('length_cm', sa.Float(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('stringing_notes', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_stringing_date', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_racquets_client_id', 'racquets', ['client_id'])

    op.create_table(
        'jobs',
        *_audit_columns(),
        sa.Column('client_id', sa.Uuid(), sa.ForeignKey('clients.id'), nullable=False),
        sa.Column('racquet_id', sa.Uuid(), sa.ForeignKey('racquets.id'), nullable=False),
        sa.Column('stringer_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('job_type', sa.Enum(*JOB_TYPE_VALUES, name='job_type'), nullable=False),
        sa.Column('job_status', sa.Enum(*JOB_STATUS_VALUES, name='job_status'), nullable=False),
        sa.Column('job_notes', sa.String(), nullable=True),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('completed_date', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_jobs_client_id', 'jobs', ['client_id'])
    op.create_index('ix_jobs_racquet_id', 'jobs', ['racquet_id'])
    op.create_index('ix_jobs_stringer_id', 'jobs', ['stringer_id'])

    op.create_table(
        'job_stringing_details',
        *_audit_columns(),
        sa.Column('job_id', sa.Uuid(), sa.ForeignKey('jobs.id'), nullable=False, unique=True),
        sa.Column('main_string_model_id', sa.Integer(), sa.ForeignKey('string_model.id'), nullable=True),
        sa.Column('cross_string_model_id', sa.Integer(), sa.ForeignKey('string_model.id'), nullable=True),
        sa.Column('tension_main', sa.Float(), nullable=True),
        sa.Column('tension_cross', sa.Float(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('job_stringing_details')
    op.drop_index('ix_jobs_stringer_id', table_name='jobs')
    op.drop_index('ix_jobs_racquet_id', table_name='jobs')
    op.drop_index('ix_jobs_client_id', table_name='jobs')
    op.drop_table('jobs')
    op.drop_index('ix_racquets_client_id', table_name='racquets')
    op.drop_table('racquets')
    op.drop_index('ix_clients_customer_user_id', table_name='clients')
    op.drop_index('ix_clients_stringer_id', table_name='clients')
    op.drop_table('clients')
    for model_table, brand_table in (('models', 'brands'), ('string_model', 'string_brand')):
        op.drop_index(f'ix_{model_table}_brand_id', table_name=model_table)
        op.drop_table(model_table)
        op.drop_table(brand_table)
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.execute("DROP TYPE IF EXISTS job_status")
    op.execute("DROP TYPE IF EXISTS job_type")
    op.execute("DROP TYPE IF EXISTS userrole")
