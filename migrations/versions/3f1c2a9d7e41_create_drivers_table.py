"""create_drivers_table

Revision ID: 3f1c2a9d7e41
Revises:
Create Date: 2026-10-19 10:12:41.532906

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c2a9d7e41'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    vehicletype = sa.Enum('SUV', 'Sedan', 'Hatchback', 'Bus', 'Truck', 'Van', 'Pickup', name='vehicletype')

    op.create_table(
        'drivers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('driver_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('mobile_number', sa.String(length=10), nullable=False),
        sa.Column('license_number', sa.String(length=15), nullable=False),
        sa.Column('vehicle_number', sa.String(length=10), nullable=False),
        sa.Column('vehicle_type', vehicletype, nullable=False),
        sa.Column('last_visited_location', sa.String(), nullable=False),
        sa.Column('visits', sa.Integer(), nullable=False),
        sa.Column('total_visits', sa.Integer(), nullable=False),
        sa.Column('eligible_for_commission', sa.Boolean(), nullable=False),
        sa.Column('commission_received', sa.Boolean(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('license_number', 'last_visited_location', name='uq_drivers_license_location'),
    )
    op.create_index(op.f('ix_drivers_id'), 'drivers', ['id'], unique=False)
    op.create_index(op.f('ix_drivers_license_number'), 'drivers', ['license_number'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_drivers_license_number'), table_name='drivers')
    op.drop_index(op.f('ix_drivers_id'), table_name='drivers')
    op.drop_table('drivers')
    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP TYPE IF EXISTS vehicletype")
