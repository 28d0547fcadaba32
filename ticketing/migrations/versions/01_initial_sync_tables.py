"""01_initial_sync_tables

Revision ID: 4c1e9a7d2b10
Revises:
Create Date: 2026-10-18 09:12:40.512733

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1e9a7d2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:

    op.create_table('region',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('code', sa.String(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('code')
    )
    op.create_table('division',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('code', sa.String(), nullable=False),
    sa.Column('region_id', sa.Integer(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    *_timestamps(),
    sa.ForeignKeyConstraint(['region_id'], ['region.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_table('district',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('code', sa.String(), nullable=False),
    sa.Column('division_id', sa.Integer(), nullable=False),
    sa.Column('region_id', sa.Integer(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    *_timestamps(),
    sa.ForeignKeyConstraint(['division_id'], ['division.id']),
    sa.ForeignKeyConstraint(['region_id'], ['region.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_table('station',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('code', sa.String(), nullable=False),
    sa.Column('district_id', sa.Integer(), nullable=False),
    sa.Column('division_id', sa.Integer(), nullable=False),
    sa.Column('region_id', sa.Integer(), nullable=False),
    sa.Column('address', sa.String(), nullable=True),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    *_timestamps(),
    sa.ForeignKeyConstraint(['district_id'], ['district.id']),
    sa.ForeignKeyConstraint(['division_id'], ['division.id']),
    sa.ForeignKeyConstraint(['region_id'], ['region.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_table('offence',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('code', sa.String(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('description', sa.String(), nullable=True),
    sa.Column('category', sa.String(), nullable=False),
    sa.Column('default_fine', sa.Float(), nullable=False),
    sa.Column('min_fine', sa.Float(), nullable=False),
    sa.Column('max_fine', sa.Float(), nullable=False),
    sa.Column('points', sa.Integer(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('code')
    )
    op.create_table('ticket',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('ticket_number', sa.String(), nullable=False),
    sa.Column('status', sa.String(), nullable=False),
    sa.Column('vehicle_reg_number', sa.String(), nullable=False),
    sa.Column('vehicle_type', sa.String(), nullable=True),
    sa.Column('vehicle_color', sa.String(), nullable=True),
    sa.Column('vehicle_make', sa.String(), nullable=True),
    sa.Column('vehicle_model', sa.String(), nullable=True),
    sa.Column('driver_name', sa.String(), nullable=True),
    sa.Column('driver_license', sa.String(), nullable=True),
    sa.Column('driver_phone', sa.String(), nullable=True),
    sa.Column('driver_address', sa.String(), nullable=True),
    sa.Column('location_description', sa.String(), nullable=True),
    sa.Column('location_latitude', sa.Float(), nullable=True),
    sa.Column('location_longitude', sa.Float(), nullable=True),
    sa.Column('total_fine', sa.Float(), nullable=False),
    sa.Column('payment_reference', sa.String(), nullable=True),
    sa.Column('payment_deadline', sa.DateTime(), nullable=True),
    sa.Column('paid_at', sa.DateTime(), nullable=True),
    sa.Column('paid_amount', sa.Float(), nullable=True),
    sa.Column('paid_method', sa.String(), nullable=True),
    sa.Column('officer_id', sa.Integer(), nullable=False),
    sa.Column('station_id', sa.Integer(), nullable=False),
    sa.Column('district_id', sa.Integer(), nullable=True),
    sa.Column('division_id', sa.Integer(), nullable=True),
    sa.Column('region_id', sa.Integer(), nullable=False),
    sa.Column('notes', sa.String(), nullable=True),
    sa.Column('sync_status', sa.String(), nullable=False),
    sa.Column('client_created_id', sa.String(), nullable=True),
    sa.Column('printed', sa.Boolean(), nullable=False),
    sa.Column('printed_at', sa.DateTime(), nullable=True),
    sa.Column('voided_by', sa.Integer(), nullable=True),
    sa.Column('voided_at', sa.DateTime(), nullable=True),
    sa.Column('void_reason', sa.String(), nullable=True),
    sa.Column('issued_at', sa.DateTime(), nullable=False),
    sa.Column('due_date', sa.DateTime(), nullable=True),
    *_timestamps(),
    sa.ForeignKeyConstraint(['station_id'], ['station.id']),
    sa.ForeignKeyConstraint(['district_id'], ['district.id']),
    sa.ForeignKeyConstraint(['division_id'], ['division.id']),
    sa.ForeignKeyConstraint(['region_id'], ['region.id']),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('ticket_number'),
    sa.UniqueConstraint('payment_reference'),
    sa.UniqueConstraint('client_created_id')
    )
    op.create_index('ix_ticket_vehicle_reg_number', 'ticket', ['vehicle_reg_number'])
    op.create_index('ix_ticket_station_id', 'ticket', ['station_id'])
    op.create_index('ix_ticket_region_id', 'ticket', ['region_id'])
    op.create_index('ix_ticket_updated_at', 'ticket', ['updated_at'])

    op.create_table('ticket_offence',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('ticket_id', sa.Integer(), nullable=False),
    sa.Column('offence_id', sa.Integer(), nullable=False),
    sa.Column('fine_amount', sa.Float(), nullable=False),
    sa.Column('notes', sa.String(), nullable=True),
    *_timestamps(),
    sa.ForeignKeyConstraint(['ticket_id'], ['ticket.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['offence_id'], ['offence.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_ticket_offence_ticket_id', 'ticket_offence', ['ticket_id'])

    op.create_table('ticket_note',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('ticket_id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('officer_id', sa.Integer(), nullable=True),
    sa.Column('content', sa.String(), nullable=False),
    *_timestamps(),
    sa.ForeignKeyConstraint(['ticket_id'], ['ticket.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_ticket_note_ticket_id', 'ticket_note', ['ticket_id'])

    op.create_table('ticket_photo',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('ticket_id', sa.Integer(), nullable=False),
    sa.Column('type', sa.String(), nullable=False),
    sa.Column('storage_path', sa.String(), nullable=False),
    sa.Column('thumbnail_path', sa.String(), nullable=True),
    sa.Column('mime_type', sa.String(), nullable=False),
    sa.Column('file_size', sa.Integer(), nullable=False),
    sa.Column('uploaded', sa.Boolean(), nullable=False),
    *_timestamps(),
    sa.ForeignKeyConstraint(['ticket_id'], ['ticket.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_ticket_photo_ticket_id', 'ticket_photo', ['ticket_id'])

    op.create_table('ticket_counter',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('year', sa.Integer(), nullable=False),
    sa.Column('region_code', sa.String(), nullable=False),
    sa.Column('value', sa.Integer(), nullable=False),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('year', 'region_code', name='uq_ticket_counter_year_region')
    )

    op.create_table('device_sync',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.Column('device_id', sa.String(), nullable=False),
    sa.Column('last_sync_timestamp', sa.DateTime(), nullable=False),
    sa.Column('items_synced', sa.Integer(), nullable=False),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('user_id', 'device_id', name='uq_device_sync_user_device')
    )


def downgrade() -> None:
    op.drop_table('device_sync')
    op.drop_table('ticket_counter')
    op.drop_index('ix_ticket_photo_ticket_id', table_name='ticket_photo')
    op.drop_table('ticket_photo')
    op.drop_index('ix_ticket_note_ticket_id', table_name='ticket_note')
    op.drop_table('ticket_note')
    op.drop_index('ix_ticket_offence_ticket_id', table_name='ticket_offence')
    op.drop_table('ticket_offence')
    op.drop_index('ix_ticket_updated_at', table_name='ticket')
    op.drop_index('ix_ticket_region_id', table_name='ticket')
    op.drop_index('ix_ticket_station_id', table_name='ticket')
    op.drop_index('ix_ticket_vehicle_reg_number', table_name='ticket')
    op.drop_table('ticket')
    op.drop_table('offence')
    op.drop_table('station')
    op.drop_table('district')
    op.drop_table('division')
    op.drop_table('region')
