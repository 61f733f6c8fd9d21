"""Initial schema for the traffic synchronization service.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create ENUM types
    op.execute("CREATE TYPE userrole AS ENUM ('admin', 'operator', 'viewer')")
    op.execute("CREATE TYPE devicestatus AS ENUM ('online', 'offline', 'warning')")
    op.execute("CREATE TYPE signalmode AS ENUM ('AI', 'Manual', 'Scheduled')")
    op.execute("CREATE TYPE congestionlevel AS ENUM ('Low', 'Medium', 'Moderate', 'High', 'Unknown')")

    status_enum = postgresql.ENUM('online', 'offline', 'warning', name='devicestatus', create_type=False)
    congestion_enum = postgresql.ENUM(
        'Low', 'Medium', 'Moderate', 'High', 'Unknown', name='congestionlevel', create_type=False
    )

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', postgresql.ENUM('admin', 'operator', 'viewer', name='userrole', create_type=False), nullable=False, server_default='viewer'),
        sa.Column('created_at', sa.DateTime, server_default=sa.text("(now() at time zone 'utc')"), nullable=False),
    )

    # Create cameras table
    op.create_table(
        'cameras',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('coordinates', sa.JSON, nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('model', sa.String(100), nullable=False, server_default='ESP32-CAM'),
        sa.Column('firmware', sa.String(50), nullable=False, server_default='v2.4.1'),
        sa.Column('status', status_enum, nullable=False, server_default='offline'),
        sa.Column('last_seen', sa.DateTime, nullable=True),
        sa.Column('metrics', sa.JSON, nullable=True),
        sa.Column('settings', sa.JSON, nullable=False),
        sa.Column('created_at', sa.DateTime, server_default=sa.text("(now() at time zone 'utc')"), nullable=False),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text("(now() at time zone 'utc')"), nullable=False),
    )
    op.create_index('ix_cameras_status', 'cameras', ['status'])

    # Create signals table
    op.create_table(
        'signals',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('coordinates', sa.JSON, nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('status', status_enum, nullable=False, server_default='offline'),
        sa.Column('mode', postgresql.ENUM('AI', 'Manual', 'Scheduled', name='signalmode', create_type=False), nullable=False, server_default='AI'),
        sa.Column('current_phase', sa.String(100), nullable=False, server_default='North-South Green'),
        sa.Column('remaining_time', sa.String(20), nullable=False, server_default='0s'),
        sa.Column('congestion_level', congestion_enum, nullable=False, server_default='Unknown'),
        sa.Column('last_seen', sa.DateTime, nullable=True),
        sa.Column('metrics', sa.JSON, nullable=True),
        sa.Column('settings', sa.JSON, nullable=False),
        sa.Column('created_at', sa.DateTime, server_default=sa.text("(now() at time zone 'utc')"), nullable=False),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text("(now() at time zone 'utc')"), nullable=False),
    )
    op.create_index('ix_signals_status', 'signals', ['status'])

    # Create analytics_samples table (append-only)
    op.create_table(
        'analytics_samples',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('timestamp', sa.DateTime, nullable=False),
        sa.Column('traffic_volume', sa.Integer, nullable=False, server_default='0'),
        sa.Column('congestion_level', congestion_enum, nullable=False, server_default='Unknown'),
        sa.Column('average_speed', sa.Float, nullable=False, server_default='0'),
        sa.Column('vehicle_types', sa.JSON, nullable=False),
        sa.Column('junction_id', sa.Uuid, nullable=True),
    )
    op.create_index('ix_analytics_samples_timestamp', 'analytics_samples', ['timestamp'])
    op.create_index('ix_analytics_samples_junction_ts', 'analytics_samples', ['junction_id', 'timestamp'])


def downgrade() -> None:
    op.drop_table('analytics_samples')
    op.drop_table('signals')
    op.drop_table('cameras')
    op.drop_table('users')

    op.execute("DROP TYPE IF EXISTS congestionlevel")
    op.execute("DROP TYPE IF EXISTS signalmode")
    op.execute("DROP TYPE IF EXISTS devicestatus")
    op.execute("DROP TYPE IF EXISTS userrole")
