"""Create users, conversion_rates, network_rewards and levels tables

Revision ID: 20261019_000001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LEVELS = range(1, 6)


def _level_columns() -> list[sa.Column]:
    columns = []
    for n in LEVELS:
        columns += [
            sa.Column(f'lvl{n}_anim', sa.Boolean(), nullable=False, server_default='false'),
            sa.Column(f'lvl{n}_credited', sa.DECIMAL(18, 8), nullable=True),
            sa.Column(
                f'lvl{n}_network_rewards',
                postgresql.JSONB(),
                nullable=False,
                server_default=sa.text("'{}'::jsonb"),
            ),
            sa.Column(f'lvl{n}_reward', sa.DECIMAL(18, 8), nullable=False, server_default='0'),
            sa.Column(f'lvl{n}_commission', sa.DECIMAL(18, 8), nullable=False, server_default='0'),
        ]
    columns += [
        sa.Column(f'tier{n}_price', sa.DECIMAL(18, 8), nullable=True)
        for n in LEVELS
    ]
    return columns


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('tier', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('balance', sa.DECIMAL(18, 8), nullable=False, server_default='0'),
        sa.Column('total_earned', sa.DECIMAL(18, 8), nullable=False, server_default='0'),
        *_level_columns(),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('balance >= 0', name='check_user_balance_non_negative'),
        sa.CheckConstraint('total_earned >= 0', name='check_user_total_earned_non_negative'),
        sa.CheckConstraint('tier >= 1 AND tier <= 5', name='check_user_tier_range'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Create conversion_rates table
    op.create_table(
        'conversion_rates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('network', sa.String(10), nullable=False),
        sa.Column('rate_to_usd', sa.Numeric(24, 8), nullable=False),
        sa.Column('is_auto', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['updated_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_conversion_rates_network', 'conversion_rates', ['network'], unique=True)

    # Create network_rewards table
    op.create_table(
        'network_rewards',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('network', sa.String(10), nullable=False),
        sa.Column('reward_amount', sa.Numeric(24, 8), nullable=False),
        sa.Column('commission_percent', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['updated_by'], ['users.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('level', 'network', name='uq_network_reward_level_network'),
        sa.CheckConstraint('level >= 1 AND level <= 5', name='check_network_reward_level'),
        sa.CheckConstraint('reward_amount >= 0', name='check_network_reward_amount'),
        sa.CheckConstraint(
            'commission_percent >= 0 AND commission_percent <= 100',
            name='check_network_reward_commission'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_network_rewards_level', 'network_rewards', ['level'])
    op.create_index('ix_network_rewards_is_active', 'network_rewards', ['is_active'])

    # Create levels table
    op.create_table(
        'levels',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('nodes', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('edges', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('version', sa.String(20), nullable=False, server_default='1.0.0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_levels_level', 'levels', ['level'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_levels_level', 'levels')
    op.drop_table('levels')

    op.drop_index('ix_network_rewards_is_active', 'network_rewards')
    op.drop_index('ix_network_rewards_level', 'network_rewards')
    op.drop_table('network_rewards')

    op.drop_index('ix_conversion_rates_network', 'conversion_rates')
    op.drop_table('conversion_rates')

    op.drop_index('ix_users_email', 'users')
    op.drop_table('users')
