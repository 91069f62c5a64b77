"""create users, kazakhstan_deposits and favorites

Revision ID: 3f1c2a9d7e40
Revises:
Create Date: 2025-06-02 10:14:37.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

role_enum = sa.Enum('BUYER', 'SELLER', 'ADMIN', name='roleenum')
listing_type_enum = sa.Enum(
    'MINING_LICENSE', 'EXPLORATION_LICENSE', 'MINERAL_OCCURRENCE', name='listingtype'
)
listing_status_enum = sa.Enum('ACTIVE', 'SOLD', 'PENDING', 'DRAFT', name='listingstatus')
license_subtype_enum = sa.Enum(
    'EXTRACTION_RIGHT', 'PROCESSING_RIGHT', 'TRANSPORTATION_RIGHT', 'COMBINED_RIGHT',
    name='licensesubtype',
)
exploration_stage_enum = sa.Enum(
    'PRELIMINARY', 'DETAILED', 'FEASIBILITY', 'ENVIRONMENTAL', name='explorationstage'
)


def upgrade() -> None:
    """Create the marketplace tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', role_enum, nullable=False),
        sa.Column('company', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'kazakhstan_deposits',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', listing_type_enum, nullable=False),
        sa.Column('mineral', sa.String(length=100), nullable=False),
        sa.Column('region', sa.String(length=100), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('area', sa.Float(), nullable=False),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('status', listing_status_enum, nullable=False),
        sa.Column('license_subtype', license_subtype_enum, nullable=True),
        sa.Column('license_number', sa.String(length=100), nullable=True),
        sa.Column('license_expiry', sa.Date(), nullable=True),
        sa.Column('annual_production_limit', sa.Float(), nullable=True),
        sa.Column('exploration_stage', exploration_stage_enum, nullable=True),
        sa.Column('exploration_start', sa.Date(), nullable=True),
        sa.Column('exploration_end', sa.Date(), nullable=True),
        sa.Column('exploration_budget', sa.Float(), nullable=True),
        sa.Column('discovery_date', sa.Date(), nullable=True),
        sa.Column('geological_confidence', sa.String(length=50), nullable=True),
        sa.Column('estimated_reserves', sa.Float(), nullable=True),
        sa.Column('accessibility_rating', sa.String(length=50), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_deposits_region_mineral', 'kazakhstan_deposits', ['region', 'mineral'])
    op.create_index('ix_deposits_status_created', 'kazakhstan_deposits', ['status', 'created_at'])

    op.create_table(
        'favorites',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('deposit_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['deposit_id'], ['kazakhstan_deposits.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'deposit_id', name='uq_favorite_user_deposit'),
    )


def downgrade() -> None:
    """Drop the marketplace tables and their enum types."""
    op.drop_table('favorites')
    op.drop_index('ix_deposits_status_created', table_name='kazakhstan_deposits')
    op.drop_index('ix_deposits_region_mineral', table_name='kazakhstan_deposits')
    op.drop_table('kazakhstan_deposits')
    op.drop_table('users')
    bind = op.get_bind()
    for enum_type in (
        exploration_stage_enum,
        license_subtype_enum,
        listing_status_enum,
        listing_type_enum,
        role_enum,
    ):
        enum_type.drop(bind, checkfirst=True)
