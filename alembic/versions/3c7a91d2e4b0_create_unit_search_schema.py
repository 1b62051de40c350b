"""Create unit search schema

Revision ID: 3c7a91d2e4b0
Revises:
Create Date: 2026-10-19 09:12:44.201877

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c7a91d2e4b0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Metro areas with cached Census demographics
    op.create_table('msas',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('code', sa.String(length=10), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('state', sa.String(length=50), nullable=False),
        sa.Column('population', sa.Integer(), nullable=True),
        sa.Column('median_income', sa.Integer(), nullable=True),
        sa.Column('housing_units', sa.Integer(), nullable=True),
        sa.Column('rental_vacancy_rate', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )
    op.create_index('idx_msas_name', 'msas', ['name'], unique=False)

    op.create_table('communities',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=300), nullable=False),
        sa.Column('msa_id', sa.UUID(), nullable=True),
        sa.Column('street', sa.String(length=300), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=50), nullable=False),
        sa.Column('zip_code', sa.String(length=20), nullable=True),
        sa.Column('latitude', sa.Numeric(precision=10, scale=7), nullable=True),
        sa.Column('longitude', sa.Numeric(precision=10, scale=7), nullable=True),
        sa.Column('amenities', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['msa_id'], ['msas.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_communities_msa_id', 'communities', ['msa_id'], unique=False)
    op.create_index('idx_communities_name', 'communities', ['name'], unique=False)

    op.create_table('units',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('community_id', sa.UUID(), nullable=False),
        sa.Column('unit_number', sa.String(length=50), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Numeric(precision=3, scale=1), nullable=False),
        sa.Column('square_feet', sa.Integer(), nullable=False),
        sa.Column('monthly_rent', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('availability', sa.String(length=20), nullable=False),
        sa.Column('floor_plan', sa.String(length=100), nullable=True),
        sa.Column('photo_urls', sa.JSON(), nullable=True),
        sa.Column('floor_plan_urls', sa.JSON(), nullable=True),
        sa.Column('virtual_tour_url', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['community_id'], ['communities.id']),
        sa.PrimaryKeyConstraint('id')
    )

    # Indexes backing the search filters
    op.create_index('idx_units_community_id', 'units', ['community_id'], unique=False)
    op.create_index('idx_units_bedrooms', 'units', ['bedrooms'], unique=False)
    op.create_index('idx_units_bathrooms', 'units', ['bathrooms'], unique=False)
    op.create_index('idx_units_monthly_rent', 'units', ['monthly_rent'], unique=False)
    op.create_index('idx_units_square_feet', 'units', ['square_feet'], unique=False)
    op.create_index('idx_units_availability', 'units', ['availability'], unique=False)

    op.create_table('features',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_popular', sa.Boolean(), nullable=True, default=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    # Pairs are not unique; warehouse loads may repeat them
    op.create_table('unit_features',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.UUID(), nullable=False),
        sa.Column('feature_id', sa.UUID(), nullable=False),
        sa.ForeignKeyConstraint(['feature_id'], ['features.id']),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_unit_features_unit_id', 'unit_features', ['unit_id'], unique=False)
    op.create_index('idx_unit_features_feature_id', 'unit_features', ['feature_id'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_unit_features_feature_id', table_name='unit_features')
    op.drop_index('idx_unit_features_unit_id', table_name='unit_features')
    op.drop_table('unit_features')
    op.drop_table('features')

    op.drop_index('idx_units_availability', table_name='units')
    op.drop_index('idx_units_square_feet', table_name='units')
    op.drop_index('idx_units_monthly_rent', table_name='units')
    op.drop_index('idx_units_bathrooms', table_name='units')
    op.drop_index('idx_units_bedrooms', table_name='units')
    op.drop_index('idx_units_community_id', table_name='units')
    op.drop_table('units')

    op.drop_index('idx_communities_name', table_name='communities')
    op.drop_index('idx_communities_msa_id', table_name='communities')
    op.drop_table('communities')

    op.drop_index('idx_msas_name', table_name='msas')
    op.drop_table('msas')
