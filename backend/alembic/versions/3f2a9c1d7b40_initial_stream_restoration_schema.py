"""Initial stream restoration schema

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-16 09:12:31.508114

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geometry
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS postgis')

    # Create organizations table
    op.create_table(
        'organizations',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    # Create states table (PostGIS polygons, SRID 4326)
    op.create_table(
        'states',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('geom', Geometry(geometry_type='POLYGON', srid=4326, spatial_index=False), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_states_name', 'states', ['name'])
    op.create_index('ix_states_geom', 'states', ['geom'], postgresql_using='gist')

    # Create projects table
    op.create_table(
        'projects',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('author_id', UUID(as_uuid=True), nullable=False),
        sa.Column('state_id', UUID(as_uuid=True), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('stream_name', sa.String(255), nullable=False),
        sa.Column('watershed', sa.String(255), nullable=False),
        sa.Column('implementation_date', sa.Date(), nullable=False),
        sa.Column('primary_contact', sa.String(255), nullable=False),
        sa.Column('narrative', sa.Text(), nullable=False),
        sa.Column('structure_description', sa.Text(), nullable=False),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('length', sa.Integer(), nullable=False),
        sa.Column('number_of_structures', sa.Integer(), nullable=False),
        sa.Column('affiliation_legacy', sa.String(255), nullable=True),
        sa.Column('affiliations_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('lonlat', Geometry(geometry_type='POINT', srid=4326, spatial_index=False), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['author_id'], ['users.id']),
        sa.ForeignKeyConstraint(['state_id'], ['states.id']),
        sa.CheckConstraint('length > 0', name='check_project_length_positive'),
        sa.CheckConstraint('number_of_structures > 0', name='check_project_structures_positive'),
    )
    op.create_index('ix_projects_author_id', 'projects', ['author_id'])
    op.create_index('ix_projects_state_id', 'projects', ['state_id'])
    op.create_index('ix_projects_name', 'projects', ['name'])
    op.create_index('ix_projects_stream_name', 'projects', ['stream_name'])
    op.create_index('ix_projects_watershed', 'projects', ['watershed'])
    op.create_index('ix_projects_lonlat', 'projects', ['lonlat'], postgresql_using='gist')

    # Create affiliations table
    op.create_table(
        'affiliations',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('project_id', UUID(as_uuid=True), nullable=False),
        sa.Column('organization_id', UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id']),
        sa.UniqueConstraint('project_id', 'organization_id', name='uq_affiliation_project_organization'),
    )
    op.create_index('ix_affiliations_project_id', 'affiliations', ['project_id'])
    op.create_index('ix_affiliations_organization_id', 'affiliations', ['organization_id'])

    # Create photos table
    op.create_table(
        'photos',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('project_id', UUID(as_uuid=True), nullable=False),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('content_type', sa.String(50), nullable=False),
        sa.Column('byte_size', sa.Integer(), nullable=False),
        sa.Column('storage_key', sa.String(500), nullable=True, unique=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_photos_project_id', 'photos', ['project_id'])


def downgrade() -> None:
    op.drop_table('photos')
    op.drop_table('affiliations')
    op.drop_table('projects')
    op.drop_table('states')
    op.drop_table('users')
    op.drop_table('organizations')
