"""initial content and upload tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def _ordering_columns():
    return [
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'admins',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='editor'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admins_email', 'admins', ['email'], unique=True)

    op.create_table(
        'services',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('short_description', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon', sa.String(length=100), nullable=True),
        sa.Column('image', sa.String(length=1000), nullable=True),
        sa.Column('card_image', sa.String(length=1000), nullable=True),
        sa.Column('banner_image', sa.String(length=1000), nullable=True),
        sa.Column('features', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_ordering_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_services_slug', 'services', ['slug'], unique=True)

    op.create_table(
        'projects',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('short_description', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('client_name', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='draft'),
        sa.Column('featured_image', sa.String(length=1000), nullable=True),
        sa.Column('card_image', sa.String(length=1000), nullable=True),
        sa.Column('banner_image', sa.String(length=1000), nullable=True),
        sa.Column('technologies', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_ordering_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_projects_slug', 'projects', ['slug'], unique=True)

    op.create_table(
        'brands',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('logo', sa.String(length=1000), nullable=True),
        sa.Column('website_url', sa.String(length=1000), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_ordering_columns(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'testimonials',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('client_name', sa.String(length=255), nullable=False),
        sa.Column('client_role', sa.String(length=255), nullable=True),
        sa.Column('company_name', sa.String(length=255), nullable=True),
        sa.Column('testimonial', sa.Text(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('client_image', sa.String(length=1000), nullable=True),
        sa.Column('company_logo', sa.String(length=1000), nullable=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_ordering_columns(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'team_members',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=255), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=1000), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_ordering_columns(),
        sa.PrimaryKeyConstraint('id'),
    )

    for table in ('services', 'projects', 'brands', 'testimonials', 'team_members'):
        op.create_index(f'ix_{table}_display_order', table, ['display_order'])

    op.create_table(
        'documents',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=False),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('intent', sa.String(length=50), nullable=False),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('key', sa.String(length=1000), nullable=False),
        sa.Column('public_url', sa.String(length=1000), nullable=False),
        sa.Column('upload_url', sa.Text(), nullable=False),
        sa.Column('file_extension', sa.String(length=10), nullable=False, server_default=''),
        sa.Column('content_type', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('size', sa.BigInteger(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(), nullable=True),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.Column('uploaded_by_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['uploaded_by_id'], ['admins.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_documents_key', 'documents', ['key'], unique=True)
    op.create_index('ix_documents_entity_type', 'documents', ['entity_type'])
    op.create_index('ix_documents_entity_id', 'documents', ['entity_id'])
    op.create_index('ix_documents_intent', 'documents', ['intent'])
    op.create_index('ix_documents_status', 'documents', ['status'])


def downgrade() -> None:
    op.drop_table('documents')
    for table in ('team_members', 'testimonials', 'brands', 'projects', 'services'):
        op.drop_index(f'ix_{table}_display_order', table_name=table)
    op.drop_table('team_members')
    op.drop_table('testimonials')
    op.drop_table('brands')
    op.drop_index('ix_projects_slug', table_name='projects')
    op.drop_table('projects')
    op.drop_index('ix_services_slug', table_name='services')
    op.drop_table('services')
    op.drop_index('ix_admins_email', table_name='admins')
    op.drop_table('admins')
