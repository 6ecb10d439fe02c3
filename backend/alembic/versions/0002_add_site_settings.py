"""add site settings and allow singleton upload owners

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-26 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'site_settings',
        sa.Column('id', sa.String(length=32), nullable=False, server_default='settings'),
        sa.Column('site_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('tagline', sa.String(length=500), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('logo', sa.String(length=1000), nullable=True),
        sa.Column('favicon', sa.String(length=1000), nullable=True),
        sa.Column('social_links', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='{}'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )

    # Upload owners are UUID rows or the "settings" singleton
    op.alter_column(
        'documents',
        'entity_id',
        existing_type=postgresql.UUID(as_uuid=True),
        type_=sa.String(length=64),
        postgresql_using='entity_id::text',
        existing_nullable=False,
    )


def downgrade() -> None:
    op.execute("DELETE FROM documents WHERE entity_id = 'settings'")
    op.alter_column(
        'documents',
        'entity_id',
        existing_type=sa.String(length=64),
        type_=postgresql.UUID(as_uuid=True),
        postgresql_using='entity_id::uuid',
        existing_nullable=False,
    )
    op.drop_table('site_settings')
