"""albums and photos with soft delete"""
from alembic import op
import sqlalchemy as sa

revision = '0002_albums_photos'
down_revision = '0001_identity'
branch_labels = None
depends_on = None


def _soft_delete_and_timestamps():
    return [
        sa.Column('created_by_user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('is_deleted', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_by_user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade():
    op.create_table(
        'albums',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('tenant_id', sa.String(36), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('cover_photo_url', sa.Text, nullable=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='draft'),
        *_soft_delete_and_timestamps(),
    )
    op.create_index('idx_albums_tenant_created', 'albums', ['tenant_id', 'created_at'])
    op.create_index('idx_albums_tenant_name', 'albums', ['tenant_id', 'name'])

    op.create_table(
        'photos',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('tenant_id', sa.String(36), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('album_id', sa.String(36), sa.ForeignKey('albums.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('url', sa.Text, nullable=False),
        sa.Column('thumbnail_url', sa.Text, nullable=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='draft'),
        *_soft_delete_and_timestamps(),
    )
    op.create_index('ix_photos_album_id', 'photos', ['album_id'])
    op.create_index('idx_photos_tenant_album', 'photos', ['tenant_id', 'album_id'])
    op.create_index('idx_photos_tenant_created', 'photos', ['tenant_id', 'created_at'])


def downgrade():
    op.drop_table('photos')
    op.drop_table('albums')
