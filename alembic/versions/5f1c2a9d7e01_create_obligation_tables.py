"""Create obligation, license link and audit tables.

Revision ID: 5f1c2a9d7e01
Revises:
Create Date: 2026-10-17

Initial schema: users, licenses, obligations, the obligation/license join
table, and the audit trail (audits plus their change logs).
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5f1c2a9d7e01'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(), nullable=False, unique=True),
    )

    op.create_table(
        'licenses',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('shortname', sa.String(), nullable=False, unique=True),
        sa.Column('fullname', sa.String(), nullable=True),
    )

    op.create_table(
        'obligations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('topic', sa.String(), nullable=False, unique=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('classification', sa.String(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('modifications', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('text_updatable', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('md5', sa.String(32), nullable=False, unique=True,
                  comment='Hex MD5 digest of text'),
    )

    op.create_table(
        'obligation_licenses',
        sa.Column('obligation_id', sa.Integer(),
                  sa.ForeignKey('obligations.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('license_id', sa.Integer(),
                  sa.ForeignKey('licenses.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'audits',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('type_id', sa.Integer(), nullable=False,
                  comment='Id of the audited entity'),
        sa.Column('type', sa.String(), nullable=False,
                  comment='Kind of the audited entity, e.g. Obligation'),
        sa.Column('timestamp', sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index('ix_audits_type_id', 'audits', ['type_id'])

    op.create_table(
        'change_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('audit_id', sa.Integer(),
                  sa.ForeignKey('audits.id', ondelete='CASCADE'), nullable=False),
        sa.Column('field', sa.String(), nullable=False),
        sa.Column('old_value', sa.Text(), nullable=True),
        sa.Column('updated_value', sa.Text(), nullable=True),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('change_logs')
    op.drop_index('ix_audits_type_id', table_name='audits')
    op.drop_table('audits')
    op.drop_table('obligation_licenses')
    op.drop_table('obligations')
    op.drop_table('licenses')
    op.drop_table('users')
