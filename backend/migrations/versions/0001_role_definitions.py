"""role definitions, versions, dashboards, templates, assignments, audit

Revision ID: 0001_role_definitions
Revises: 
Create Date: 2026-10-17
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_role_definitions'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('role_definitions',
        sa.Column('role_id', sa.String(length=64), primary_key=True),
        sa.Column('latest_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('published_version', sa.Integer(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('cloned_from', sa.String(length=64), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table('role_versions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('role_id', sa.String(length=64), sa.ForeignKey('role_definitions.role_id', ondelete='CASCADE'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('capabilities', sa.JSON(), nullable=True),
        sa.Column('scopes', sa.JSON(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('role_id', 'version', name='uq_role_version'),
    )
    op.create_index('ix_role_versions_role_id', 'role_versions', ['role_id'])

    op.create_table('dashboard_versions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('role_id', sa.String(length=64), sa.ForeignKey('role_definitions.role_id', ondelete='CASCADE'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('menus', sa.JSON(), nullable=True),
        sa.Column('pages', sa.JSON(), nullable=True),
        sa.Column('widgets', sa.JSON(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('role_id', 'version', name='uq_dashboard_version'),
    )
    op.create_index('ix_dashboard_versions_role_id', 'dashboard_versions', ['role_id'])
    op.create_index('ix_dashboard_versions_active', 'dashboard_versions', ['active'])

    op.create_table('dashboard_templates',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('target_role', sa.String(length=64), nullable=True),
        sa.Column('default_menus', sa.JSON(), nullable=True),
        sa.Column('default_pages', sa.JSON(), nullable=True),
        sa.Column('default_widgets', sa.JSON(), nullable=True),
        sa.Column('default_layout_columns', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('is_system_template', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_dashboard_templates_target_role', 'dashboard_templates', ['target_role'])

    op.create_table('role_assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.String(length=64), sa.ForeignKey('role_definitions.role_id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('user_id', 'role_id', name='uq_user_role_assignment'),
    )
    op.create_index('ix_role_assignments_user_id', 'role_assignments', ['user_id'])
    op.create_index('ix_role_assignments_role_id', 'role_assignments', ['role_id'])

    op.create_table('audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('actor_user_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('entity', sa.String(length=64), nullable=True),
        sa.Column('entity_id', sa.String(length=64), nullable=True),
        sa.Column('perms_snapshot', sa.JSON(), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_audit_logs_actor_user_id', 'audit_logs', ['actor_user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_entity', 'audit_logs', ['entity', 'entity_id'])

def downgrade():
    op.drop_table('audit_logs')
    op.drop_table('role_assignments')
    op.drop_table('dashboard_templates')
    op.drop_table('dashboard_versions')
    op.drop_table('role_versions')
    op.drop_table('role_definitions')
