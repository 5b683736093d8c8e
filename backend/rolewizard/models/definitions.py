from __future__ import annotations
from sqlalchemy.orm import declarative_base, relationship, Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, ForeignKey, JSON, UniqueConstraint, DateTime, Text, text
from typing import Optional, List, Dict, Any

Base = declarative_base()

# --- Role definitions ---
class RoleDefinition(Base):
    """Identity row for a role; content lives in immutable RoleVersion rows."""
    __tablename__ = 'role_definitions'
    role_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    latest_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # exactly one published version per role: a single pointer column
    published_version: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    cloned_from: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'))
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))

    versions = relationship('RoleVersion', back_populates='role', cascade='all, delete-orphan', order_by='RoleVersion.version')
    dashboards = relationship('DashboardVersion', back_populates='role', cascade='all, delete-orphan', order_by='DashboardVersion.version')
    assignments = relationship('RoleAssignment', back_populates='role', cascade='all, delete-orphan')


class RoleVersion(Base):
    __tablename__ = 'role_versions'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    role_id: Mapped[str] = mapped_column(ForeignKey('role_definitions.role_id', ondelete='CASCADE'), nullable=False, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    label: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    capabilities: Mapped[List[str]] = mapped_column(JSON, default=list)
    scopes: Mapped[Dict[str, str]] = mapped_column(JSON, default=dict)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'))

    role = relationship('RoleDefinition', back_populates='versions')

    __table_args__ = (UniqueConstraint('role_id', 'version', name='uq_role_version'),)


# --- Dashboards ---
class DashboardVersion(Base):
    __tablename__ = 'dashboard_versions'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    role_id: Mapped[str] = mapped_column(ForeignKey('role_definitions.role_id', ondelete='CASCADE'), nullable=False, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    menus: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    pages: Mapped[List[Any]] = mapped_column(JSON, default=list)
    widgets: Mapped[List[Any]] = mapped_column(JSON, default=list)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'))
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))

    role = relationship('RoleDefinition', back_populates='dashboards')

    __table_args__ = (UniqueConstraint('role_id', 'version', name='uq_dashboard_version'),)


class DashboardTemplate(Base):
    __tablename__ = 'dashboard_templates'
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    target_role: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    default_menus: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    default_pages: Mapped[List[Any]] = mapped_column(JSON, default=list)
    default_widgets: Mapped[List[Any]] = mapped_column(JSON, default=list)
    default_layout_columns: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    is_system_template: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))


# --- Assignments (written by user management) ---
class RoleAssignment(Base):
    __tablename__ = 'role_assignments'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    role_id: Mapped[str] = mapped_column(ForeignKey('role_definitions.role_id', ondelete='CASCADE'), nullable=False, index=True)

    role = relationship('RoleDefinition', back_populates='assignments')

    __table_args__ = (UniqueConstraint('user_id', 'role_id', name='uq_user_role_assignment'),)
