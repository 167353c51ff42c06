"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from sqlalchemy import (
    Column, String, DateTime, Text, Boolean, Integer,
    ForeignKey, Index, text
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from timetracker.infrastructure.db.database import Base


ONE_ACTIVE_PER_USER_INDEX = 'uq_time_entries_one_active_per_user'


class UserModel(Base):
    """Users table"""
    __tablename__ = 'users'
    
    id = Column(String(64), primary_key=True)
    email = Column(String(255), unique=True)
    name = Column(String(255))
    role = Column(String(32), nullable=True)
    manager_id = Column(String(64), ForeignKey('users.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    __table_args__ = (
        Index('idx_users_manager', 'manager_id'),
    )


class ClientModel(Base):
    """Clients table"""
    __tablename__ = 'clients'
    
    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    projects = relationship("ProjectModel", back_populates="client")


class ProjectModel(Base):
    """Projects table"""
    __tablename__ = 'projects'
    
    id = Column(String(64), primary_key=True)
    client_id = Column(String(64), ForeignKey('clients.id'), nullable=True)
    name = Column(String(255), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    client = relationship("ClientModel", back_populates="projects")
    time_entries = relationship("TimeEntryModel", back_populates="project")
    
    __table_args__ = (
        Index('idx_projects_name', 'name'),
    )


class TimeEntryModel(Base):
    """Time entries table"""
    __tablename__ = 'time_entries'
    
    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False)
    project_id = Column(String(64), ForeignKey('projects.id'), nullable=False)
    description = Column(Text, nullable=False, default="")
    
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)
    
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    
    project = relationship("ProjectModel", back_populates="time_entries")
    
    # At most one running timer per user
    __table_args__ = (
        Index(
            ONE_ACTIVE_PER_USER_INDEX,
            'user_id',
            unique=True,
            postgresql_where=text('is_active'),
            sqlite_where=text('is_active = 1'),
        ),
        Index('idx_time_entries_user_start', 'user_id', 'start_time'),
    )
