"""
SQLAlchemy models for persisted workflow details.
"""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class WorkflowDetailsCache(Base):
    __tablename__ = "workflow_details_cache"

    cache_key = Column(Text, primary_key=True)
    payload = Column(Text, nullable=False)
    computed_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
