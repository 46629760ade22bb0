from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text

from impulso.domain.entities import utcnow

from .db import Base


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    completed_at = Column(DateTime, nullable=True, index=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_focused = Column(Boolean, nullable=False, default=False)
    is_backlogged = Column(Boolean, nullable=False, default=False, index=True)
    notes = Column(Text, nullable=True)
    metrics = Column(JSON, nullable=True)
    priority_score = Column(Float, nullable=False, default=0.0)
