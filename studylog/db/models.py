"""SQLAlchemy tables mirroring the JSON collection files."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Float, String, Text, func

from .session import Base


class StudySessionRecord(Base):
    __tablename__ = "study_sessions"

    id = Column(String(36), primary_key=True)
    subject = Column(String(255), nullable=False)
    hours = Column(Float, nullable=False)
    date = Column(String(32), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class TodoRecord(Base):
    __tablename__ = "todos"

    id = Column(String(36), primary_key=True)
    task = Column(Text, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class FeedbackRecord(Base):
    __tablename__ = "feedback"

    id = Column(String(36), primary_key=True)
    message = Column(Text, nullable=False)
    timestamp = Column(String(40), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
