"""Student roster. Read-only for fee reporting; inactive students are excluded by the report queries."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.session import Base


class Student(Base):
    """Admitted student. admission_date falls back to created_at when missing."""

    __tablename__ = "students"
    __table_args__ = (
        Index("ix_students_class_active", "class_id", "is_active"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    registration_number = Column(String(50), nullable=True, unique=True)
    name = Column(String(255), nullable=False)
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="RESTRICT"), nullable=False)
    section = Column(String(5), nullable=False, default="A")  # A, B, C, D
    roll_number = Column(String(20), nullable=True)
    admission_date = Column(Date, nullable=True)
    mobile = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    photo = Column(String(500), nullable=True)  # storage reference, never the image itself
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    school_class = relationship("SchoolClass", foreign_keys=[class_id])
