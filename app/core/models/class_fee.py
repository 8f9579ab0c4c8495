"""Class fee schedule: amount per class per fee type, with history via effective_from."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.session import Base


class ClassFee(Base):
    """
    One schedule row per (class, fee type, effective_from).
    Several active rows may exist for the same class and type; the reporting engine decides which one applies.
    """

    __tablename__ = "class_fees"
    __table_args__ = (
        Index("ix_class_fees_class_type_active", "class_id", "fee_type", "is_active"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    fee_type = Column(String(30), nullable=False)  # monthly, examination, admission, registration
    amount = Column(Numeric(12, 2), nullable=False)
    effective_from = Column(Date, nullable=False)
    effective_to = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    school_class = relationship("SchoolClass", foreign_keys=[class_id])
