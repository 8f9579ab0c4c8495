"""Fee transaction ledger. Collected by staff as pending, then verified or rejected by an admin."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.core.enums import TransactionStatus
from app.db.session import Base


class FeeTransaction(Base):
    """
    Payment record. month is set only for monthly fees; examination and admission payments
    are identified by year alone.
    """

    __tablename__ = "fee_transactions"
    __table_args__ = (
        Index("ix_fee_transactions_student_period", "student_id", "month", "year"),
        Index("ix_fee_transactions_status_date", "status", "transaction_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id", ondelete="RESTRICT"), nullable=False)
    fee_type = Column(String(30), nullable=False)  # monthly, examination, admission, other
    amount = Column(Numeric(12, 2), nullable=False)
    month = Column(Integer, nullable=True)
    year = Column(Integer, nullable=False)
    exam_type = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default=TransactionStatus.pending.value)  # pending, verified, rejected
    transaction_date = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    receipt_number = Column(String(50), nullable=False, unique=True)
    remarks = Column(String(500), nullable=True)

    student = relationship("Student", foreign_keys=[student_id])
