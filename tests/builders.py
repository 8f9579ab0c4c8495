"""Snapshot builders shared by the fee engine tests."""

from datetime import date, datetime
from decimal import Decimal

from app.core.enums import FeeType, TransactionStatus
from app.fee_engine import FeeScheduleEntry, ReportWindow, StudentSnapshot, TransactionRecord

CLASS_ID = "class-5"


def student(
    student_id: str = "s1",
    name: str = "Asha Verma",
    admitted: date = date(2024, 3, 15),
    class_id: str = CLASS_ID,
    class_name: str = "5th",
    **extra,
) -> StudentSnapshot:
    return StudentSnapshot(
        id=student_id,
        name=name,
        class_id=class_id,
        class_name=class_name,
        admission_date=admitted,
        **extra,
    )


def fee(fee_type: FeeType, amount, effective_from: date = date(2024, 1, 1), class_id: str = CLASS_ID, is_active: bool = True) -> FeeScheduleEntry:
    return FeeScheduleEntry(
        class_id=class_id,
        fee_type=fee_type,
        amount=Decimal(str(amount)),
        effective_from=effective_from,
        is_active=is_active,
    )


def payment(
    fee_type: FeeType,
    amount,
    year: int = 2024,
    month=None,
    student_id: str = "s1",
    status: TransactionStatus = TransactionStatus.verified,
    paid_on=None,
) -> TransactionRecord:
    if paid_on is None:
        paid_on = datetime(year, month or 1, 10, 11, 30)
    return TransactionRecord(
        student_id=student_id,
        fee_type=fee_type,
        month=month,
        year=year,
        amount=Decimal(str(amount)),
        status=status,
        transaction_date=paid_on,
    )


def window(start: date = date(2024, 1, 1), end: date = date(2024, 6, 30)) -> ReportWindow:
    return ReportWindow(start=start, end=end)
