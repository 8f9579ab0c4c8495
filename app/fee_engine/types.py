"""Immutable inputs and results of the fee reconciliation engine.

Inputs are point-in-time snapshots handed over by the caller (roster, class fee
schedule, transaction ledger). Results are derived values; nothing here is
persisted.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterator, List, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from app.core.enums import FeeType, TransactionStatus

ZERO = Decimal("0")

DateLike = Union[date, datetime]


def as_date(value: DateLike) -> date:
    """Drop the time part of a datetime; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def month_start(value: DateLike) -> date:
    day = as_date(value)
    return date(day.year, day.month, 1)


def iter_months(start: DateLike, end: DateLike) -> Iterator[date]:
    """First day of every calendar month from start's month to end's month, inclusive."""
    current = month_start(start)
    last = month_start(end)
    while current <= last:
        yield current
        current += relativedelta(months=1)


@dataclass(frozen=True)
class StudentSnapshot:
    id: str
    name: str
    class_id: str
    admission_date: date
    class_name: str = "N/A"
    registration_number: Optional[str] = None
    section: Optional[str] = None
    roll_number: Optional[str] = None
    is_active: bool = True
    photo: Optional[str] = None
    contact_number: Optional[str] = None

    @property
    def admission_month(self) -> date:
        return month_start(self.admission_date)


@dataclass(frozen=True)
class FeeScheduleEntry:
    class_id: str
    fee_type: FeeType
    amount: Decimal
    effective_from: date
    is_active: bool = True


@dataclass(frozen=True)
class TransactionRecord:
    student_id: str
    fee_type: FeeType
    year: int
    amount: Decimal
    status: TransactionStatus
    transaction_date: DateLike
    month: Optional[int] = None
    id: Optional[str] = None
    receipt_number: Optional[str] = None

    @property
    def counts_as_paid(self) -> bool:
        return self.status in (TransactionStatus.pending, TransactionStatus.verified)

    @property
    def day(self) -> date:
        return as_date(self.transaction_date)


@dataclass(frozen=True)
class ReportWindow:
    """Inclusive [start, end] date range; obligations are evaluated per touched calendar month."""

    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def months(self) -> Tuple[date, ...]:
        if self.is_empty:
            return ()
        return tuple(iter_months(self.start, self.end))

    def contains(self, value: DateLike) -> bool:
        return self.start <= as_date(value) <= self.end

    def contains_month(self, value: DateLike) -> bool:
        if self.is_empty:
            return False
        return month_start(self.start) <= month_start(value) <= month_start(self.end)

    def years(self) -> Tuple[int, ...]:
        return tuple(sorted({m.year for m in self.months()}))


@dataclass(frozen=True)
class PeriodKey:
    """Identity shared by an obligation and the transactions that settle it."""

    fee_type: FeeType
    year: int
    month: Optional[int] = None


@dataclass(frozen=True)
class FeeObligation:
    student_id: str
    fee_type: FeeType
    period: PeriodKey
    amount: Decimal
    label: str
    due_month: date


@dataclass(frozen=True)
class ReconciliationResult:
    student: StudentSnapshot
    obligations: Tuple[FeeObligation, ...]
    unpaid: Tuple[FeeObligation, ...]
    expected: Decimal
    collected: Decimal
    pending: Decimal
    due: Decimal
    period_label: str
    last_payment_date: Optional[date] = None

    @property
    def unpaid_labels(self) -> List[str]:
        return [o.label for o in self.unpaid]

    @property
    def is_paid(self) -> bool:
        return self.due <= ZERO


@dataclass(frozen=True)
class MonthlyTrendPoint:
    year: int
    month: int
    name: str
    collected: Decimal = ZERO
    pending: Decimal = ZERO
    unpaid: Decimal = ZERO


@dataclass(frozen=True)
class DailyCollection:
    day: date
    amount: Decimal


@dataclass(frozen=True)
class ClassRollup:
    name: str
    collected: Decimal = ZERO
    pending: Decimal = ZERO


@dataclass(frozen=True)
class AggregateReport:
    collected: Decimal = ZERO
    pending: Decimal = ZERO
    expected: Decimal = ZERO
    unpaid: Decimal = ZERO
    collection_rate: Decimal = ZERO
    monthly_trend: Tuple[MonthlyTrendPoint, ...] = field(default_factory=tuple)
    top_unpaid: Tuple[ReconciliationResult, ...] = field(default_factory=tuple)
    class_rollup: Tuple[ClassRollup, ...] = field(default_factory=tuple)
