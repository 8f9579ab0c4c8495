"""Fee report schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.enums import FeeReportStatus


# --- Dashboard ---
class MonthlyOverviewItem(BaseModel):
    """One calendar month of the dashboard chart."""

    name: str
    year: int
    month: int
    collected: Decimal
    pending: Decimal
    unpaid: Decimal


class UnpaidStudentSummary(BaseModel):
    id: str
    name: str
    class_name: str
    amount: Decimal
    months: List[str] = Field(default_factory=list)
    period: str
    photo: Optional[str] = None


class ClassWiseItem(BaseModel):
    name: str
    collected: Decimal
    pending: Decimal


class RecentTransactionItem(BaseModel):
    id: Optional[str] = None
    receipt_number: Optional[str] = None
    student_id: str
    student_name: str = "Unknown"
    contact_number: str = "N/A"
    student_photo: Optional[str] = None
    fee_type: str
    amount: Decimal
    status: str
    transaction_date: datetime


class DashboardResponse(BaseModel):
    start_date: date
    end_date: date
    collected: Decimal
    pending: Decimal
    unpaid: Decimal
    collectable: Decimal
    collection_rate: Decimal
    overview: List[MonthlyOverviewItem]
    unpaid_students: List[UnpaidStudentSummary]
    class_wise: List[ClassWiseItem]
    recent_transactions: List[RecentTransactionItem]


# --- Unpaid list ---
class UnpaidStudentItem(BaseModel):
    """Student owing fees in the window; details lists every unpaid period in order."""

    id: str
    name: str
    registration_number: Optional[str] = None
    class_name: str
    amount: Decimal
    details: List[str]
    period: str
    photo: Optional[str] = None
    contact_number: str = "N/A"


# --- Fee report ---
class FeeReportSummary(BaseModel):
    total_collected: Decimal
    total_expected: Decimal
    total_due: Decimal
    collection_rate: Decimal


class DailyCollectionItem(BaseModel):
    day: date
    amount: Decimal


class FeeReportStudentRow(BaseModel):
    id: str
    name: str
    roll_number: Optional[str] = None
    class_name: str
    section: Optional[str] = None
    collected_period: Decimal
    expected_period: Decimal
    due_amount: Decimal
    status: FeeReportStatus
    period: str
    last_payment_date: Optional[date] = None


class FeeReportResponse(BaseModel):
    start_date: date
    end_date: date
    summary: FeeReportSummary
    trend: List[DailyCollectionItem]
    student_report: List[FeeReportStudentRow]
