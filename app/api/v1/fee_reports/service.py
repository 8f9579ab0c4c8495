"""Fee reports service: load a roster/schedule/ledger snapshot, run the fee engine, shape the three report views."""

import logging
from calendar import monthrange
from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.enums import FeeReportStatus, FeeType, TransactionStatus
from app.core.exceptions import ServiceError, SnapshotLoadError
from app.core.models import ClassFee, FeeTransaction, SchoolClass, Student
from app.core.timezone import day_bounds, school_today, to_school_time
from app.fee_engine import (
    FeeScheduleEntry,
    FeeSnapshot,
    ReconciliationResult,
    ReportWindow,
    StudentSnapshot,
    TransactionRecord,
    compute_report,
    compute_unpaid_list,
    daily_collections,
    filter_students,
    reconcile_students,
)
from app.fee_engine.aggregator import collection_rate

from .schemas import (
    ClassWiseItem,
    DailyCollectionItem,
    DashboardResponse,
    FeeReportResponse,
    FeeReportStudentRow,
    FeeReportSummary,
    MonthlyOverviewItem,
    RecentTransactionItem,
    UnpaidStudentItem,
    UnpaidStudentSummary,
)

logger = logging.getLogger(__name__)

COUNTED_STATUSES = (TransactionStatus.pending.value, TransactionStatus.verified.value)


def _to_str(val) -> Optional[str]:
    if val is None:
        return None
    return str(val)


def _to_uuid(val) -> Optional[UUID]:
    if val is None:
        return None
    try:
        return val if isinstance(val, UUID) else UUID(str(val))
    except ValueError:
        raise ServiceError("Invalid class", status.HTTP_400_BAD_REQUEST)


def _to_decimal(val) -> Decimal:
    if val is None:
        return Decimal("0")
    return val if isinstance(val, Decimal) else Decimal(str(val))


def resolve_window(start_date: Optional[date], end_date: Optional[date], today: Optional[date] = None) -> ReportWindow:
    """Missing bounds default to 1 January of the current year and the end of the current month."""
    today = today or school_today()
    start = start_date or date(today.year, 1, 1)
    end = end_date or date(today.year, today.month, monthrange(today.year, today.month)[1])
    return ReportWindow(start=start, end=end)


def _class_filter(class_id: Optional[str]) -> Optional[str]:
    """Canonical class id string, or None for no class filter ("all" or empty)."""
    if not class_id or class_id == "all":
        return None
    return str(_to_uuid(class_id))


def _schedule_as_of() -> Optional[date]:
    return school_today() if settings.fee_schedule_respect_effective_date else None


# --- Snapshot loading ---
def _student_snapshot(student: Student, class_name: Optional[str]) -> StudentSnapshot:
    admitted = student.admission_date
    if admitted is None:
        created = student.created_at
        admitted = to_school_time(created).date() if isinstance(created, datetime) else (created or school_today())
    return StudentSnapshot(
        id=str(student.id),
        name=student.name,
        class_id=str(student.class_id),
        class_name=class_name or "N/A",
        admission_date=admitted,
        registration_number=student.registration_number,
        section=student.section,
        roll_number=student.roll_number,
        is_active=bool(student.is_active),
        photo=student.photo,
        contact_number=student.mobile,
    )


def _schedule_entry(fee: ClassFee) -> FeeScheduleEntry:
    return FeeScheduleEntry(
        class_id=str(fee.class_id),
        fee_type=FeeType.normalize(fee.fee_type),
        amount=_to_decimal(fee.amount),
        effective_from=fee.effective_from,
        is_active=bool(fee.is_active),
    )


def _transaction_record(tx: FeeTransaction) -> TransactionRecord:
    return TransactionRecord(
        id=_to_str(tx.id),
        student_id=str(tx.student_id),
        fee_type=FeeType.normalize(tx.fee_type),
        month=tx.month,
        year=tx.year,
        amount=_to_decimal(tx.amount),
        status=TransactionStatus(tx.status),
        transaction_date=to_school_time(tx.transaction_date),
        receipt_number=tx.receipt_number,
    )


async def load_snapshot(
    db: AsyncSession,
    window: ReportWindow,
    class_id: Optional[str] = None,
) -> FeeSnapshot:
    """
    Read active students (with class name), active class fee rows and the pending/verified ledger.

    The ledger holds every row of the active students for the years the window touches (paid
    history) plus every row of any student in the class dated inside the window (money in the
    window, whatever period it settles). Inactive students behind those rows come back as
    former students.
    """
    class_uuid = _to_uuid(class_id) if class_id is not None else None
    try:
        stmt = (
            select(Student, SchoolClass.name.label("class_name"))
            .join(SchoolClass, Student.class_id == SchoolClass.id)
            .where(Student.is_active.is_(True))
        )
        if class_uuid is not None:
            stmt = stmt.where(Student.class_id == class_uuid)
        stmt = stmt.order_by(Student.name)
        rows = (await db.execute(stmt)).all()
        students = tuple(_student_snapshot(s, class_name) for s, class_name in rows)

        fees = (
            await db.execute(select(ClassFee).where(ClassFee.is_active.is_(True)))
        ).scalars().all()
        schedule = tuple(_schedule_entry(f) for f in fees)

        transactions: tuple = ()
        former_students: tuple = ()
        years = window.years()
        if years:
            starts_at, ends_before = day_bounds(window.start, window.end)
            tx_stmt = (
                select(FeeTransaction)
                .join(Student, FeeTransaction.student_id == Student.id)
                .where(
                    FeeTransaction.status.in_(COUNTED_STATUSES),
                    or_(
                        and_(Student.is_active.is_(True), FeeTransaction.year.in_(years)),
                        and_(
                            FeeTransaction.transaction_date >= starts_at,
                            FeeTransaction.transaction_date < ends_before,
                        ),
                    ),
                )
            )
            if class_uuid is not None:
                tx_stmt = tx_stmt.where(Student.class_id == class_uuid)
            txs = (await db.execute(tx_stmt)).scalars().all()
            transactions = tuple(_transaction_record(t) for t in txs)

            active_ids = {s.id for s in students}
            former_ids = {t.student_id for t in txs if str(t.student_id) not in active_ids}
            if former_ids:
                former_rows = (
                    await db.execute(
                        select(Student, SchoolClass.name.label("class_name"))
                        .join(SchoolClass, Student.class_id == SchoolClass.id)
                        .where(Student.id.in_(former_ids))
                        .order_by(Student.name)
                    )
                ).all()
                former_students = tuple(_student_snapshot(s, class_name) for s, class_name in former_rows)
    except SQLAlchemyError:
        logger.exception("Could not load fee snapshot for %s..%s", window.start, window.end)
        raise SnapshotLoadError()

    logger.info(
        "Loaded fee snapshot: %d students (%d former), %d schedule rows, %d transactions",
        len(students),
        len(former_students),
        len(schedule),
        len(transactions),
    )
    return FeeSnapshot(
        students=students,
        schedule=schedule,
        transactions=transactions,
        former_students=former_students,
    )


# --- Dashboard ---
def _transaction_sort_key(tx: TransactionRecord) -> datetime:
    moment = tx.transaction_date
    return moment if isinstance(moment, datetime) else datetime.combine(moment, time.min)


def _recent_transactions(snapshot: FeeSnapshot, window: ReportWindow, students, limit: int) -> List[RecentTransactionItem]:
    by_id = {s.id: s for s in students}
    in_window = [tx for tx in snapshot.transactions if tx.student_id in by_id and window.contains(tx.transaction_date)]
    in_window.sort(key=_transaction_sort_key, reverse=True)
    items = []
    for tx in in_window[:limit]:
        student = by_id[tx.student_id]
        items.append(
            RecentTransactionItem(
                id=tx.id,
                receipt_number=tx.receipt_number,
                student_id=tx.student_id,
                student_name=student.name,
                contact_number=student.contact_number or "N/A",
                student_photo=student.photo,
                fee_type=tx.fee_type.value,
                amount=tx.amount,
                status=tx.status.value,
                transaction_date=tx.transaction_date,
            )
        )
    return items


async def get_dashboard(
    db: AsyncSession,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    class_id: Optional[str] = None,
    search: Optional[str] = None,
) -> DashboardResponse:
    window = resolve_window(start_date, end_date)
    class_id = _class_filter(class_id)
    snapshot = await load_snapshot(db, window, class_id=class_id)
    report = compute_report(
        snapshot,
        window,
        class_id=class_id,
        search=search,
        top_n=settings.unpaid_top_n,
        as_of=_schedule_as_of(),
    )
    payers = filter_students(snapshot.payers, class_id=class_id, search=search)
    return DashboardResponse(
        start_date=window.start,
        end_date=window.end,
        collected=report.collected,
        pending=report.pending,
        unpaid=report.unpaid,
        collectable=report.expected,
        collection_rate=report.collection_rate,
        overview=[
            MonthlyOverviewItem(
                name=p.name,
                year=p.year,
                month=p.month,
                collected=p.collected,
                pending=p.pending,
                unpaid=p.unpaid,
            )
            for p in report.monthly_trend
        ],
        unpaid_students=[
            UnpaidStudentSummary(
                id=r.student.id,
                name=r.student.name,
                class_name=r.student.class_name,
                amount=r.due,
                months=r.unpaid_labels,
                period=r.period_label,
                photo=r.student.photo,
            )
            for r in report.top_unpaid
        ],
        class_wise=[ClassWiseItem(name=c.name, collected=c.collected, pending=c.pending) for c in report.class_rollup],
        recent_transactions=_recent_transactions(snapshot, window, payers, settings.recent_transactions_limit),
    )


# --- Unpaid list ---
def _unpaid_item(result: ReconciliationResult) -> UnpaidStudentItem:
    return UnpaidStudentItem(
        id=result.student.id,
        name=result.student.name,
        registration_number=result.student.registration_number,
        class_name=result.student.class_name,
        amount=result.due,
        details=result.unpaid_labels,
        period=result.period_label,
        photo=result.student.photo,
        contact_number=result.student.contact_number or "N/A",
    )


async def get_unpaid_students(
    db: AsyncSession,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    class_id: Optional[str] = None,
    search: Optional[str] = None,
) -> List[UnpaidStudentItem]:
    window = resolve_window(start_date, end_date)
    class_id = _class_filter(class_id)
    snapshot = await load_snapshot(db, window, class_id=class_id)
    results = compute_unpaid_list(snapshot, window, class_id=class_id, search=search, as_of=_schedule_as_of())
    return [_unpaid_item(r) for r in results]


# --- Fee report ---
def _report_row(result: ReconciliationResult) -> FeeReportStudentRow:
    student = result.student
    return FeeReportStudentRow(
        id=student.id,
        name=student.name,
        roll_number=student.roll_number,
        class_name=student.class_name,
        section=student.section,
        collected_period=result.collected,
        expected_period=result.expected,
        due_amount=result.due,
        status=FeeReportStatus.PAID if result.is_paid else FeeReportStatus.DUE,
        period=result.period_label,
        last_payment_date=result.last_payment_date,
    )


async def get_fee_report(
    db: AsyncSession,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    class_id: Optional[str] = None,
    section: Optional[str] = None,
    student_id: Optional[str] = None,
) -> FeeReportResponse:
    window = resolve_window(start_date, end_date)
    class_id = _class_filter(class_id)
    snapshot = await load_snapshot(db, window, class_id=class_id)
    students = filter_students(snapshot.students, class_id=class_id, section=section, student_id=student_id)
    ids = {s.id for s in students}
    transactions = [tx for tx in snapshot.transactions if tx.student_id in ids]
    results = reconcile_students(students, snapshot.schedule, transactions, window, as_of=_schedule_as_of())

    total_collected = sum((r.collected for r in results), Decimal("0"))
    total_expected = sum((r.expected for r in results), Decimal("0"))
    total_due = sum((r.due for r in results), Decimal("0"))
    return FeeReportResponse(
        start_date=window.start,
        end_date=window.end,
        summary=FeeReportSummary(
            total_collected=total_collected,
            total_expected=total_expected,
            total_due=total_due,
            collection_rate=collection_rate(total_collected, total_expected),
        ),
        trend=[DailyCollectionItem(day=d.day, amount=d.amount) for d in daily_collections(transactions, window)],
        student_report=[_report_row(r) for r in results],
    )
