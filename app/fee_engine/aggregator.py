"""
Fold per-student reconciliation results and the in-window ledger into report aggregates:
totals, per-month trend, top unpaid students, per-class collection rollup, daily collections.
"""

from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from functools import reduce
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from app.core.enums import TransactionStatus

from .reconciler import total
from .types import (
    ZERO,
    AggregateReport,
    ClassRollup,
    DailyCollection,
    MonthlyTrendPoint,
    ReconciliationResult,
    ReportWindow,
    StudentSnapshot,
    TransactionRecord,
)

DEFAULT_TOP_N = 10


def _in_window(transactions: Iterable[TransactionRecord], window: ReportWindow, status: TransactionStatus) -> List[TransactionRecord]:
    return [tx for tx in transactions if tx.status == status and window.contains(tx.transaction_date)]


def collection_rate(collected: Decimal, expected: Decimal) -> Decimal:
    """Percent of expected money already collected, one decimal place; 0 when nothing is expected."""
    if expected <= ZERO:
        return ZERO
    return (collected * Decimal("100") / expected).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def monthly_trend(
    results: Sequence[ReconciliationResult], transactions: Sequence[TransactionRecord], window: ReportWindow
) -> Tuple[MonthlyTrendPoint, ...]:
    """
    collected / pending come from transactions dated in each month.
    unpaid re-attributes every unpaid obligation to its own due month.
    """

    def add_unpaid(acc: Dict[date, Decimal], obligation) -> Dict[date, Decimal]:
        return {**acc, obligation.due_month: acc.get(obligation.due_month, ZERO) + obligation.amount}

    unpaid_by_month = reduce(add_unpaid, (o for r in results for o in r.unpaid), {})
    verified = _in_window(transactions, window, TransactionStatus.verified)
    pending = _in_window(transactions, window, TransactionStatus.pending)

    def in_month(txs: Iterable[TransactionRecord], month: date) -> Decimal:
        return total(tx.amount for tx in txs if tx.day.year == month.year and tx.day.month == month.month)

    return tuple(
        MonthlyTrendPoint(
            year=month.year,
            month=month.month,
            name=month.strftime("%b"),
            collected=in_month(verified, month),
            pending=in_month(pending, month),
            unpaid=unpaid_by_month.get(month, ZERO),
        )
        for month in window.months()
    )


def top_unpaid(results: Iterable[ReconciliationResult], limit: int = DEFAULT_TOP_N) -> Tuple[ReconciliationResult, ...]:
    owing = [r for r in results if r.due > ZERO]
    owing.sort(key=lambda r: (-r.due, r.student.name))
    return tuple(owing[:limit])


def class_rollup(
    students: Iterable[StudentSnapshot], transactions: Sequence[TransactionRecord], window: ReportWindow
) -> Tuple[ClassRollup, ...]:
    """Verified / pending in-window money grouped by the paying student's class, most collected first."""
    class_of = {str(s.id): s.class_name for s in students}
    collected: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    pending: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for tx in transactions:
        name = class_of.get(str(tx.student_id))
        if name is None or not window.contains(tx.transaction_date):
            continue
        if tx.status == TransactionStatus.verified:
            collected[name] += tx.amount
        elif tx.status == TransactionStatus.pending:
            pending[name] += tx.amount
    names = set(collected) | set(pending)
    rows = [ClassRollup(name=n, collected=collected[n], pending=pending[n]) for n in names]
    rows.sort(key=lambda row: (-row.collected, row.name))
    return tuple(rows)


def daily_collections(transactions: Iterable[TransactionRecord], window: ReportWindow) -> Tuple[DailyCollection, ...]:
    by_day: Dict[date, Decimal] = defaultdict(lambda: ZERO)
    for tx in _in_window(transactions, window, TransactionStatus.verified):
        by_day[tx.day] += tx.amount
    return tuple(DailyCollection(day=d, amount=by_day[d]) for d in sorted(by_day) if by_day[d] != ZERO)


def aggregate(
    results: Sequence[ReconciliationResult],
    transactions: Sequence[TransactionRecord],
    window: ReportWindow,
    top_n: int = DEFAULT_TOP_N,
    payers: Optional[Sequence[StudentSnapshot]] = None,
) -> AggregateReport:
    """
    Money totals, trend and class rollup fold over every supplied transaction dated in the window;
    payers names the students those transactions belong to (defaults to the reconciled students).
    """
    if payers is None:
        payers = [r.student for r in results]
    collected = total(tx.amount for tx in _in_window(transactions, window, TransactionStatus.verified))
    pending = total(tx.amount for tx in _in_window(transactions, window, TransactionStatus.pending))
    expected = total(r.expected for r in results)
    return AggregateReport(
        collected=collected,
        pending=pending,
        expected=expected,
        unpaid=total(r.due for r in results),
        collection_rate=collection_rate(collected, expected),
        monthly_trend=monthly_trend(results, transactions, window),
        top_unpaid=top_unpaid(results, top_n),
        class_rollup=class_rollup(payers, transactions, window),
    )
