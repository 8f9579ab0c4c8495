"""Entry points of the fee reconciliation engine. Pure functions over an in-memory snapshot."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from .aggregator import DEFAULT_TOP_N, aggregate
from .expander import expand_obligations
from .payments import PaymentIndex
from .reconciler import reconcile
from .schedule import FeeScheduleResolver
from .types import (
    ZERO,
    AggregateReport,
    FeeScheduleEntry,
    ReconciliationResult,
    ReportWindow,
    StudentSnapshot,
    TransactionRecord,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeSnapshot:
    """
    Roster, active fee schedule and pending/verified ledger as read at one point in time.

    former_students are inactive students who still have ledger rows dated inside the window.
    They owe nothing but their money counts towards collected / pending.
    """

    students: Tuple[StudentSnapshot, ...]
    schedule: Tuple[FeeScheduleEntry, ...]
    transactions: Tuple[TransactionRecord, ...]
    former_students: Tuple[StudentSnapshot, ...] = ()

    @property
    def payers(self) -> Tuple[StudentSnapshot, ...]:
        return self.students + self.former_students


def filter_students(
    students: Sequence[StudentSnapshot],
    class_id: Optional[str] = None,
    search: Optional[str] = None,
    section: Optional[str] = None,
    student_id: Optional[str] = None,
) -> List[StudentSnapshot]:
    """Narrow the population. 'all' or empty values mean no filter; search matches name or registration number."""
    out = list(students)
    if class_id and str(class_id) != "all":
        out = [s for s in out if str(s.class_id) == str(class_id)]
    if section and section != "all":
        out = [s for s in out if s.section == section]
    if student_id:
        out = [s for s in out if str(s.id) == str(student_id)]
    needle = (search or "").strip().lower()
    if needle:
        out = [
            s
            for s in out
            if needle in s.name.lower() or needle in (s.registration_number or "").lower()
        ]
    return out


def _group_by_student(transactions: Sequence[TransactionRecord]) -> Dict[str, List[TransactionRecord]]:
    grouped: Dict[str, List[TransactionRecord]] = defaultdict(list)
    for tx in transactions:
        grouped[str(tx.student_id)].append(tx)
    return grouped


def reconcile_students(
    students: Sequence[StudentSnapshot],
    schedule: Sequence[FeeScheduleEntry],
    transactions: Sequence[TransactionRecord],
    window: ReportWindow,
    as_of: Optional[date] = None,
) -> List[ReconciliationResult]:
    """One result per student, in roster order."""
    resolver = FeeScheduleResolver(schedule, as_of=as_of)
    index = PaymentIndex.build(transactions, years=window.years())
    by_student = _group_by_student(transactions)
    return [
        reconcile(
            student,
            expand_obligations(student, resolver, window),
            index,
            by_student.get(str(student.id), []),
            window,
        )
        for student in students
    ]


def _population_transactions(
    students: Sequence[StudentSnapshot], transactions: Sequence[TransactionRecord]
) -> List[TransactionRecord]:
    ids = {str(s.id) for s in students}
    return [tx for tx in transactions if str(tx.student_id) in ids]


def compute_report(
    snapshot: FeeSnapshot,
    window: ReportWindow,
    class_id: Optional[str] = None,
    search: Optional[str] = None,
    top_n: int = DEFAULT_TOP_N,
    as_of: Optional[date] = None,
) -> AggregateReport:
    """
    Dashboard aggregate for the filtered population. Obligations come from active students only;
    collected / pending also count in-window payments of former students.
    """
    students = filter_students(snapshot.students, class_id=class_id, search=search)
    payers = filter_students(snapshot.payers, class_id=class_id, search=search)
    results = reconcile_students(
        students,
        snapshot.schedule,
        _population_transactions(students, snapshot.transactions),
        window,
        as_of=as_of,
    )
    report = aggregate(
        results,
        _population_transactions(payers, snapshot.transactions),
        window,
        top_n=top_n,
        payers=payers,
    )
    logger.debug(
        "Fee report %s..%s: %d students, expected=%s collected=%s pending=%s unpaid=%s",
        window.start,
        window.end,
        len(results),
        report.expected,
        report.collected,
        report.pending,
        report.unpaid,
    )
    return report


def compute_unpaid_list(
    snapshot: FeeSnapshot,
    window: ReportWindow,
    class_id: Optional[str] = None,
    search: Optional[str] = None,
    as_of: Optional[date] = None,
) -> List[ReconciliationResult]:
    """Students with something due, highest due first."""
    students = filter_students(snapshot.students, class_id=class_id, search=search)
    transactions = _population_transactions(students, snapshot.transactions)
    results = reconcile_students(students, snapshot.schedule, transactions, window, as_of=as_of)
    unpaid = [r for r in results if r.due > ZERO]
    unpaid.sort(key=lambda r: (-r.due, r.student.name))
    logger.debug("Unpaid list %s..%s: %d of %d students owe fees", window.start, window.end, len(unpaid), len(results))
    return unpaid
