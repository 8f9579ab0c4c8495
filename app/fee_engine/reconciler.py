"""Reconcile one student's obligations against the payment index and the in-window ledger."""

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from app.core.enums import FeeType, TransactionStatus

from .payments import PaymentIndex
from .types import ZERO, FeeObligation, ReconciliationResult, ReportWindow, StudentSnapshot, TransactionRecord

NOTHING_DUE_LABEL = "-"
MAX_LITERAL_LABELS = 3

SHORT_SUFFIXES = {
    FeeType.ADMISSION: "Adm. Fee",
    FeeType.REGISTRATION: "Reg. Fee",
}


def total(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def compress_unpaid_labels(unpaid: Sequence[FeeObligation]) -> str:
    """
    Short display string for an ordered list of unpaid obligations.

    Up to three entries are listed literally. Longer lists collapse the monthly entries
    into "<first> - <last> (<n> Months)" and append the one-off fees as "+ ..." suffixes.
    Display only: amounts are never derived from this string.
    """
    if not unpaid:
        return NOTHING_DUE_LABEL
    if len(unpaid) <= MAX_LITERAL_LABELS:
        return ", ".join(o.label for o in unpaid)

    months = [o for o in unpaid if o.fee_type == FeeType.MONTHLY]
    others = [o for o in unpaid if o.fee_type != FeeType.MONTHLY]
    if not months:
        return ", ".join(o.label for o in unpaid)

    if len(months) == 1:
        text = months[0].label
    else:
        text = f"{months[0].label} - {months[-1].label} ({len(months)} Months)"
    for o in others:
        text += f" + {SHORT_SUFFIXES.get(o.fee_type, o.label)}"
    return text


def _student_amount(
    transactions: Iterable[TransactionRecord], student_id: str, status: TransactionStatus, window: ReportWindow
) -> Decimal:
    return total(
        tx.amount
        for tx in transactions
        if str(tx.student_id) == student_id and tx.status == status and window.contains(tx.transaction_date)
    )


def _last_payment_date(transactions: Iterable[TransactionRecord], student_id: str) -> Optional[date]:
    days = [tx.day for tx in transactions if str(tx.student_id) == student_id and tx.counts_as_paid]
    return max(days) if days else None


def reconcile(
    student: StudentSnapshot,
    obligations: Sequence[FeeObligation],
    payment_index: PaymentIndex,
    transactions: Sequence[TransactionRecord],
    window: ReportWindow,
) -> ReconciliationResult:
    """
    expected: every obligation, paid or not
    due: obligations with no pending-or-verified transaction for their period
    collected / pending: this student's verified / pending money dated inside the window
    """
    unpaid: List[FeeObligation] = [o for o in obligations if not payment_index.covers(o)]
    student_id = str(student.id)
    return ReconciliationResult(
        student=student,
        obligations=tuple(obligations),
        unpaid=tuple(unpaid),
        expected=total(o.amount for o in obligations),
        collected=_student_amount(transactions, student_id, TransactionStatus.verified, window),
        pending=_student_amount(transactions, student_id, TransactionStatus.pending, window),
        due=total(o.amount for o in unpaid),
        period_label=compress_unpaid_labels(unpaid),
        last_payment_date=_last_payment_date(transactions, student_id),
    )
