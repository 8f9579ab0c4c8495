"""
Expand class fee rules into dated obligations for one student and one report window.
MONTHLY: every window month from the admission month onward
EXAMINATION: the schedule's anchor month, if inside the window and not before admission
ADMISSION / REGISTRATION: the admission month, if inside the window
"""

from typing import List

from app.core.enums import FeeType

from .payments import period_key
from .schedule import FeeScheduleResolver
from .types import ZERO, FeeObligation, ReportWindow, StudentSnapshot

ADMISSION_FEE_LABEL = "Admission Fee"
REGISTRATION_FEE_LABEL = "Registration Fee"

# Fee types owed once, in the month the student was admitted.
ONCE_PER_ADMISSION = (
    (FeeType.ADMISSION, ADMISSION_FEE_LABEL),
    (FeeType.REGISTRATION, REGISTRATION_FEE_LABEL),
)


def monthly_label(month) -> str:
    return month.strftime("%b %Y")


def exam_label(anchor) -> str:
    return f"Exam Fee ({anchor.strftime('%b')})"


def _monthly_obligations(
    student: StudentSnapshot, resolver: FeeScheduleResolver, window: ReportWindow
) -> List[FeeObligation]:
    amount = resolver.resolve(student.class_id, FeeType.MONTHLY)
    if amount <= ZERO:
        return []
    admitted = student.admission_month
    return [
        FeeObligation(
            student_id=student.id,
            fee_type=FeeType.MONTHLY,
            period=period_key(FeeType.MONTHLY, month.year, month.month),
            amount=amount,
            label=monthly_label(month),
            due_month=month,
        )
        for month in window.months()
        if month >= admitted
    ]


def _examination_obligations(
    student: StudentSnapshot, resolver: FeeScheduleResolver, window: ReportWindow
) -> List[FeeObligation]:
    resolved = resolver.resolve_with_anchor(student.class_id, FeeType.EXAMINATION)
    if resolved is None or resolved.amount <= ZERO:
        return []
    anchor_month = resolved.anchor.replace(day=1)
    if not window.contains_month(anchor_month):
        return []
    if student.admission_month > anchor_month:
        return []
    return [
        FeeObligation(
            student_id=student.id,
            fee_type=FeeType.EXAMINATION,
            period=period_key(FeeType.EXAMINATION, anchor_month.year),
            amount=resolved.amount,
            label=exam_label(resolved.anchor),
            due_month=anchor_month,
        )
    ]


def _admission_obligations(
    student: StudentSnapshot, resolver: FeeScheduleResolver, window: ReportWindow
) -> List[FeeObligation]:
    admitted = student.admission_month
    if not window.contains_month(admitted):
        return []
    out: List[FeeObligation] = []
    for fee_type, label in ONCE_PER_ADMISSION:
        amount = resolver.resolve(student.class_id, fee_type)
        if amount <= ZERO:
            continue
        out.append(
            FeeObligation(
                student_id=student.id,
                fee_type=fee_type,
                period=period_key(fee_type, admitted.year),
                amount=amount,
                label=label,
                due_month=admitted,
            )
        )
    return out


def expand_obligations(
    student: StudentSnapshot, resolver: FeeScheduleResolver, window: ReportWindow
) -> List[FeeObligation]:
    """All obligations of one student inside the window: monthly first (in month order), then exam, then admission."""
    if window.is_empty:
        return []
    return (
        _monthly_obligations(student, resolver, window)
        + _examination_obligations(student, resolver, window)
        + _admission_obligations(student, resolver, window)
    )
