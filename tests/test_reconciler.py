"""Unit tests for per-student reconciliation and unpaid period compression."""

from datetime import date, datetime
from decimal import Decimal

from app.core.enums import FeeType, TransactionStatus
from app.fee_engine import FeeScheduleResolver, PaymentIndex, compress_unpaid_labels, expand_obligations, reconcile

from builders import fee, payment, student, window

SCHEDULE = [fee(FeeType.MONTHLY, 1000)]


def _reconcile(transactions, schedule=SCHEDULE, s=None, w=None):
    s = s or student()
    w = w or window()
    obligations = expand_obligations(s, FeeScheduleResolver(schedule), w)
    return reconcile(s, obligations, PaymentIndex.build(transactions), transactions, w)


def test_nothing_paid() -> None:
    result = _reconcile([])
    assert result.expected == Decimal("4000")
    assert result.due == Decimal("4000")
    assert result.collected == Decimal("0")
    assert result.unpaid_labels == ["Mar 2024", "Apr 2024", "May 2024", "Jun 2024"]
    assert not result.is_paid


def test_verified_month_clears_obligation_and_counts_as_collected() -> None:
    result = _reconcile([payment(FeeType.MONTHLY, 1000, month=3)])
    assert result.due == Decimal("3000")
    assert "Mar 2024" not in result.unpaid_labels
    assert result.collected == Decimal("1000")
    assert result.pending == Decimal("0")


def test_pending_clears_obligation_but_is_not_collected() -> None:
    result = _reconcile([payment(FeeType.MONTHLY, 1000, month=4, status=TransactionStatus.pending)])
    assert result.due == Decimal("3000")
    assert result.collected == Decimal("0")
    assert result.pending == Decimal("1000")


def test_rejected_payment_leaves_obligation_due() -> None:
    result = _reconcile([payment(FeeType.MONTHLY, 1000, month=3, status=TransactionStatus.rejected)])
    assert result.due == Decimal("4000")
    assert result.collected == Decimal("0")
    assert result.last_payment_date is None


def test_collected_only_counts_transactions_dated_in_window() -> None:
    # Paid for June, but the money came in after the window closed.
    result = _reconcile([payment(FeeType.MONTHLY, 1000, month=6, paid_on=datetime(2024, 7, 2, 9, 0))])
    assert result.due == Decimal("3000")
    assert result.collected == Decimal("0")
    assert result.last_payment_date == date(2024, 7, 2)


def test_fully_paid_student() -> None:
    result = _reconcile([payment(FeeType.MONTHLY, 1000, month=m) for m in (3, 4, 5, 6)])
    assert result.due == Decimal("0")
    assert result.is_paid
    assert result.period_label == "-"
    assert result.due <= result.expected


def test_due_never_exceeds_expected() -> None:
    schedule = [fee(FeeType.MONTHLY, 1000), fee(FeeType.ADMISSION, 2000), fee(FeeType.EXAMINATION, 500, date(2024, 4, 1))]
    for paid_months in ([], [3], [3, 4, 5], [3, 4, 5, 6]):
        result = _reconcile([payment(FeeType.MONTHLY, 1000, month=m) for m in paid_months], schedule=schedule)
        assert Decimal("0") <= result.due <= result.expected


def test_unpaid_labels_keep_expander_order() -> None:
    schedule = [fee(FeeType.ADMISSION, 2000), fee(FeeType.EXAMINATION, 500, date(2024, 4, 1)), fee(FeeType.MONTHLY, 1000)]
    result = _reconcile([payment(FeeType.MONTHLY, 1000, month=4)], schedule=schedule)
    assert result.unpaid_labels == ["Mar 2024", "May 2024", "Jun 2024", "Exam Fee (Apr)", "Admission Fee"]
    assert result.due == Decimal("5500")


def test_compress_short_list_is_literal() -> None:
    result = _reconcile([payment(FeeType.MONTHLY, 1000, month=3)])
    assert result.period_label == "Apr 2024, May 2024, Jun 2024"


def test_compress_long_list_with_admission() -> None:
    s = student()
    obligations = expand_obligations(
        s,
        FeeScheduleResolver([fee(FeeType.MONTHLY, 1000), fee(FeeType.ADMISSION, 2000)]),
        window(date(2024, 3, 1), date(2024, 7, 31)),
    )
    assert compress_unpaid_labels(obligations) == "Mar 2024 - Jul 2024 (5 Months) + Adm. Fee"


def test_compress_long_list_keeps_exam_and_registration() -> None:
    s = student()
    obligations = expand_obligations(
        s,
        FeeScheduleResolver([
            fee(FeeType.MONTHLY, 1000),
            fee(FeeType.EXAMINATION, 500, date(2024, 4, 1)),
            fee(FeeType.REGISTRATION, 300),
        ]),
        window(),
    )
    assert compress_unpaid_labels(obligations) == "Mar 2024 - Jun 2024 (4 Months) + Exam Fee (Apr) + Reg. Fee"


def test_compress_single_month_with_one_off_fees() -> None:
    s = student(admitted=date(2024, 4, 2))
    obligations = expand_obligations(
        s,
        FeeScheduleResolver([
            fee(FeeType.MONTHLY, 1000),
            fee(FeeType.EXAMINATION, 500, date(2024, 4, 20)),
            fee(FeeType.ADMISSION, 2000),
            fee(FeeType.REGISTRATION, 300),
        ]),
        window(date(2024, 4, 1), date(2024, 4, 30)),
    )
    assert compress_unpaid_labels(obligations) == "Apr 2024 + Exam Fee (Apr) + Adm. Fee + Reg. Fee"


def test_compress_empty() -> None:
    assert compress_unpaid_labels([]) == "-"
