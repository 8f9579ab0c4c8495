"""Unit tests for obligation expansion: admission boundary, window boundary, periodic fees."""

from datetime import date
from decimal import Decimal

import pytest

from app.core.enums import FeeType
from app.fee_engine import FeeScheduleResolver, ReportWindow, expand_obligations

from builders import fee, student, window


def _expand(schedule, s=None, w=None):
    return expand_obligations(s or student(), FeeScheduleResolver(schedule), w or window())


def test_monthly_starts_at_admission_month() -> None:
    obligations = _expand([fee(FeeType.MONTHLY, 1000)])
    assert [o.label for o in obligations] == ["Mar 2024", "Apr 2024", "May 2024", "Jun 2024"]
    assert all(o.amount == Decimal("1000") for o in obligations)
    assert obligations[0].due_month == date(2024, 3, 1)


@pytest.mark.parametrize(
    "admitted",
    [date(2023, 7, 1), date(2024, 1, 31), date(2024, 2, 29), date(2024, 6, 1), date(2024, 6, 30)],
)
def test_no_monthly_obligation_before_admission(admitted: date) -> None:
    obligations = _expand([fee(FeeType.MONTHLY, 1000)], s=student(admitted=admitted))
    first_eligible = max(date(admitted.year, admitted.month, 1), date(2024, 1, 1))
    assert obligations
    assert obligations[0].due_month == first_eligible
    assert all(o.due_month >= date(admitted.year, admitted.month, 1) for o in obligations)


def test_student_admitted_after_window_owes_nothing() -> None:
    assert _expand([fee(FeeType.MONTHLY, 1000), fee(FeeType.ADMISSION, 2000)], s=student(admitted=date(2024, 8, 2))) == []


def test_partial_month_window_covers_whole_months() -> None:
    obligations = _expand([fee(FeeType.MONTHLY, 1000)], w=window(date(2024, 4, 15), date(2024, 5, 3)))
    assert [o.label for o in obligations] == ["Apr 2024", "May 2024"]


def test_window_spanning_years() -> None:
    obligations = _expand(
        [fee(FeeType.MONTHLY, 1000)],
        s=student(admitted=date(2023, 1, 10)),
        w=window(date(2023, 11, 1), date(2024, 2, 29)),
    )
    assert [(o.period.year, o.period.month) for o in obligations] == [(2023, 11), (2023, 12), (2024, 1), (2024, 2)]


def test_inverted_window_yields_nothing() -> None:
    schedule = [fee(FeeType.MONTHLY, 1000), fee(FeeType.ADMISSION, 2000), fee(FeeType.EXAMINATION, 500, date(2024, 4, 1))]
    assert _expand(schedule, w=ReportWindow(start=date(2024, 6, 30), end=date(2024, 1, 1))) == []


def test_no_monthly_schedule_means_no_monthly_obligations() -> None:
    obligations = _expand([fee(FeeType.ADMISSION, 2000)])
    assert [o.fee_type for o in obligations] == [FeeType.ADMISSION]


def test_examination_inside_window() -> None:
    obligations = _expand([fee(FeeType.EXAMINATION, 500, date(2024, 4, 1))])
    assert len(obligations) == 1
    exam = obligations[0]
    assert exam.label == "Exam Fee (Apr)"
    assert exam.period.year == 2024 and exam.period.month is None
    assert exam.due_month == date(2024, 4, 1)


def test_examination_outside_window() -> None:
    assert _expand([fee(FeeType.EXAMINATION, 500, date(2024, 9, 1))]) == []


def test_examination_before_admission_is_not_owed() -> None:
    assert _expand([fee(FeeType.EXAMINATION, 500, date(2024, 2, 1))]) == []


def test_examination_in_admission_month_is_owed() -> None:
    obligations = _expand([fee(FeeType.EXAMINATION, 500, date(2024, 3, 20))])
    assert [o.label for o in obligations] == ["Exam Fee (Mar)"]


def test_admission_fee_once_in_admission_month() -> None:
    obligations = _expand([fee(FeeType.ADMISSION, 2000)], w=window(date(2023, 1, 1), date(2024, 12, 31)))
    assert len(obligations) == 1
    assert obligations[0].label == "Admission Fee"
    assert obligations[0].due_month == date(2024, 3, 1)
    assert obligations[0].period.year == 2024


def test_admission_fee_not_owed_when_admission_outside_window() -> None:
    assert _expand([fee(FeeType.ADMISSION, 2000)], s=student(admitted=date(2023, 12, 20))) == []


def test_registration_fee_follows_admission() -> None:
    obligations = _expand([fee(FeeType.REGISTRATION, 300), fee(FeeType.ADMISSION, 2000)])
    assert [o.label for o in obligations] == ["Admission Fee", "Registration Fee"]


def test_order_is_monthly_then_exam_then_admission() -> None:
    obligations = _expand([
        fee(FeeType.ADMISSION, 2000),
        fee(FeeType.EXAMINATION, 500, date(2024, 4, 1)),
        fee(FeeType.MONTHLY, 1000),
    ])
    assert [o.fee_type for o in obligations] == [FeeType.MONTHLY] * 4 + [FeeType.EXAMINATION, FeeType.ADMISSION]


def test_window_boundary_holds_for_every_obligation() -> None:
    w = window(date(2024, 2, 10), date(2024, 5, 20))
    obligations = _expand(
        [fee(FeeType.MONTHLY, 1000), fee(FeeType.ADMISSION, 2000), fee(FeeType.EXAMINATION, 500, date(2024, 4, 1))],
        s=student(admitted=date(2024, 1, 5)),
        w=w,
    )
    assert obligations
    assert all(w.contains_month(o.due_month) for o in obligations)
