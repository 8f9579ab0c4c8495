"""Payment index: (student, fee type, period) -> paid, built from pending and verified transactions."""

from typing import FrozenSet, Iterable, Optional, Set, Tuple

from app.core.enums import FeeType

from .types import FeeObligation, PeriodKey, TransactionRecord


def period_key(fee_type: FeeType, year: int, month: Optional[int] = None) -> PeriodKey:
    """
    Build the period identity used on both sides of reconciliation.
    Monthly fees are identified by month and year; every other fee type by year only.
    """
    fee_type = FeeType.normalize(fee_type)
    if fee_type == FeeType.MONTHLY:
        return PeriodKey(fee_type=fee_type, year=int(year), month=int(month) if month is not None else None)
    return PeriodKey(fee_type=fee_type, year=int(year), month=None)


def transaction_key(tx: TransactionRecord) -> Optional[PeriodKey]:
    """Period a transaction settles, or None when it cannot settle any obligation."""
    fee_type = FeeType.normalize(tx.fee_type)
    if fee_type == FeeType.OTHER:
        return None
    if fee_type == FeeType.MONTHLY and tx.month is None:
        return None
    return period_key(fee_type, tx.year, tx.month)


class PaymentIndex:
    """O(1) paid lookup. Rejected transactions never enter the index."""

    def __init__(self, paid: FrozenSet[Tuple[str, PeriodKey]]) -> None:
        self._paid = paid

    @classmethod
    def build(cls, transactions: Iterable[TransactionRecord], years: Optional[Iterable[int]] = None) -> "PaymentIndex":
        year_filter = set(years) if years is not None else None
        paid: Set[Tuple[str, PeriodKey]] = set()
        for tx in transactions:
            if not tx.counts_as_paid:
                continue
            if year_filter is not None and tx.year not in year_filter:
                continue
            key = transaction_key(tx)
            if key is not None:
                paid.add((str(tx.student_id), key))
        return cls(frozenset(paid))

    def has_paid(self, student_id: str, fee_type: FeeType, period: PeriodKey) -> bool:
        if FeeType.normalize(fee_type) != period.fee_type:
            return False
        return (str(student_id), period) in self._paid

    def covers(self, obligation: FeeObligation) -> bool:
        return self.has_paid(obligation.student_id, obligation.fee_type, obligation.period)

    def __len__(self) -> int:
        return len(self._paid)
