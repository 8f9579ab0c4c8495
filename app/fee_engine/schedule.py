"""
Resolve the applicable class fee per (class, fee type) from the active schedule rows.
Latest effective_from wins. With as_of set, rows that take effect after as_of are ignored.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from app.core.enums import FeeType

from .types import ZERO, FeeScheduleEntry


@dataclass(frozen=True)
class ResolvedFee:
    amount: Decimal
    anchor: date


class FeeScheduleResolver:
    """Pure lookup over a pre-fetched schedule; absence of a row is a zero result, never an error."""

    def __init__(self, entries: Iterable[FeeScheduleEntry], as_of: Optional[date] = None) -> None:
        self.as_of = as_of
        selected: Dict[Tuple[str, FeeType], FeeScheduleEntry] = {}
        for entry in entries:
            if not entry.is_active:
                continue
            if as_of is not None and entry.effective_from > as_of:
                continue
            key = (str(entry.class_id), FeeType.normalize(entry.fee_type))
            current = selected.get(key)
            # >= so that the later row in input order wins a tie on effective_from
            if current is None or entry.effective_from >= current.effective_from:
                selected[key] = entry
        self._entries = selected

    def entry_for(self, class_id: str, fee_type: FeeType) -> Optional[FeeScheduleEntry]:
        return self._entries.get((str(class_id), FeeType.normalize(fee_type)))

    def resolve(self, class_id: str, fee_type: FeeType) -> Decimal:
        entry = self.entry_for(class_id, fee_type)
        return entry.amount if entry is not None else ZERO

    def resolve_with_anchor(self, class_id: str, fee_type: FeeType) -> Optional[ResolvedFee]:
        entry = self.entry_for(class_id, fee_type)
        if entry is None:
            return None
        return ResolvedFee(amount=entry.amount, anchor=entry.effective_from)

    def __len__(self) -> int:
        return len(self._entries)
