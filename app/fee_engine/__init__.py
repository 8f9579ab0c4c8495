"""Fee obligation and reconciliation engine: schedule resolver, obligation expander, payment index, reconciler, aggregator."""

from app.fee_engine.aggregator import aggregate, daily_collections
from app.fee_engine.engine import (
    FeeSnapshot,
    compute_report,
    compute_unpaid_list,
    filter_students,
    reconcile_students,
)
from app.fee_engine.expander import expand_obligations
from app.fee_engine.payments import PaymentIndex, period_key
from app.fee_engine.reconciler import compress_unpaid_labels, reconcile
from app.fee_engine.schedule import FeeScheduleResolver, ResolvedFee
from app.fee_engine.types import (
    AggregateReport,
    ClassRollup,
    DailyCollection,
    FeeObligation,
    FeeScheduleEntry,
    MonthlyTrendPoint,
    PeriodKey,
    ReconciliationResult,
    ReportWindow,
    StudentSnapshot,
    TransactionRecord,
)

__all__ = [
    "AggregateReport",
    "ClassRollup",
    "DailyCollection",
    "FeeObligation",
    "FeeScheduleEntry",
    "FeeScheduleResolver",
    "FeeSnapshot",
    "MonthlyTrendPoint",
    "PaymentIndex",
    "PeriodKey",
    "ReconciliationResult",
    "ReportWindow",
    "ResolvedFee",
    "StudentSnapshot",
    "TransactionRecord",
    "aggregate",
    "compress_unpaid_labels",
    "compute_report",
    "compute_unpaid_list",
    "daily_collections",
    "expand_obligations",
    "filter_students",
    "period_key",
    "reconcile",
    "reconcile_students",
]
