"""Rule 37 calculation engine - core business logic for 180-day ITC reversal"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Mapping, NamedTuple

from rule37_service.domain.interest import round2
from rule37_service.domain.matching import partition_by_supplier, process_supplier
from rule37_service.domain.models import (
    CalculationSummary,
    InterestRow,
    InterestStatus,
    LedgerEntry,
    LedgerResult,
    RiskCategory,
)


class LedgerBatchResult(NamedTuple):
    results: List[LedgerResult]
    total_interest: Decimal
    total_itc_reversal: Decimal


def build_summary(rows: List[InterestRow], as_of_date: date) -> CalculationSummary:
    """
    Reduce interest rows into a ledger summary.

    - total_interest: every row (AT_RISK rows contribute zero)
    - total_itc_reversal: UNPAID rows only; ITC on PAID_LATE rows is
      restored by the late payment itself
    - at_risk_count / at_risk_amount: count and principal of AT_RISK rows
    - breached_count: rows beyond 180 days, paid late or unpaid
    """
    total_interest = sum((r.interest for r in rows), Decimal("0"))
    total_itc_reversal = sum(
        (r.itc_amount for r in rows if r.status == InterestStatus.UNPAID), Decimal("0")
    )

    at_risk_rows = [r for r in rows if r.risk_category == RiskCategory.AT_RISK]
    at_risk_amount = sum((r.principal for r in at_risk_rows), Decimal("0"))
    breached_count = sum(1 for r in rows if r.risk_category == RiskCategory.BREACHED)

    return CalculationSummary(
        total_interest=round2(total_interest),
        total_itc_reversal=round2(total_itc_reversal),
        details=rows,
        at_risk_count=len(at_risk_rows),
        at_risk_amount=round2(at_risk_amount),
        breached_count=breached_count,
        calculation_date=as_of_date,
    )


def calculate_interest(entries: Iterable[LedgerEntry], as_of_date: date) -> CalculationSummary:
    """
    Main entry point: FIFO-match each supplier's purchases to payments and summarize.

    Stateless; all working queues are created and discarded within the call,
    and the caller's entries are never mutated.
    """
    rows: List[InterestRow] = []
    for supplier, queues in partition_by_supplier(entries).items():
        rows.extend(process_supplier(supplier, queues, as_of_date))

    return build_summary(rows, as_of_date)


def calculate_ledgers(
    ledgers: Mapping[str, Iterable[LedgerEntry]],
    as_of_date: date,
) -> LedgerBatchResult:
    """Run the engine once per named ledger and total the results across ledgers"""
    results = [
        LedgerResult(ledger_name=name, summary=calculate_interest(entries, as_of_date))
        for name, entries in ledgers.items()
    ]

    return LedgerBatchResult(
        results=results,
        total_interest=round2(sum((r.summary.total_interest for r in results), Decimal("0"))),
        total_itc_reversal=round2(sum((r.summary.total_itc_reversal for r in results), Decimal("0"))),
    )
