"""FIFO purchase/payment matching and unpaid classification, per supplier"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from rule37_service.domain.interest import (
    AT_RISK_THRESHOLD,
    DAYS_THRESHOLD,
    categorize_risk,
    compute_itc_and_interest,
    round2,
)
from rule37_service.domain.models import (
    InterestRow,
    InterestStatus,
    LedgerEntry,
    LedgerEntryType,
    RiskCategory,
)
from rule37_service.utils.date_utils import add_days, days_between, format_gstr3b_period

logger = logging.getLogger(__name__)

# Remaining amounts at or below this are treated as settled (2dp currency)
AMOUNT_EPSILON = Decimal("0.001")


@dataclass
class MutableLedgerItem:
    """Working copy of a purchase or payment, reduced in place while matching"""

    date: date
    remaining: Decimal

    def reduce_by(self, value: Decimal) -> None:
        self.remaining -= value

    @property
    def is_exhausted(self) -> bool:
        return self.remaining <= AMOUNT_EPSILON


@dataclass
class SupplierQueues:
    """Date-ordered purchase and payment queues for one supplier"""

    purchases: List[MutableLedgerItem]
    payments: List[MutableLedgerItem]


def partition_by_supplier(entries: Iterable[LedgerEntry]) -> Dict[str, SupplierQueues]:
    """
    Group entries by supplier into fresh purchase and payment queues.

    Entries are stably sorted by date, so same-day entries keep their
    input order. Suppliers are keyed in order of their first purchase;
    suppliers with payments only are dropped since they carry no ITC risk.
    """
    purchases: Dict[str, List[MutableLedgerItem]] = {}
    payments: Dict[str, List[MutableLedgerItem]] = {}

    for entry in sorted(entries, key=lambda e: e.date):
        target = purchases if entry.entry_type == LedgerEntryType.PURCHASE else payments
        target.setdefault(entry.supplier, []).append(MutableLedgerItem(entry.date, entry.amount))

    return {
        supplier: SupplierQueues(purchases=purchase_queue, payments=payments.get(supplier, []))
        for supplier, purchase_queue in purchases.items()
    }


def build_interest_row(
    supplier: str,
    purchase_date: date,
    payment_date: Optional[date],
    principal: Decimal,
    delay_days: int,
    status: InterestStatus,
    as_of_date: date,
) -> InterestRow:
    """Row carrying computed ITC reversal and interest"""
    deadline = add_days(purchase_date, DAYS_THRESHOLD)
    itc_interest = compute_itc_and_interest(principal, delay_days)

    return InterestRow(
        supplier=supplier,
        purchase_date=purchase_date,
        payment_date=payment_date,
        principal=round2(principal),
        delay_days=delay_days,
        itc_amount=itc_interest.itc_amount,
        interest=itc_interest.interest,
        status=status,
        payment_deadline=deadline,
        risk_category=categorize_risk(delay_days),
        gstr3b_period=format_gstr3b_period(deadline),
        days_to_deadline=days_between(as_of_date, deadline),
    )


def build_at_risk_row(
    supplier: str,
    purchase_date: date,
    principal: Decimal,
    delay_days: int,
    as_of_date: date,
) -> InterestRow:
    """Early-warning row: no liability yet, so ITC and interest are zero"""
    deadline = add_days(purchase_date, DAYS_THRESHOLD)

    return InterestRow(
        supplier=supplier,
        purchase_date=purchase_date,
        payment_date=None,
        principal=round2(principal),
        delay_days=delay_days,
        itc_amount=Decimal("0.00"),
        interest=Decimal("0.00"),
        status=InterestStatus.UNPAID,
        payment_deadline=deadline,
        risk_category=RiskCategory.AT_RISK,
        gstr3b_period=format_gstr3b_period(deadline),
        days_to_deadline=days_between(as_of_date, deadline),
    )


def match_fifo(
    supplier: str,
    purchases: List[MutableLedgerItem],
    payments: List[MutableLedgerItem],
    as_of_date: date,
) -> List[InterestRow]:
    """
    Match the oldest outstanding purchase against the oldest outstanding payment.

    Both queues are consumed in place: on return at least one of them is
    empty. Unmatched payments are left for the caller to discard.

    Rules:
    - matched = min(purchase.remaining, payment.remaining)
    - delay > 180 days emits a PAID_LATE row on the matched amount (180 exactly does not)
    - a head whose remaining drops to <= AMOUNT_EPSILON is popped, so every
      iteration pops at least one head and the loop terminates
    """
    rows: List[InterestRow] = []
    purchase_idx = 0
    payment_idx = 0

    while purchase_idx < len(purchases) and payment_idx < len(payments):
        purchase = purchases[purchase_idx]
        payment = payments[payment_idx]

        # Zero or negative heads have nothing to match
        if purchase.is_exhausted:
            purchase_idx += 1
            continue
        if payment.is_exhausted:
            payment_idx += 1
            continue

        matched = min(purchase.remaining, payment.remaining)
        delay_days = days_between(purchase.date, payment.date)

        if delay_days > DAYS_THRESHOLD:
            rows.append(
                build_interest_row(
                    supplier, purchase.date, payment.date, matched,
                    delay_days, InterestStatus.PAID_LATE, as_of_date,
                )
            )

        purchase.reduce_by(matched)
        payment.reduce_by(matched)
        if purchase.is_exhausted:
            purchase_idx += 1
        if payment.is_exhausted:
            payment_idx += 1

    del purchases[:purchase_idx]
    del payments[:payment_idx]
    return rows


def classify_unpaid(
    supplier: str,
    purchases: List[MutableLedgerItem],
    as_of_date: date,
) -> List[InterestRow]:
    """
    Classify purchase residuals left after matching by their age on as_of_date.

    - > 180 days: UNPAID / BREACHED with full ITC reversal and interest
    - 151-180 days: UNPAID / AT_RISK early warning with zero liability
    - <= 150 days: SAFE, no row
    """
    rows: List[InterestRow] = []

    for purchase in purchases:
        if purchase.is_exhausted:
            continue

        days = days_between(purchase.date, as_of_date)

        if days > DAYS_THRESHOLD:
            rows.append(
                build_interest_row(
                    supplier, purchase.date, None, purchase.remaining,
                    days, InterestStatus.UNPAID, as_of_date,
                )
            )
        elif days > AT_RISK_THRESHOLD:
            rows.append(build_at_risk_row(supplier, purchase.date, purchase.remaining, days, as_of_date))

    return rows


def process_supplier(supplier: str, queues: SupplierQueues, as_of_date: date) -> List[InterestRow]:
    """Matched rows followed by residual rows for one supplier"""
    matched_rows = match_fifo(supplier, queues.purchases, queues.payments, as_of_date)
    residual_rows = classify_unpaid(supplier, queues.purchases, as_of_date)

    logger.debug(
        "Supplier processed",
        extra={
            "supplier": supplier,
            "paid_late_rows": len(matched_rows),
            "residual_rows": len(residual_rows),
            "unmatched_payments": len(queues.payments),
        },
    )
    return matched_rows + residual_rows

