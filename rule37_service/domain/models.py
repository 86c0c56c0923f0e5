"""Domain models - pure Python dataclasses representing ledger events and Rule 37 findings"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import List, Optional

from rule37_service.domain.exceptions import InvalidLedgerEntryError

DISCLAIMER = (
    "Interest calculated from invoice date. Per Section 50 + Rule 88B, actual interest "
    "depends on ITC availment and utilization dates. Consult CA for precise liability."
)


class LedgerEntryType(str, Enum):
    PURCHASE = "PURCHASE"
    PAYMENT = "PAYMENT"


class InterestStatus(str, Enum):
    PAID_LATE = "PAID_LATE"
    UNPAID = "UNPAID"


class RiskCategory(str, Enum):
    SAFE = "SAFE"
    AT_RISK = "AT_RISK"
    BREACHED = "BREACHED"


@dataclass(frozen=True)
class LedgerEntry:
    """Dated purchase or payment against a supplier, as produced by ledger ingestion"""

    date: date
    entry_type: LedgerEntryType
    supplier: str
    amount: Decimal

    def __post_init__(self) -> None:
        # Floats go through str() so 99999.999 stays 99999.999
        if not isinstance(self.amount, Decimal):
            try:
                amount = Decimal(str(self.amount))
            except InvalidOperation as e:
                raise InvalidLedgerEntryError(f"Amount is not a number: {self.amount!r}") from e
            object.__setattr__(self, "amount", amount)
        if not self.amount.is_finite():
            raise InvalidLedgerEntryError(f"Amount is not finite: {self.amount!r}")


@dataclass(frozen=True)
class InterestRow:
    """Single Rule 37 finding: a late-paid or unpaid purchase amount"""

    supplier: str
    purchase_date: date
    payment_date: Optional[date]
    principal: Decimal
    delay_days: int
    itc_amount: Decimal
    interest: Decimal
    status: InterestStatus
    payment_deadline: date
    risk_category: RiskCategory
    gstr3b_period: str
    days_to_deadline: int
    itc_availment_date: Optional[date] = None


@dataclass(frozen=True)
class CalculationSummary:
    """Rule 37 result for a single ledger"""

    total_interest: Decimal
    total_itc_reversal: Decimal
    details: List[InterestRow] = field(default_factory=list)
    at_risk_count: int = 0
    at_risk_amount: Decimal = Decimal("0.00")
    breached_count: int = 0
    calculation_date: Optional[date] = None


@dataclass(frozen=True)
class LedgerResult:
    """Named ledger paired with its calculation summary"""

    ledger_name: str
    summary: CalculationSummary
