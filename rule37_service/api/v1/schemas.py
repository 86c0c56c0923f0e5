"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from rule37_service.config import settings
from rule37_service.domain.models import (
    DISCLAIMER,
    CalculationSummary,
    InterestStatus,
    LedgerEntry,
    LedgerEntryType,
    RiskCategory,
)


class LedgerEntrySchema(BaseModel):
    """Single purchase or payment line from a supplier ledger"""

    date: date
    entry_type: LedgerEntryType
    supplier: str = Field(..., min_length=1, description="Supplier name or GSTIN")
    amount: Decimal = Field(..., ge=0, description="GST-inclusive amount in rupees")

    def to_domain(self) -> LedgerEntry:
        return LedgerEntry(
            date=self.date,
            entry_type=self.entry_type,
            supplier=self.supplier,
            amount=self.amount,
        )


class CalculationRequest(BaseModel):
    """Request body for POST /v1/rule37/calculate"""

    as_of_date: date
    entries: List[LedgerEntrySchema] = Field(default_factory=list)


class LedgerSchema(BaseModel):
    """Named ledger within a batch request"""

    ledger_name: str = Field(..., min_length=1)
    entries: List[LedgerEntrySchema] = Field(default_factory=list)


class BatchCalculationRequest(BaseModel):
    """Request body for POST /v1/rule37/calculate/batch"""

    as_of_date: date
    ledgers: List[LedgerSchema] = Field(..., min_length=1, max_length=settings.max_ledgers_per_request)


class InterestRowSchema(BaseModel):
    """Single Rule 37 finding"""

    model_config = ConfigDict(from_attributes=True)

    supplier: str
    purchase_date: date
    payment_date: Optional[date] = None
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


class CalculationSummarySchema(BaseModel):
    """Response for POST /v1/rule37/calculate"""

    total_interest: Decimal
    total_itc_reversal: Decimal
    details: List[InterestRowSchema]
    at_risk_count: int
    at_risk_amount: Decimal
    breached_count: int
    calculation_date: date
    disclaimer: str = DISCLAIMER

    @classmethod
    def from_domain(cls, summary: CalculationSummary) -> "CalculationSummarySchema":
        return cls(
            total_interest=summary.total_interest,
            total_itc_reversal=summary.total_itc_reversal,
            details=[InterestRowSchema.model_validate(row) for row in summary.details],
            at_risk_count=summary.at_risk_count,
            at_risk_amount=summary.at_risk_amount,
            breached_count=summary.breached_count,
            calculation_date=summary.calculation_date,
        )


class LedgerResultSchema(BaseModel):
    """Single ledger's result within a batch"""

    ledger_name: str
    summary: CalculationSummarySchema


class BatchCalculationResponse(BaseModel):
    """Response for POST /v1/rule37/calculate/batch"""

    results: List[LedgerResultSchema]
    total_interest: Decimal
    total_itc_reversal: Decimal
    disclaimer: str = DISCLAIMER

