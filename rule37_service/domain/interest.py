"""ITC and interest arithmetic for Rule 37 reversals"""

from decimal import Context, Decimal, ROUND_HALF_EVEN, ROUND_HALF_UP
from typing import NamedTuple

from rule37_service.domain.models import RiskCategory

# Statutory constants (GST Rule 37 / Section 50)
DAYS_THRESHOLD = 180
AT_RISK_THRESHOLD = 150
ITC_NUMERATOR = Decimal("18")
ITC_DENOMINATOR = Decimal("118")
INTEREST_RATE = Decimal("0.18")
DAYS_IN_YEAR = Decimal("365")

CENTS = Decimal("0.01")

# Products keep 16 significant digits. Quotients by 118 and 365 repeat with period
# at most 58 (1/59) and 8 (1/73); 80 digits leaves more than one full period below
# the cents digit, so the later half-up quantize equals a direct divide-to-cents.
_MULTIPLY_CONTEXT = Context(prec=16, rounding=ROUND_HALF_EVEN)
_DIVIDE_CONTEXT = Context(prec=80, rounding=ROUND_HALF_EVEN)


class ItcInterest(NamedTuple):
    itc_amount: Decimal
    interest: Decimal


def round2(value: Decimal) -> Decimal:
    """Quantize to 2 decimal places, half-up"""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_itc_and_interest(principal: Decimal, delay_days: int) -> ItcInterest:
    """
    Compute the ITC embedded in a GST-inclusive amount and the interest owed on it.

    Formulas:
    - itc_amount = principal * 18 / 118
    - interest   = itc_amount * 0.18 * delay_days / 365

    Each value is rounded to 2dp half-up; interest is computed from the
    already-rounded ITC amount.
    """
    itc_amount = round2(
        _DIVIDE_CONTEXT.divide(_MULTIPLY_CONTEXT.multiply(principal, ITC_NUMERATOR), ITC_DENOMINATOR)
    )
    accrued = _MULTIPLY_CONTEXT.multiply(
        _MULTIPLY_CONTEXT.multiply(itc_amount, INTEREST_RATE), Decimal(delay_days)
    )
    interest = round2(_DIVIDE_CONTEXT.divide(accrued, DAYS_IN_YEAR))
    return ItcInterest(itc_amount=itc_amount, interest=interest)


def categorize_risk(delay_days: int) -> RiskCategory:
    """SAFE up to 150 days, AT_RISK for 151-180, BREACHED beyond 180"""
    if delay_days <= AT_RISK_THRESHOLD:
        return RiskCategory.SAFE
    if delay_days <= DAYS_THRESHOLD:
        return RiskCategory.AT_RISK
    return RiskCategory.BREACHED
