"""Unit tests for ITC/interest arithmetic and risk categorization"""

import math
from decimal import Decimal
from fractions import Fraction
from rule37_service.domain.interest import categorize_risk, compute_itc_and_interest, round2
from rule37_service.domain.models import RiskCategory


def test_compute_itc_and_interest_gst_inclusive_split():
    """118000 GST-inclusive at 18% carries 18000 ITC; 212 days of interest on it"""
    result = compute_itc_and_interest(Decimal("118000"), 212)

    assert result.itc_amount == Decimal("18000.00")
    # 18000 * 0.18 * 212 / 365 = 1881.863...
    assert result.interest == Decimal("1881.86")


def test_compute_itc_and_interest_uses_rounded_itc():
    """Interest is computed on the 2dp ITC amount, not the raw quotient"""
    result = compute_itc_and_interest(Decimal("60000"), 212)

    # 60000 * 18 / 118 = 9152.5423...
    assert result.itc_amount == Decimal("9152.54")
    # 9152.54 * 0.18 * 212 / 365 = 956.882...
    assert result.interest == Decimal("956.88")


def test_compute_itc_and_interest_zero_principal():
    result = compute_itc_and_interest(Decimal("0"), 400)

    assert result.itc_amount == Decimal("0.00")
    assert result.interest == Decimal("0.00")


def test_compute_itc_and_interest_zero_days():
    result = compute_itc_and_interest(Decimal("1180"), 0)

    assert result.itc_amount == Decimal("180.00")
    assert result.interest == Decimal("0.00")


def test_itc_rounds_half_up():
    """0.295 * 18 / 118 is exactly 0.045, which half-up takes to 0.05"""
    result = compute_itc_and_interest(Decimal("0.295"), 0)
    assert result.itc_amount == Decimal("0.05")


def test_round2_half_up():
    assert round2(Decimal("2.345")) == Decimal("2.35")
    assert round2(Decimal("2.344999")) == Decimal("2.34")
    assert round2(Decimal("99999.999")) == Decimal("100000.00")
    assert str(round2(Decimal("5"))) == "5.00"


def test_categorize_risk_boundaries():
    """SAFE <= 150 < AT_RISK <= 180 < BREACHED"""
    assert categorize_risk(0) == RiskCategory.SAFE
    assert categorize_risk(150) == RiskCategory.SAFE
    assert categorize_risk(151) == RiskCategory.AT_RISK
    assert categorize_risk(180) == RiskCategory.AT_RISK
    assert categorize_risk(181) == RiskCategory.BREACHED
    assert categorize_risk(1000) == RiskCategory.BREACHED


def _exact_half_up(value: Fraction) -> Decimal:
    return Decimal(math.floor(value * 100 + Fraction(1, 2))).scaleb(-2)


def test_compute_itc_and_interest_matches_exact_rational_rounding():
    """Two-step Decimal division agrees with half-up rounding of the exact fractions"""
    principals = ["0.295", "0.885", "1.64", "1000.01", "5900.59", "60000", "99999.99", "118000", "123456789.01"]
    delays = [1, 73, 181, 212, 365, 1000]

    for principal in principals:
        itc_exact = _exact_half_up(Fraction(Decimal(principal)) * 18 / 118)
        for days in delays:
            interest_exact = _exact_half_up(Fraction(itc_exact) * Fraction(18, 100) * days / 365)

            result = compute_itc_and_interest(Decimal(principal), days)

            assert (result.itc_amount, result.interest) == (itc_exact, interest_exact), (principal, days)


def test_interest_tie_rounds_half_up():
    # ITC 0.25 for a full year accrues exactly 0.045
    result = compute_itc_and_interest(Decimal("1.64"), 365)

    assert result.itc_amount == Decimal("0.25")
    assert result.interest == Decimal("0.05")
