"""Unit tests for the revenue split and its inverse"""

import pytest
from decimal import Decimal
from treasury_engine.domain.exceptions import InvalidAmountError, UnreachableTargetError
from treasury_engine.domain.money_split import required_gross, round_cents, split, verify_split


def test_split_reference_amount():
    """Test 1000.00 gross at the default 22% tax and 10%/20% partner shares"""
    result = split(100_000)

    assert result.net_amount_cents == 81_967  # 100000 / 1.22 = 81967.21
    assert result.tax_reserve_cents == 18_033  # 81967 * 0.22 = 18032.74
    assert result.commission_cents == 0
    assert result.post_commission_cents == 81_967
    assert result.partner_shares_cents == (8_197, 16_393)  # 8196.7, 16393.4
    assert result.partner_total_cents == 24_590  # 24590.1
    assert result.available_amount_cents == 57_377


def test_split_exact_amount():
    """Test an amount that divides cleanly"""
    result = split(122)

    assert result.net_amount_cents == 100
    assert result.tax_reserve_cents == 22
    assert result.partner_shares_cents == (10, 20)
    assert result.partner_total_cents == 30
    assert result.available_amount_cents == 70


def test_split_with_commission():
    """Test commission is taken from net before partner shares"""
    result = split(100_000, commission_rate_percent=10)

    assert result.net_amount_cents == 81_967
    assert result.commission_cents == 8_197  # 8196.7 rounds up
    assert result.post_commission_cents == 73_770
    assert result.partner_shares_cents == (7_377, 14_754)
    assert result.available_amount_cents == 51_639


def test_split_zero_amount():
    """Test zero gross splits into zeros"""
    result = split(0)

    assert result.net_amount_cents == 0
    assert result.available_amount_cents == 0
    assert result.partner_shares_cents == (0, 0)


def test_split_overrides():
    """Test per-call tax rate and partner shares"""
    result = split(110, tax_rate_percent=10, partner_share_percents=[50])

    assert result.net_amount_cents == 100
    assert result.tax_reserve_cents == 10
    assert result.partner_shares_cents == (50,)
    assert result.available_amount_cents == 50


@pytest.mark.parametrize("gross", [-1, 1.5, "100", True])
def test_split_rejects_invalid_amounts(gross):
    """Test negative and non-integer cents are rejected"""
    with pytest.raises(InvalidAmountError):
        split(gross)


@pytest.mark.parametrize("rate", [-1, 101])
def test_split_rejects_rate_out_of_range(rate):
    """Test commission rates outside 0-100"""
    with pytest.raises(InvalidAmountError):
        split(100_000, commission_rate_percent=rate)


def test_verify_split_accepts_rounding_drift():
    """Test split stages add back up to gross within a cent"""
    for gross in range(0, 50_000, 37):
        for rate in (0, 10, 25):
            assert verify_split(split(gross, rate))


def test_required_gross_reference_amounts():
    """Test inverse of the reference split"""
    assert required_gross(70) == 122
    assert required_gross(57_377) == 100_000  # 99999.91 rounds up
    assert required_gross(51_639, commission_rate_percent=10) == 99_999  # 99999.33


def test_required_gross_non_positive_target():
    """Test nothing to bill when nothing is missing"""
    assert required_gross(0) == 0
    assert required_gross(-5_000) == 0
    assert required_gross(0, commission_rate_percent=100) == 0


def test_required_gross_full_commission_is_unreachable():
    """Test 100% commission leaves nothing available"""
    with pytest.raises(UnreachableTargetError):
        required_gross(1_000, commission_rate_percent=100)


def test_required_gross_rejects_non_integer_target():
    """Test float targets are rejected"""
    with pytest.raises(InvalidAmountError):
        required_gross(10.5)


@pytest.mark.parametrize("rate", [0, 10, 20, 30])
def test_split_inverse_round_trip(rate):
    """Test required_gross(split(g).available) lands within 2 cents of g"""
    for gross in range(0, 300_000, 113):
        available = split(gross, rate).available_amount_cents
        assert abs(required_gross(available, rate) - gross) <= 2, gross


def test_split_inverse_round_trip_small_amount():
    """Test a few cents at 30% commission still invert within 2 cents"""
    result = split(15, 30)

    assert result.post_commission_cents == 8
    assert result.available_amount_cents == 6  # 8 - round(2.4)
    assert required_gross(6, 30) == 15


def test_split_rounds_partner_total_once():
    """Test available comes from the combined partner share, not the sum of rounded shares"""
    result = split(10)

    assert result.net_amount_cents == 8
    assert result.partner_shares_cents == (1, 2)  # 0.8, 1.6
    assert result.partner_total_cents == 2  # 2.4
    assert result.available_amount_cents == 6


def test_required_gross_is_monotonic():
    """Test a bigger target never needs less gross"""
    previous = 0
    for target in range(0, 20_000, 7):
        current = required_gross(target, 20)
        assert current >= previous
        previous = current


def test_round_cents_half_up():
    """Test ties round away from zero for positive values"""
    assert round_cents(Decimal("2.5")) == 3
    assert round_cents(Decimal("2.4999")) == 2
    assert round_cents(Decimal("0.5")) == 1
