from decimal import Decimal

import pytest

from errors import InvalidAmountError, InvalidSplitError, SplitMismatchError
from models import Member, Split
from splits import compute_equal_split, split_total, validate_custom_split


def test_equal_split_keeps_rounding_drift():
    splits = compute_equal_split("100.00", ["A", "B", "C"])

    assert [s.member_id for s in splits] == ["A", "B", "C"]
    assert [s.amount for s in splits] == [Decimal("33.33")] * 3
    assert Decimal("99.98") <= split_total(splits) <= Decimal("100.00")


def test_equal_split_absorb_remainder_goes_to_last_member():
    splits = compute_equal_split(Decimal("100"), ["A", "B", "C"], absorb_remainder=True)

    assert [s.amount for s in splits] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert split_total(splits) == Decimal("100.00")


def test_absorb_remainder_small_total_large_group():
    splits = compute_equal_split("0.05", list("ABCDEFG"), absorb_remainder=True)

    assert [s.amount for s in splits] == [Decimal("0.00")] * 2 + [Decimal("0.01")] * 5
    assert split_total(splits) == Decimal("0.05")


def test_absorb_remainder_never_goes_negative():
    members = [f"m{i}" for i in range(20)]
    splits = compute_equal_split("1.50", members, absorb_remainder=True)

    # 150 cents over 20: 7 each, the last 10 get one more
    assert [s.amount for s in splits] == [Decimal("0.07")] * 10 + [Decimal("0.08")] * 10
    assert split_total(splits) == Decimal("1.50")
    for total in ("0.01", "0.19", "2.00", "99.99"):
        splits = compute_equal_split(total, members, absorb_remainder=True)
        assert all(s.amount >= 0 for s in splits)
        assert split_total(splits) == Decimal(total)


def test_equal_split_rounds_half_up():
    # 0.05 / 2 = 0.025 -> 0.03
    splits = compute_equal_split("0.05", ["A", "B"])
    assert [s.amount for s in splits] == [Decimal("0.03"), Decimal("0.03")]


def test_equal_split_accepts_members():
    splits = compute_equal_split(90, [Member("A", "Alice"), Member("B", "Bob")])
    assert splits == [Split("A", Decimal("45.00")), Split("B", Decimal("45.00"))]


def test_equal_split_errors():
    with pytest.raises(InvalidSplitError):
        compute_equal_split(10, [])
    with pytest.raises(InvalidAmountError):
        compute_equal_split(0, ["A"])
    with pytest.raises(InvalidAmountError):
        compute_equal_split("-5", ["A"])
    with pytest.raises(InvalidAmountError):
        compute_equal_split("ten", ["A"])


def test_custom_split_mismatch_rejected():
    with pytest.raises(SplitMismatchError) as exc:
        validate_custom_split("50.00", [Split("A", "20.00"), Split("B", "29.00")])

    assert exc.value.expected == Decimal("50.00")
    assert exc.value.actual == Decimal("49.00")


def test_custom_split_within_tolerance_returned_unchanged():
    splits = [Split("A", "25.00"), Split("B", "24.99")]
    assert validate_custom_split("50.00", splits) == splits


def test_custom_split_partial_coverage_and_mappings():
    out = validate_custom_split(30, [{"userId": "B", "amount": 30}])
    assert out == [Split("B", Decimal("30.00"))]


def test_custom_split_structural_errors():
    with pytest.raises(InvalidSplitError):
        validate_custom_split(10, [])
    with pytest.raises(InvalidSplitError):
        validate_custom_split(10, [Split("A", 5), Split("A", 5)])
    with pytest.raises(InvalidSplitError):
        validate_custom_split(10, [{"amount": 10}])
    with pytest.raises(InvalidSplitError):
        validate_custom_split(10, [{"member_id": "A", "amount": "-10"}])
