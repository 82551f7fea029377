"""
Split calculator: turn an expense total into per-member Splits
"""
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List, Mapping, Sequence, Union

from errors import InvalidAmountError, InvalidSplitError, SplitMismatchError
from models import Member, Split
from utils import CENT, amounts_close, from_cents, to_cents, to_decimal


def _positive_total(total_amount: Any) -> Decimal:
    total = to_decimal(total_amount)
    if total <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {total}")
    return total


def _member_id(m: Union[str, Member]) -> str:
    return m.id if isinstance(m, Member) else str(m)


def compute_equal_split(
    total_amount: Any,
    members: Sequence[Union[str, Member]],
    absorb_remainder: bool = False,
) -> List[Split]:
    """
    Split total_amount equally, one Split per member in the given order.

    Every share is total/N rounded half-up to cents, so the shares may miss
    the total by up to 0.01*(N-1). That drift is left alone unless
    absorb_remainder is set. Then everyone gets total_cents // N and the
    leftover cents go one each to the last members, so the shares sum to
    the total exactly and none is negative.
    """
    total = _positive_total(total_amount)
    if not members:
        raise InvalidSplitError("Cannot split an expense among zero members")

    ids = [_member_id(m) for m in members]
    if absorb_remainder:
        base, leftover = divmod(to_cents(total), len(ids))
        first_extra = len(ids) - leftover
        return [Split(mid, from_cents(base + (1 if i >= first_extra else 0))) for i, mid in enumerate(ids)]

    share = (total / len(ids)).quantize(CENT, rounding=ROUND_HALF_UP)
    return [Split(mid, share) for mid in ids]


def _as_split(item: Union[Split, Mapping[str, Any]]) -> Split:
    if isinstance(item, Split):
        return item
    try:
        member_id = item.get("member_id", item.get("userId"))
        amount = item["amount"]
    except (AttributeError, KeyError, TypeError):
        raise InvalidSplitError(f"Invalid split entry: {item!r}") from None
    if member_id is None:
        raise InvalidSplitError(f"Split entry has no member: {item!r}")
    return Split(str(member_id), amount)


def split_total(splits: Iterable[Split]) -> Decimal:
    return sum((s.amount for s in splits), Decimal("0.00"))


def validate_custom_split(
    total_amount: Any,
    splits: Iterable[Union[Split, Mapping[str, Any]]],
) -> List[Split]:
    """
    Check caller-supplied splits against the total.
    Members may be left out; only the sum matters.
    """
    total = _positive_total(total_amount)
    out = [_as_split(s) for s in splits]
    if not out:
        raise InvalidSplitError("Custom split needs at least one entry")

    seen = set()
    for s in out:
        if s.member_id in seen:
            raise InvalidSplitError(f"Member {s.member_id} appears twice in the split")
        seen.add(s.member_id)

    actual = split_total(out)
    if not amounts_close(actual, total):
        raise SplitMismatchError(total, actual, f"Custom splits must add up to {total}, got {actual}")
    return out
