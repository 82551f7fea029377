"""
Settlement planner: greedy largest-debtor / largest-creditor matching
"""
from __future__ import annotations
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from models import Balance, Settlement
from utils import TOLERANCE_CENTS, from_cents, to_cents

logger = logging.getLogger(__name__)


def plan_settlements(balances: Sequence[Balance]) -> List[Settlement]:
    """
    Compute transfers that bring every balance to zero.

    Settled members (within a cent of zero) are dropped, the rest are
    sorted ascending by signed amount so the biggest debtor sits at i and
    the biggest creditor at j. Each step pays min(|debt|, credit) from i to
    j and moves whichever cursor reached zero. The sort is stable, so ties
    keep the order of `balances`.

    At most N-1 transfers for N unsettled balances; every amount > 0.
    Only balances of exactly 0.00 count as settled: a balance of +/-0.01
    still produces a 0.01 transfer.
    """
    working = [(to_cents(b.amount), b.member_id, b.name) for b in balances]
    working = [w for w in working if abs(w[0]) >= TOLERANCE_CENTS]
    working.sort(key=lambda w: w[0])

    members = [(mid, name) for _, mid, name in working]
    cents = [c for c, _, _ in working]

    transfers: List[Settlement] = []
    i, j = 0, len(cents) - 1
    while i < j:
        if abs(cents[i]) < TOLERANCE_CENTS:
            i += 1
            continue
        if cents[j] < TOLERANCE_CENTS:
            j -= 1
            continue

        payment = min(abs(cents[i]), cents[j])
        if payment > 0:
            (debtor, debtor_name), (creditor, creditor_name) = members[i], members[j]
            transfers.append(Settlement(debtor, creditor, from_cents(payment), debtor_name, creditor_name))
            logger.debug("settle %s -> %s: %s", debtor, creditor, from_cents(payment))
            cents[i] += payment
            cents[j] -= payment

        if abs(cents[i]) < TOLERANCE_CENTS:
            i += 1
        if abs(cents[j]) < TOLERANCE_CENTS:
            j -= 1

    return transfers


def apply_settlements(balances: Iterable[Balance], settlements: Iterable[Settlement]) -> Dict[str, Decimal]:
    """Balances after every transfer is paid: payer goes up, payee goes down"""
    out = {b.member_id: to_cents(b.amount) for b in balances}
    for s in settlements:
        out[s.from_member] = out.get(s.from_member, 0) + to_cents(s.amount)
        out[s.to_member] = out.get(s.to_member, 0) - to_cents(s.amount)
    return {mid: from_cents(c) for mid, c in out.items()}


def creditors_of(member_id: str, balances: Sequence[Balance]) -> List[Balance]:
    """Members someone in debt can pay back; empty unless member_id owes money"""
    own = next((b for b in balances if b.member_id == member_id), None)
    if own is None or own.amount >= 0:
        return []
    return [b for b in balances if b.amount > 0]
