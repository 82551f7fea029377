"""
Business logic and computations for SplitLedger: balances and summaries
"""
from __future__ import annotations
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from errors import GroupNotFoundError
from models import Balance, Expense, Group
from utils import from_cents, parse_date, to_cents

logger = logging.getLogger(__name__)


def filter_expenses_by_date(
    expenses: Iterable[Expense],
    start: Optional[date],
    end: Optional[date]
) -> List[Expense]:
    """Filter expenses by date range (both ends inclusive)"""
    out = []
    for e in expenses:
        ed = parse_date(e.date)
        if start and ed < start:
            continue
        if end and ed > end:
            continue
        out.append(e)
    return out


def group_expenses(group: Group, expenses: Iterable[Expense]) -> List[Expense]:
    """Expenses of one group, newest first"""
    if group is None:
        raise GroupNotFoundError(None)
    own = [e for e in expenses if e.group_id == group.id]
    # sort is stable, so same-day expenses keep insertion order
    return sorted(own, key=lambda e: e.date, reverse=True)


def recent_expenses(expenses: Iterable[Expense], limit: int = 5) -> List[Expense]:
    return sorted(expenses, key=lambda e: e.date, reverse=True)[:limit]


def _net_cents(group: Group, expenses: Iterable[Expense]) -> Dict[str, int]:
    """
    Fold expenses into integer-cent nets keyed by member id.
    Ids outside the group are accumulated too; callers drop them.
    """
    net = {m.id: 0 for m in group.members}
    for e in expenses:
        if e.group_id != group.id:
            continue
        outsiders = []
        net[e.payer_id] = net.get(e.payer_id, 0) + to_cents(e.amount)
        if not group.has_member(e.payer_id):
            outsiders.append(e.payer_id)
        for s in e.splits:
            net[s.member_id] = net.get(s.member_id, 0) - to_cents(s.amount)
            if not group.has_member(s.member_id):
                outsiders.append(s.member_id)
        if outsiders:
            logger.warning(
                "Expense %s in group %s references non-members %s; their share is left out of the balances",
                e.id, group.id, ", ".join(sorted(set(outsiders))),
            )
    return net


def compute_balances(group: Group, expenses: Iterable[Expense]) -> List[Balance]:
    """
    One Balance per current member, in group member order.
    Positive -> is owed money; negative -> owes money.
    """
    if group is None:
        raise GroupNotFoundError(None)
    net = _net_cents(group, expenses)
    return [Balance(m.id, m.name, from_cents(net[m.id])) for m in group.members]


def compute_summary(
    group: Group,
    expenses: Iterable[Expense],
    start: Optional[date] = None,
    end: Optional[date] = None
) -> Dict[str, dict]:
    """
    Compute summary statistics for each member.
    Returns dict mapping member id -> {paid, consumed, net}
    """
    if group is None:
        raise GroupNotFoundError(None)
    exps = [e for e in filter_expenses_by_date(expenses, start, end) if e.group_id == group.id]

    paid = {m.id: 0 for m in group.members}
    consumed = {m.id: 0 for m in group.members}
    for e in exps:
        if e.payer_id in paid:
            paid[e.payer_id] += to_cents(e.amount)
        for s in e.splits:
            if s.member_id in consumed:
                consumed[s.member_id] += to_cents(s.amount)

    return {
        mid: {
            "paid": from_cents(paid[mid]),
            "consumed": from_cents(consumed[mid]),
            "net": from_cents(paid[mid] - consumed[mid]),
        } for mid in group.member_ids
    }


def member_total_balance(member_id: str, groups: Sequence[Group], expenses: Sequence[Expense]) -> Decimal:
    """Net balance of one member summed over all groups they belong to"""
    total = 0
    for g in groups:
        if not g.has_member(member_id):
            continue
        total += _net_cents(g, expenses)[member_id]
    return from_cents(total)


def member_total_spent(member_id: str, groups: Sequence[Group], expenses: Iterable[Expense]) -> Decimal:
    """Sum of the member's own shares across groups they belong to"""
    own_groups = {g.id for g in groups if g.has_member(member_id)}
    total = 0
    for e in expenses:
        if e.group_id not in own_groups:
            continue
        s = e.split_for(member_id)
        if s is not None:
            total += to_cents(s.amount)
    return from_cents(total)


def group_spending_totals(groups: Sequence[Group], expenses: Iterable[Expense]) -> Dict[str, Decimal]:
    """Total spent per group id, groups without spending left out"""
    cents = {g.id: 0 for g in groups}
    for e in expenses:
        if e.group_id in cents:
            cents[e.group_id] += to_cents(e.amount)
    return {gid: from_cents(c) for gid, c in cents.items() if c > 0}
