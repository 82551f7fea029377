"""
Data models for SplitLedger
"""
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from errors import (
    InvalidAmountError,
    InvalidExpenseError,
    InvalidGroupError,
    InvalidSplitError,
    MemberNotFoundError,
    SplitMismatchError,
)
from utils import TOLERANCE, amounts_close, to_decimal

SETTLEMENT_PAYMENT_PREFIX = "Settlement payment to "
SETTLEMENT_RECEIVED_PREFIX = "Settlement received from "


@dataclass(frozen=True)
class Member:
    """Group member as supplied by the member directory"""
    id: str
    name: str
    email: str = ""


@dataclass(frozen=True)
class Group:
    """Ordered set of unique members plus the creator"""
    id: str
    name: str
    members: Tuple[Member, ...]
    created_by: str
    created_at: str = ""

    def __post_init__(self):
        object.__setattr__(self, "members", tuple(self.members))
        if not self.members:
            raise InvalidGroupError(f"Group {self.id} has no members")
        ids = [m.id for m in self.members]
        if len(set(ids)) != len(ids):
            raise InvalidGroupError(f"Group {self.id} lists a member twice")
        if self.created_by not in ids:
            raise InvalidGroupError(f"Creator {self.created_by} is not a member of group {self.id}")

    @property
    def member_ids(self) -> List[str]:
        return [m.id for m in self.members]

    def has_member(self, member_id: str) -> bool:
        return any(m.id == member_id for m in self.members)

    def member(self, member_id: str) -> Member:
        for m in self.members:
            if m.id == member_id:
                return m
        raise MemberNotFoundError(member_id, self.id)


class SplitPolicy(str, Enum):
    """How an expense total is divided"""
    EQUAL = "equal"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value) -> "SplitPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidSplitError(f"Unknown split policy: {value!r}") from None


@dataclass(frozen=True)
class Split:
    """One member's share of one expense"""
    member_id: str
    amount: Decimal

    def __post_init__(self):
        try:
            amount = to_decimal(self.amount)
        except InvalidAmountError as ex:
            raise InvalidSplitError(f"Invalid split amount for {self.member_id}: {ex}") from None
        if amount < 0:
            raise InvalidSplitError(f"Split amount for {self.member_id} is negative: {amount}")
        object.__setattr__(self, "amount", amount)


@dataclass(frozen=True)
class Expense:
    """
    Immutable expense record.
    Splits of a CUSTOM expense must add up to the amount within TOLERANCE.
    EQUAL expenses round every share on its own, so their splits may drift
    by up to TOLERANCE for each member past the first.
    """
    id: str
    group_id: str
    description: str
    amount: Decimal
    payer_id: str
    date: str  # YYYY-MM-DD
    splits: Tuple[Split, ...]
    policy: SplitPolicy = SplitPolicy.CUSTOM

    def __post_init__(self):
        if not str(self.description or "").strip():
            raise InvalidExpenseError(f"Expense {self.id} has no description")
        amount = to_decimal(self.amount)
        if amount <= 0:
            raise InvalidAmountError(f"Expense amount must be positive, got {amount}")
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "policy", SplitPolicy.parse(self.policy))

        splits = tuple(self.splits)
        if not splits:
            raise InvalidSplitError(f"Expense {self.id} has no splits")
        seen = set()
        for s in splits:
            if s.member_id in seen:
                raise InvalidSplitError(f"Expense {self.id} splits {s.member_id} twice")
            seen.add(s.member_id)
        object.__setattr__(self, "splits", splits)

        total = sum((s.amount for s in splits), Decimal("0.00"))
        allowed = TOLERANCE
        if self.policy is SplitPolicy.EQUAL:
            allowed = TOLERANCE * max(1, len(splits) - 1)
        if not amounts_close(total, amount, allowed):
            raise SplitMismatchError(amount, total)

    def split_for(self, member_id: str) -> Optional[Split]:
        return next((s for s in self.splits if s.member_id == member_id), None)

    @property
    def is_settlement(self) -> bool:
        return self.description.startswith((SETTLEMENT_PAYMENT_PREFIX, SETTLEMENT_RECEIVED_PREFIX))


@dataclass(frozen=True)
class Balance:
    """Net position: positive is owed money, negative owes money"""
    member_id: str
    name: str
    amount: Decimal


@dataclass(frozen=True)
class Settlement:
    """Suggested transfer: from_member pays to_member"""
    from_member: str
    to_member: str
    amount: Decimal
    from_name: str = ""
    to_name: str = ""


@dataclass
class LedgerSnapshot:
    """Groups and their expenses, as loaded from or saved to disk"""
    groups: List[Group] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    version: int = 1

    def group(self, group_id: str) -> Optional[Group]:
        return next((g for g in self.groups if g.id == group_id), None)

    def expenses_for(self, group_id: str) -> List[Expense]:
        return [e for e in self.expenses if e.group_id == group_id]
