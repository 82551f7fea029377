"""
Ledger facade: the entry points the rest of the application calls.

Every function works on the Group and Expense list handed in; nothing is
kept between calls. The returned Expense is new and immutable, and it is
the caller's job to store it.
"""
from __future__ import annotations
import logging
import uuid
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from computations import compute_balances as _aggregate_balances
from errors import (
    GroupNotFoundError,
    InvalidAmountError,
    InvalidExpenseError,
    InvalidSplitError,
    MemberNotFoundError,
)
from models import (
    SETTLEMENT_PAYMENT_PREFIX,
    SETTLEMENT_RECEIVED_PREFIX,
    Balance,
    Expense,
    Group,
    Settlement,
    Split,
    SplitPolicy,
)
from settlement import plan_settlements
from splits import compute_equal_split, validate_custom_split
from utils import to_decimal, today_str

logger = logging.getLogger(__name__)

SplitInput = Union[Split, Mapping[str, Any]]


def _require_group(group: Optional[Group]) -> Group:
    if group is None:
        raise GroupNotFoundError(None)
    return group


def record_expense(
    group: Group,
    description: str,
    amount: Any,
    payer_id: str,
    policy: Union[SplitPolicy, str] = SplitPolicy.EQUAL,
    custom_splits: Optional[Iterable[SplitInput]] = None,
    date: Optional[str] = None,
    expense_id: Optional[str] = None,
    absorb_remainder: bool = False,
) -> Expense:
    """
    Validate the inputs, split the amount and build the new Expense.

    EQUAL splits over every group member in member order. CUSTOM takes
    custom_splits as given, as long as they add up to the amount and only
    name current members. Any failure raises before an Expense exists.
    """
    group = _require_group(group)
    description = (description or "").strip()
    if not description:
        raise InvalidExpenseError("Description is required")
    total = to_decimal(amount)
    if total <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {total}")
    if not group.has_member(payer_id):
        raise MemberNotFoundError(payer_id, group.id)

    policy = SplitPolicy.parse(policy)
    if policy is SplitPolicy.EQUAL:
        splits = compute_equal_split(total, group.member_ids, absorb_remainder=absorb_remainder)
    else:
        if custom_splits is None:
            raise InvalidSplitError("Custom split policy needs custom splits")
        splits = validate_custom_split(total, custom_splits)
        for s in splits:
            if not group.has_member(s.member_id):
                raise MemberNotFoundError(s.member_id, group.id)

    expense = Expense(
        id=expense_id or str(uuid.uuid4()),
        group_id=group.id,
        description=description,
        amount=total,
        payer_id=payer_id,
        date=date or today_str(),
        splits=tuple(splits),
        policy=policy,
    )
    logger.info("Recorded expense %s in group %s: %r for %s paid by %s",
                expense.id, group.id, description, total, payer_id)
    return expense


def compute_balances(group: Group, expenses: Iterable[Expense]) -> List[Balance]:
    return _aggregate_balances(_require_group(group), expenses)


def compute_settlement_plan(group: Group, expenses: Iterable[Expense]) -> List[Settlement]:
    """Balances of the group, reduced to suggested transfers"""
    return plan_settlements(compute_balances(group, expenses))


def record_settlement(
    group: Group,
    expenses: Sequence[Expense],
    from_id: str,
    to_id: str,
    amount: Any,
    received: bool = False,
    date: Optional[str] = None,
) -> Expense:
    """
    Turn a transfer from_id -> to_id into an Expense paid by from_id with a
    single split crediting to_id for the whole amount.

    received=False is the payer recording a payment ("Settlement payment to
    <payee>"); received=True is the payee recording receipt ("Settlement
    received from <payer>").
    """
    group = _require_group(group)
    if from_id == to_id:
        raise InvalidSplitError("A member cannot settle with themselves")
    payer = group.member(from_id)
    payee = group.member(to_id)
    total = to_decimal(amount)
    if total <= 0:
        raise InvalidAmountError(f"Settlement amount must be positive, got {total}")

    balance = next((b.amount for b in compute_balances(group, expenses) if b.member_id == from_id),
                   Decimal("0.00"))
    owed = max(-balance, Decimal("0.00"))
    if total > owed:
        logger.warning("Settlement of %s from %s to %s exceeds what %s owes (%s)",
                       total, from_id, to_id, from_id, owed)

    if received:
        description = f"{SETTLEMENT_RECEIVED_PREFIX}{payer.name}"
    else:
        description = f"{SETTLEMENT_PAYMENT_PREFIX}{payee.name}"
    return record_expense(
        group,
        description,
        total,
        from_id,
        SplitPolicy.CUSTOM,
        [Split(to_id, total)],
        date=date,
    )


class LedgerService:
    """
    Facade wired to the member directory and expense store.
    Looks groups up by id and appends what it records; it never edits or
    deletes stored expenses.
    """

    def __init__(self, directory, store, settings=None):
        self.directory = directory
        self.store = store
        self.settings = settings

    def group(self, group_id: str) -> Group:
        group = self.directory.get_group(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return group

    def expenses(self, group_id: str) -> List[Expense]:
        return self.store.list_expenses(self.group(group_id).id)

    def record_expense(self, group_id: str, description: str, amount: Any, payer_id: str,
                       policy: Union[SplitPolicy, str] = SplitPolicy.EQUAL,
                       custom_splits: Optional[Iterable[SplitInput]] = None,
                       date: Optional[str] = None) -> Expense:
        absorb = bool(self.settings and self.settings.absorb_remainder)
        expense = record_expense(self.group(group_id), description, amount, payer_id, policy,
                                 custom_splits, date=date, absorb_remainder=absorb)
        self.store.add_expense(expense)
        return expense

    def balances(self, group_id: str) -> List[Balance]:
        group = self.group(group_id)
        return compute_balances(group, self.store.list_expenses(group.id))

    def settlement_plan(self, group_id: str) -> List[Settlement]:
        group = self.group(group_id)
        return compute_settlement_plan(group, self.store.list_expenses(group.id))

    def record_settlement(self, group_id: str, from_id: str, to_id: str, amount: Any,
                          received: bool = False, date: Optional[str] = None) -> Expense:
        group = self.group(group_id)
        expense = record_settlement(group, self.store.list_expenses(group.id), from_id, to_id,
                                    amount, received=received, date=date)
        self.store.add_expense(expense)
        return expense
