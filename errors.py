"""
Error types raised by the SplitLedger core
"""
from __future__ import annotations
from decimal import Decimal
from typing import Optional


class LedgerError(Exception):
    """Base class for every ledger failure"""


class InvalidAmountError(LedgerError, ValueError):
    """Non-positive or malformed monetary amount"""


class InvalidSplitError(LedgerError, ValueError):
    """Split list or split policy that cannot be applied"""


class SplitMismatchError(InvalidSplitError):
    """Split total differs from the expense total by more than the tolerance"""

    def __init__(self, expected: Decimal, actual: Decimal, message: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message or f"Splits add up to {actual}, expected {expected}")


class InvalidExpenseError(LedgerError, ValueError):
    """Expense record with missing or malformed fields"""


class InvalidGroupError(LedgerError, ValueError):
    """Group that breaks the membership invariants"""


class GroupNotFoundError(LedgerError, LookupError):
    def __init__(self, group_id):
        self.group_id = group_id
        super().__init__(f"Group not found: {group_id}")


class MemberNotFoundError(LedgerError, LookupError):
    def __init__(self, member_id, group_id=None):
        self.member_id = member_id
        self.group_id = group_id
        where = f" in group {group_id}" if group_id is not None else ""
        super().__init__(f"Member not found{where}: {member_id}")
