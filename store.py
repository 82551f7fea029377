"""
Collaborator interfaces the ledger needs, plus an in-memory implementation
"""
from __future__ import annotations
import threading
from typing import Dict, List, Optional, Protocol

from models import Expense, Group, LedgerSnapshot


class MemberDirectory(Protocol):
    def get_group(self, group_id: str) -> Optional[Group]:
        ...


class ExpenseStore(Protocol):
    def list_expenses(self, group_id: str) -> List[Expense]:
        ...

    def add_expense(self, expense: Expense) -> None:
        ...


class InMemoryStore:
    """
    Member directory and append-only expense store over a LedgerSnapshot.
    Appends are serialized with a lock; stored expenses are never changed.
    """

    def __init__(self, snapshot: Optional[LedgerSnapshot] = None):
        self.snapshot = snapshot or LedgerSnapshot()
        self._groups: Dict[str, Group] = {g.id: g for g in self.snapshot.groups}
        self._lock = threading.Lock()

    def get_group(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)

    def list_expenses(self, group_id: str) -> List[Expense]:
        with self._lock:
            return self.snapshot.expenses_for(group_id)

    def add_expense(self, expense: Expense) -> None:
        with self._lock:
            self.snapshot.expenses.append(expense)
