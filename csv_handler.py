"""
CSV export and import functionality for SplitLedger
"""
from __future__ import annotations
import csv
import logging
from typing import Iterable, List

from errors import InvalidExpenseError
from models import Expense, Split, SplitPolicy

logger = logging.getLogger(__name__)

HEADER = ['id', 'group_id', 'date', 'description', 'payer', 'amount', 'policy', 'splits']


def export_expenses_to_csv(expenses: Iterable[Expense], filepath: str) -> int:
    """
    Export expenses to CSV file, returns the number of rows written
    Splits are written as member:amount pairs joined by ';'
    """
    count = 0
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        for e in expenses:
            split_str = ';'.join(f"{s.member_id}:{s.amount}" for s in e.splits)
            writer.writerow([
                e.id,
                e.group_id,
                e.date,
                e.description,
                e.payer_id,
                str(e.amount),
                e.policy.value,
                split_str,
            ])
            count += 1
    logger.info("Exported %d expenses to %s", count, filepath)
    return count


def _parse_splits(text: str) -> List[Split]:
    splits = []
    for pair in (text or '').split(';'):
        if not pair.strip():
            continue
        if ':' not in pair:
            raise InvalidExpenseError(f"Bad split entry {pair!r}")
        member_id, amount = pair.rsplit(':', 1)
        splits.append(Split(member_id.strip(), amount.strip()))
    return splits


def import_expenses_from_csv(filepath: str) -> List[Expense]:
    """
    Import expenses from CSV file
    Every row is validated like any other Expense
    """
    expenses = []
    with open(filepath, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            try:
                expense = Expense(
                    id=row['id'],
                    group_id=row['group_id'],
                    description=row['description'],
                    amount=row['amount'],
                    payer_id=row['payer'],
                    date=row['date'],
                    splits=tuple(_parse_splits(row['splits'])),
                    policy=SplitPolicy.parse(row.get('policy') or SplitPolicy.CUSTOM.value),
                )
            except KeyError as ex:
                raise InvalidExpenseError(f"{filepath}:{line_no}: missing column {ex}") from None
            expenses.append(expense)
    return expenses
