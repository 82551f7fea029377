"""
Utility functions for SplitLedger: money, dates and the data directory
"""
from __future__ import annotations
import os
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from errors import InvalidAmountError

CENT = Decimal("0.01")
# two amounts closer than this are the same amount
TOLERANCE = Decimal("0.01")
TOLERANCE_CENTS = 1


def to_decimal(value: Any) -> Decimal:
    """
    Convert an int, float, str or Decimal to a 2dp Decimal.
    Rounding is ROUND_HALF_UP everywhere in the ledger.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Not an amount: {value!r}")
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, int):
        d = Decimal(value)
    elif isinstance(value, float):
        # str() keeps 0.1 as 0.1 instead of its binary expansion
        d = Decimal(str(value))
    elif isinstance(value, str):
        try:
            d = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidAmountError(f"Not an amount: {value!r}") from None
    else:
        raise InvalidAmountError(f"Not an amount: {value!r}")
    if not d.is_finite():
        raise InvalidAmountError(f"Not an amount: {value!r}")
    try:
        return d.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmountError(f"Amount out of range: {value!r}") from None


def to_cents(value: Any) -> int:
    """Amount -> integer minor units"""
    return int(to_decimal(value) * 100)


def from_cents(cents: int) -> Decimal:
    """Integer minor units -> 2dp Decimal"""
    return (Decimal(cents) / 100).quantize(CENT)


def amounts_close(a: Any, b: Any, tolerance: Decimal = TOLERANCE) -> bool:
    return abs(to_decimal(a) - to_decimal(b)) <= tolerance


def format_amount(amount: Any, symbol: str = "$") -> str:
    """Format amount for display, sign before the currency symbol"""
    d = to_decimal(amount)
    sign = "-" if d < 0 else ""
    return f"{sign}{symbol}{abs(d):,.2f}"


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string (a trailing ISO time part is ignored)"""
    return datetime.strptime(s.strip()[:10], "%Y-%m-%d").date()


def app_dir() -> str:
    """
    Get application data directory.
    SPLITLEDGER_HOME wins; otherwise ~/.splitledger. Creates it if missing.
    """
    path = os.environ.get("SPLITLEDGER_HOME") or os.path.join(os.path.expanduser("~"), ".splitledger")
    os.makedirs(path, exist_ok=True)
    return path
