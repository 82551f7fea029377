"""
Configuration and data loading/saving for SplitLedger
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Optional

from errors import InvalidExpenseError, InvalidGroupError
from models import Expense, Group, LedgerSnapshot, Member, Split, SplitPolicy
from utils import app_dir

logger = logging.getLogger(__name__)


@dataclass
class LedgerSettings:
    """User settings read from settings.json"""
    currency_symbol: str = "$"
    absorb_remainder: bool = False  # equal splits sum exactly, leftover cents to the last members
    recent_limit: int = 5


_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def _parse_bool(name: str, value, default: bool) -> bool:
    """JSON true/false, 0/1 or a yes/no style string; anything else keeps the default"""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
    logger.warning("Setting %s has invalid value %r, using %s", name, value, default)
    return default


def load_settings(path: Optional[str] = None) -> LedgerSettings:
    """Load settings from JSON file; missing file gives defaults"""
    path = path or os.path.join(app_dir(), "settings.json")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return LedgerSettings()

    known = {f.name for f in fields(LedgerSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", path, ", ".join(unknown))
    s = LedgerSettings(**{k: v for k, v in data.items() if k in known})
    s.absorb_remainder = _parse_bool("absorb_remainder", s.absorb_remainder, LedgerSettings.absorb_remainder)
    s.recent_limit = int(s.recent_limit)
    return s


def group_to_dict(g: Group) -> dict:
    return {
        "id": g.id,
        "name": g.name,
        "created_by": g.created_by,
        "created_at": g.created_at,
        "members": [asdict(m) for m in g.members],
    }


def expense_to_dict(e: Expense) -> dict:
    return {
        "id": e.id,
        "group_id": e.group_id,
        "description": e.description,
        "amount": str(e.amount),
        "payer_id": e.payer_id,
        "date": e.date,
        "policy": e.policy.value,
        "splits": [{"member_id": s.member_id, "amount": str(s.amount)} for s in e.splits],
    }


def dict_to_group(d: dict) -> Group:
    try:
        return Group(
            id=str(d["id"]),
            name=d.get("name", ""),
            members=tuple(Member(**m) for m in d.get("members", [])),
            created_by=str(d.get("created_by", "")),
            created_at=d.get("created_at", ""),
        )
    except (KeyError, TypeError) as ex:
        raise InvalidGroupError(f"Malformed group record {d!r}: {ex}") from None


def dict_to_expense(d: dict) -> Expense:
    try:
        return Expense(
            id=str(d["id"]),
            group_id=str(d["group_id"]),
            description=d.get("description", ""),
            amount=d["amount"],
            payer_id=str(d["payer_id"]),
            date=d["date"],
            splits=tuple(Split(str(s["member_id"]), s["amount"]) for s in d.get("splits", [])),
            policy=SplitPolicy.parse(d.get("policy", SplitPolicy.CUSTOM.value)),
        )
    except (KeyError, TypeError) as ex:
        raise InvalidExpenseError(f"Malformed expense record {d!r}: {ex}") from None


def ledger_to_dict(snapshot: LedgerSnapshot) -> dict:
    """Convert LedgerSnapshot to dictionary for JSON serialization"""
    return {
        "version": snapshot.version,
        "groups": [group_to_dict(g) for g in snapshot.groups],
        "expenses": [expense_to_dict(e) for e in snapshot.expenses],
    }


def dict_to_ledger(d: dict) -> LedgerSnapshot:
    """Convert dictionary from JSON to LedgerSnapshot"""
    return LedgerSnapshot(
        version=d.get("version", 1),
        groups=[dict_to_group(g) for g in d.get("groups", [])],
        expenses=[dict_to_expense(e) for e in d.get("expenses", [])],
    )


def load_ledger(path: str) -> LedgerSnapshot:
    with open(path, "r", encoding="utf-8") as f:
        return dict_to_ledger(json.load(f))


def save_ledger(snapshot: LedgerSnapshot, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(ledger_to_dict(snapshot), f, ensure_ascii=False, indent=2)
