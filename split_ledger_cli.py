"""
SplitLedger command line
- Print each group's balances and the suggested settlement payments.
- Optionally export an Excel report and/or the expense list as CSV.

Run:
  split-ledger ledger.json [--group ID] [--excel report.xlsx] [--csv expenses.csv]

Dependencies:
  pip install openpyxl
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from config import LedgerSettings, load_ledger, load_settings
from computations import filter_expenses_by_date, group_expenses, recent_expenses
from csv_handler import export_expenses_to_csv
from errors import GroupNotFoundError, LedgerError
from excel_export import export_excel
from ledger import LedgerService
from store import InMemoryStore
from utils import format_amount, parse_date

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="split-ledger", description="Balances and settle-up plan for a ledger file")
    p.add_argument("ledger", help="ledger JSON file")
    p.add_argument("--group", help="only this group id")
    p.add_argument("--start", type=parse_date, help="first expense date for exports (YYYY-MM-DD)")
    p.add_argument("--end", type=parse_date, help="last expense date for exports (YYYY-MM-DD)")
    p.add_argument("--excel", metavar="PATH", help="write an Excel report")
    p.add_argument("--csv", metavar="PATH", help="write the expenses as CSV")
    p.add_argument("--settings", metavar="PATH", help="settings JSON (default: data dir settings.json)")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")
    return p


def print_report(service: LedgerService, group_id: str, settings: LedgerSettings, out=None) -> None:
    """Write recent expenses, balances and the settlement plan of one group"""
    out = out or sys.stdout
    symbol = settings.currency_symbol
    group = service.group(group_id)
    names = {m.id: m.name for m in group.members}
    print(f"== {group.name} ==", file=out)

    recent = recent_expenses(service.expenses(group_id), settings.recent_limit)
    if recent:
        print("Recent expenses:", file=out)
        for e in recent:
            payer = names.get(e.payer_id, e.payer_id)
            print(f"  {e.date}  {e.description:<30} {format_amount(e.amount, symbol):>12}  paid by {payer}",
                  file=out)

    print("Balances:", file=out)
    for b in service.balances(group_id):
        print(f"  {b.name:<20} {format_amount(b.amount, symbol):>12}", file=out)

    plan = service.settlement_plan(group_id)
    print("Settle up:", file=out)
    if not plan:
        print("  everyone is settled", file=out)
    for t in plan:
        print(f"  {t.from_name or t.from_member} pays {t.to_name or t.to_member} {format_amount(t.amount, symbol)}",
              file=out)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(args.settings)
        snapshot = load_ledger(args.ledger)
        logger.info("Loaded %d group(s) and %d expense(s) from %s",
                    len(snapshot.groups), len(snapshot.expenses), args.ledger)
        store = InMemoryStore(snapshot)
        service = LedgerService(store, store, settings)

        if args.group is not None:
            if store.get_group(args.group) is None:
                raise GroupNotFoundError(args.group)
            group_ids = [args.group]
        else:
            group_ids = [g.id for g in snapshot.groups]

        for i, gid in enumerate(group_ids):
            if i:
                print()
            print_report(service, gid, settings)

        if args.excel:
            export_excel(snapshot, args.excel, args.group, args.start, args.end, settings)
        if args.csv:
            exps = []
            for gid in group_ids:
                exps.extend(group_expenses(store.get_group(gid), snapshot.expenses))
            export_expenses_to_csv(filter_expenses_by_date(exps, args.start, args.end), args.csv)
    except (LedgerError, OSError, ValueError) as ex:
        print(f"split-ledger: {ex}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
