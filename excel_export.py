"""
Excel export functionality for SplitLedger
"""
from __future__ import annotations
import logging
import re
from datetime import date
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from computations import compute_balances, compute_summary, filter_expenses_by_date, group_expenses
from config import LedgerSettings
from errors import GroupNotFoundError
from models import LedgerSnapshot
from settlement import plan_settlements

logger = logging.getLogger(__name__)

MONEY_FORMAT = "#,##0.00"


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="2C8A86")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Size each column to its longest value"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        longest = max((len(str(c.value)) for c in ws[letter] if c.value is not None), default=0)
        ws.column_dimensions[letter].width = max(min_width, min(max_width, longest + 2))


def _sheet_title(name: str, taken) -> str:
    # Excel: max 31 chars, no []:*?/\
    base = re.sub(r"[\[\]:*?/\\]", "_", name).strip() or "Group"
    base = base[:31]
    title, n = base, 2
    while title in taken:
        suffix = f" ({n})"
        title = base[:31 - len(suffix)] + suffix
        n += 1
    return title


def export_excel(
    snapshot: LedgerSnapshot,
    filepath: str,
    group_id: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    settings: Optional[LedgerSettings] = None,
) -> None:
    """
    Export ledger to Excel file with multiple sheets:
    - One expenses sheet per group (newest first, one share column per member)
    - Summary sheet
    - Settlements sheet
    """
    settings = settings or LedgerSettings()
    if group_id is not None:
        group = snapshot.group(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        groups = [group]
    else:
        groups = list(snapshot.groups)

    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    for g in groups:
        ws = wb.create_sheet(_sheet_title(g.name, wb.sheetnames))
        names = {m.id: m.name for m in g.members}
        headers = ["Date", "Description", "Paid by", "Amount"] + [m.name for m in g.members]
        ws.append(headers)
        _style_header(ws, 1)
        ws.freeze_panes = "A2"

        exps = filter_expenses_by_date(group_expenses(g, snapshot.expenses), start, end)
        for e in exps:
            row = [e.date, e.description, names.get(e.payer_id, e.payer_id), float(e.amount)]
            for m in g.members:
                s = e.split_for(m.id)
                row.append(float(s.amount) if s else None)
            ws.append(row)

        if exps:
            ws.append(["TOTALS", "", "", ""] + [""] * len(g.members))
            trow = ws.max_row
            ws.cell(trow, 1).font = Font(bold=True)
            # totals as formulas
            for col in range(4, len(headers) + 1):
                letter = get_column_letter(col)
                ws.cell(trow, col).value = f"=SUM({letter}2:{letter}{trow - 1})"

        for r in range(2, ws.max_row + 1):
            for c in range(4, len(headers) + 1):
                ws.cell(r, c).number_format = MONEY_FORMAT
        _autosize_columns(ws)

    # Summary sheet
    ws = wb.create_sheet("Summary")
    ws.append(["Group", "Member", f"Paid ({settings.currency_symbol})",
               f"Consumed ({settings.currency_symbol})", f"Net ({settings.currency_symbol})"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for g in groups:
        summary = compute_summary(g, snapshot.expenses, start, end)
        for m in g.members:
            s = summary[m.id]
            ws.append([g.name, m.name, float(s["paid"]), float(s["consumed"]), float(s["net"])])
    for r in range(2, ws.max_row + 1):
        for c in range(3, 6):
            ws.cell(r, c).number_format = MONEY_FORMAT
    _autosize_columns(ws)

    # Settlements sheet: full history, ignores the date window
    ws = wb.create_sheet("Settlements")
    ws.append(["Group", "From", "To", f"Amount ({settings.currency_symbol})"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for g in groups:
        for t in plan_settlements(compute_balances(g, snapshot.expenses)):
            ws.append([g.name, t.from_name or t.from_member, t.to_name or t.to_member, float(t.amount)])
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 4).number_format = MONEY_FORMAT
    _autosize_columns(ws)

    wb.save(filepath)
    logger.info("Exported %d group(s) to %s", len(groups), filepath)
