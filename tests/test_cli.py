import json
import os

from config import save_ledger
from ledger import record_expense
from models import LedgerSnapshot
from split_ledger_cli import main


def write_ledger(tmp_path, abc_group):
    dinner = record_expense(abc_group, "Dinner", "90.00", "A", date="2024-05-01")
    path = str(tmp_path / "ledger.json")
    save_ledger(LedgerSnapshot(groups=[abc_group], expenses=[dinner]), path)
    return path


def test_cli_prints_balances_and_plan(tmp_path, abc_group, capsys):
    path = write_ledger(tmp_path, abc_group)
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"currency_symbol": "€"}), encoding="utf-8")

    assert main([path, "--settings", str(settings)]) == 0

    out = capsys.readouterr().out
    assert "== Trip ==" in out
    assert "Dinner" in out
    assert "€60.00" in out
    assert "-€30.00" in out
    assert "Bob pays Alice €30.00" in out
    assert "Carol pays Alice €30.00" in out


def test_cli_exports(tmp_path, abc_group):
    path = write_ledger(tmp_path, abc_group)
    xlsx = str(tmp_path / "r.xlsx")
    csv_path = str(tmp_path / "e.csv")

    rc = main([path, "--group", "g1", "--excel", xlsx, "--csv", csv_path,
               "--settings", str(tmp_path / "none.json")])

    assert rc == 0
    assert os.path.exists(xlsx)
    with open(csv_path, encoding="utf-8") as f:
        assert len(f.read().splitlines()) == 2


def test_cli_unknown_group(tmp_path, abc_group, capsys):
    path = write_ledger(tmp_path, abc_group)

    rc = main([path, "--group", "nope", "--settings", str(tmp_path / "none.json")])

    assert rc == 1
    assert "Group not found: nope" in capsys.readouterr().err


def test_cli_missing_file(tmp_path, capsys):
    rc = main([str(tmp_path / "missing.json"), "--settings", str(tmp_path / "none.json")])
    assert rc == 1
    assert "split-ledger:" in capsys.readouterr().err


def test_cli_malformed_group(tmp_path, capsys):
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps({"groups": [{"name": "Trip", "members": []}]}), encoding="utf-8")

    rc = main([str(path), "--settings", str(tmp_path / "none.json")])

    assert rc == 1
    err = capsys.readouterr().err
    assert "split-ledger: Malformed group record" in err
