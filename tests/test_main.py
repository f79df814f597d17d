import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from config import BLOCK_LOCKED_ACCOUNTS_ENV
from main import format_decimal, main


@pytest.fixture(autouse=True)
def clear_toggle(monkeypatch):
    monkeypatch.delenv(BLOCK_LOCKED_ACCOUNTS_ENV, raising=False)


def write_csv(tmp_path, lines):
    csv_file = tmp_path / "input.csv"
    csv_file.write_text('\n'.join(["type, client, tx, amount"] + lines))
    return str(csv_file)


class TestFormatDecimal:
    @pytest.mark.parametrize("value, expected", [
        ("4", "4.0"),
        ("4.0000", "4.0"),
        ("1.5", "1.5"),
        ("0", "0.0"),
        ("100", "100.0"),
        ("0.1234", "0.1234"),
        ("0.12345", "0.1235"),
        ("-30", "-30.0"),
        ("1000000000000000000000000000", "1000000000000000000000000000.0"),
        ("123456789012345678901234567890.00005", "123456789012345678901234567890.0001"),
    ])
    def test_format(self, value, expected):
        assert format_decimal(Decimal(value)) == expected


class TestMain:
    def test_prints_sorted_table(self, tmp_path, capsys):
        path = write_csv(tmp_path, [
            "deposit, 2, 1, 2.0",
            "deposit, 1, 2, 5.0",
            "deposit, 1, 3, 3.0",
            "withdrawal, 1, 4, 4.0",
            "dispute, 2, 1,",
        ])

        assert main([path]) == 0

        out = capsys.readouterr().out
        assert out.splitlines() == [
            "client,available,held,total,locked",
            "1,4.0,0.0,4.0,false",
            "2,0.0,2.0,2.0,false",
        ]

    def test_locked_account_rendered(self, tmp_path, capsys):
        path = write_csv(tmp_path, [
            "deposit, 1, 1, 5.0",
            "dispute, 1, 1,",
            "chargeback, 1, 1,",
        ])

        assert main([path]) == 0
        assert capsys.readouterr().out.splitlines()[1] == "1,0.0,0.0,0.0,true"

    def test_toggle_read_from_environment(self, tmp_path, capsys, monkeypatch):
        path = write_csv(tmp_path, [
            "deposit, 1, 1, 5.0",
            "dispute, 1, 1,",
            "chargeback, 1, 1,",
            "deposit, 1, 2, 10.0",
        ])

        monkeypatch.setenv(BLOCK_LOCKED_ACCOUNTS_ENV, "true")
        assert main([path]) == 0
        assert capsys.readouterr().out.splitlines()[1] == "1,0.0,0.0,0.0,true"

        monkeypatch.setenv(BLOCK_LOCKED_ACCOUNTS_ENV, "false")
        assert main([path]) == 0
        assert capsys.readouterr().out.splitlines()[1] == "1,10.0,0.0,10.0,true"

    def test_missing_argument(self, capsys):
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_unreadable_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.csv")]) == 1
        assert capsys.readouterr().out == ""

    def test_malformed_file(self, tmp_path, capsys):
        path = write_csv(tmp_path, ["deposit, 1, 1, lots"])
        assert main([path]) == 1
        assert capsys.readouterr().out == ""

    def test_large_balances_printed_in_full(self, tmp_path, capsys):
        path = write_csv(tmp_path, [
            "deposit, 1, 1, 1.0",
            "deposit, 2, 2, 1000000000000000000000000000",
            "deposit, 2, 3, 0.0001",
        ])

        assert main([path]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "client,available,held,total,locked",
            "1,1.0,0.0,1.0,false",
            "2,1000000000000000000000000000.0001,0.0,1000000000000000000000000000.0001,false",
        ]

    def test_amountless_row_does_not_abort(self, tmp_path, capsys):
        path = write_csv(tmp_path, ["deposit,1,1,5.0", "deposit,1,2,", "deposit,1,3,1.0"])
        assert main([path]) == 0
        assert capsys.readouterr().out.splitlines()[1] == "1,6.0,0.0,6.0,false"
