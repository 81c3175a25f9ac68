import pytest

from expense_cli.cli import build_parser, main


@pytest.fixture
def run(tmp_path):
    data_dir = tmp_path / "data"

    def _run(*argv):
        return main(["--data-dir", str(data_dir), *argv])

    return _run


def test_add_and_list(run, capsys):
    assert run("expense", "add", "Food", "12.5", "2024-01-02", "--description", "Lunch") == 0
    assert run("expense", "add", "Gas", "20", "2024-01-01") == 0
    capsys.readouterr()

    assert run("expense", "list") == 0
    out = capsys.readouterr().out
    assert "Found 2 expenses (total 32.50):" in out
    assert "[1] 2024-01-02 12.50" in out
    assert "Description: Lunch" in out
    assert "[2] 2024-01-01 20.00" in out
    assert out.index("[1]") < out.index("[2]")


def test_list_empty(run, capsys):
    assert run("expense", "list") == 0
    assert "No expenses found." in capsys.readouterr().out


def test_add_rejects_bad_amount(run, capsys):
    assert run("expense", "add", "Food", "lots", "2024-01-01") == 1
    assert "Validation error: amount must be a numeric value" in capsys.readouterr().err


def test_delete(run, capsys):
    run("expense", "add", "Food", "1", "2024-01-01")
    assert run("expense", "delete", "1") == 0
    assert "Expense 1 deleted." in capsys.readouterr().out

    assert run("expense", "delete", "1") == 1
    assert "Expense 1 not found" in capsys.readouterr().err


def test_delete_rejects_non_numeric_id(run, capsys):
    assert run("expense", "delete", "abc") == 1
    assert "Invalid expense ID" in capsys.readouterr().err


def test_analytics(run, capsys):
    run("expense", "add", "Food", "10", "2024-01-02")
    run("expense", "add", "Food", "5", "2024-01-01")
    run("expense", "add", "Gas", "20", "2024-01-02")
    capsys.readouterr()

    assert run("analytics") == 0
    out = capsys.readouterr().out
    assert "Total: 35.00" in out
    assert "Highest: Gas (20.00)" in out
    assert "Lowest: Food (15.00)" in out
    assert "  Food: 15.00" in out
    assert out.index("2024-01-01: 5.00") < out.index("2024-01-02: 30.00")


def test_analytics_empty(run, capsys):
    assert run("analytics") == 0
    out = capsys.readouterr().out
    assert "Total: 0.00" in out
    assert "Highest: -" in out


def test_serve_uses_defaults(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr("expense_api.app.serve", lambda *args: calls.append(args))
    assert main(["--data-dir", str(tmp_path), "serve"]) == 0
    assert calls == [("0.0.0.0", 8080, tmp_path)]


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
