from __future__ import annotations

import pytest

from luckydraw import cli


def _run(capsys, *argv: str) -> str:
    cli.main([*argv, "--no-color", "--step", "0", "--seed", "7"])
    return capsys.readouterr().out


def test_draws_each_name_once(capsys):
    out = _run(capsys, "Alice", "Bob", "Carol", "--draws", "3")
    assert "Lucky Draw" in out
    for draw_no in (1, 2, 3):
        assert f"Draw {draw_no}" in out
    for name in ("Alice", "Bob", "Carol"):
        assert name in out
    assert "0 remaining" in out


def test_names_from_file(tmp_path, capsys):
    names = tmp_path / "names.txt"
    names.write_text("Dana\n\n  Eve  \n", encoding="utf-8")
    out = _run(capsys, "--file", str(names), "--draws", "2")
    assert "Dana" in out
    assert "Eve" in out


def test_keep_leaves_pool_intact(capsys):
    out = _run(capsys, "Solo", "--draws", "3", "--keep")
    assert "Draw 3" in out
    assert "1 remaining" in out


def test_running_out_of_names_exits_nonzero(capsys):
    with pytest.raises(SystemExit) as exc:
        _run(capsys, "Alice", "Bob", "Carol", "--draws", "4")
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "Draw 4 failed" in out


def test_usage_errors(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--no-color"])
    assert exc.value.code == 2
    with pytest.raises(SystemExit) as exc:
        cli.main(["Alice", "--draws", "0"])
    assert exc.value.code == 2
    with pytest.raises(SystemExit) as exc:
        cli.main(["Alice", "--length", "0"])
    assert exc.value.code == 2
    assert "--length must be at least 1" in capsys.readouterr().err


def test_audit_rejects_duplicate_entries(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["A", "A", "B", "--audit", "100", "--allow-duplicates", "--no-color"])
    assert exc.value.code == 2
    assert "--allow-duplicates" in capsys.readouterr().err


def test_audit_mode(capsys):
    out = _run(capsys, "A", "B", "C", "--audit", "3000")
    assert "Fairness audit (3000 draws)" in out
    assert "uniform" in out
