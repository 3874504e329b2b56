"""CLI tests for `sonar-dev trim`."""

from __future__ import annotations

from pathlib import Path

import pytest

from sonar_dev.cli import main


def _make_tree(root: Path) -> None:
    (root / "a-1.txt").write_text("   indented\ntrailing   \n")
    (root / "b-2.txt").write_text("\tboth  sides \t\n")
    sub = root / "sub"
    sub.mkdir()
    (sub / "c-1.txt").write_text("  nested  \n")


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep config files and env vars of the real environment out of the tests.
    monkeypatch.chdir(tmp_path)
    for var in ("SONAR_DEV_SERVER_HOME", "SONAR_DEV_SERVER_URL", "SONAR_DEV_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)


def test_trim_all_files(tmp_path: Path) -> None:
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", str(root)]) == 0
    assert (root / "a-1.txt").read_text() == "indented\ntrailing\n"
    assert (root / "b-2.txt").read_text() == "both  sides\n"
    assert (root / "sub" / "c-1.txt").read_text() == "nested\n"


def test_trim_include(tmp_path: Path) -> None:
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", str(root), "--include", "**/*-1.txt"]) == 0
    assert (root / "a-1.txt").read_text() == "indented\ntrailing\n"
    assert (root / "sub" / "c-1.txt").read_text() == "nested\n"
    assert (root / "b-2.txt").read_text() == "\tboth  sides \t\n"


def test_trim_exclude(tmp_path: Path) -> None:
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", str(root), "--exclude", "**/*-1.txt"]) == 0
    assert (root / "a-1.txt").read_text() == "   indented\ntrailing   \n"
    assert (root / "b-2.txt").read_text() == "both  sides\n"


def test_trim_list_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", str(root), "--list-files", "--include", "sub/**"]) == 0
    out = capsys.readouterr().out
    names = [Path(line).name for line in out.strip().split("\n") if line]
    assert names == ["c-1.txt"]
    assert (root / "sub" / "c-1.txt").read_text() == "  nested  \n"


def test_trim_check(tmp_path: Path) -> None:
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", "--check", str(root)]) == 1
    assert (root / "a-1.txt").read_text() == "   indented\ntrailing   \n"
    assert main(["trim", str(root)]) == 0
    assert main(["trim", "--check", str(root)]) == 0


def test_trim_missing_directory(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["trim", str(tmp_path / "missing")]) == 2
    assert "Error: Directory does not exist" in capsys.readouterr().err


def test_trim_keep_going(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "src"
    root.mkdir()
    (root / "bad.bin").write_bytes(b"\xff\xfe")
    (root / "good.txt").write_text("  good  \n")
    assert main(["trim", str(root), "--keep-going"]) == 2
    assert (root / "good.txt").read_text() == "good\n"
    assert "Fail to read" in capsys.readouterr().err


def test_trim_patterns_from_config(tmp_path: Path) -> None:
    (tmp_path / "sonar-dev.toml").write_text('[trim]\nexcludes = ["**/*-1.txt"]\n')
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", str(root)]) == 0
    assert (root / "a-1.txt").read_text() == "   indented\ntrailing   \n"
    assert (root / "b-2.txt").read_text() == "both  sides\n"


def test_trim_cli_patterns_override_config(tmp_path: Path) -> None:
    (tmp_path / "sonar-dev.toml").write_text('[trim]\nexcludes = ["**/*-1.txt"]\n')
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", str(root), "--exclude", "**/*-2.txt"]) == 0
    assert (root / "a-1.txt").read_text() == "indented\ntrailing\n"
    assert (root / "b-2.txt").read_text() == "\tboth  sides \t\n"


def test_trim_logs_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", str(root)]) == 0
    err = capsys.readouterr().err
    assert "[INFO] 3 file(s) trimmed, 0 unchanged, 0 failed" in err


def test_trim_quiet(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["-q", "trim", str(root)]) == 0
    assert capsys.readouterr().err == ""


def test_trim_unknown_encoding(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", str(root), "--encoding", "no-such-codec"]) == 1
    assert "Error: Unknown encoding: no-such-codec" in capsys.readouterr().err
    assert (root / "a-1.txt").read_text() == "   indented\ntrailing   \n"


def test_trim_bad_config_value(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "sonar-dev.toml").write_text("[trim]\nincludes = [1]\n")
    root = tmp_path / "src"
    root.mkdir()
    _make_tree(root)
    assert main(["trim", str(root)]) == 1
    assert "`includes` must be a string or a list of strings" in capsys.readouterr().err
