from __future__ import annotations

import re
from pathlib import Path

from pii_hasher.cli import main as cli_main

"""SUMMARY line contract: exactly one line per invocation, fixed key order."""

SUMMARY_RE = re.compile(
    r"^SUMMARY files=(\d+)/(\d+) success=(\d+) failed=(\d+) rows=(\d+) "
    r"encrypted_cells=(\d+) skipped_cells=(\d+) elapsed_ms=(\d+(?:\.\d+)?)$"
)


def _summary_lines(out: str) -> list[str]:
    return [line for line in out.splitlines() if line.startswith("SUMMARY")]


def test_summary_line_format(temp_workdir: Path, write_config: Path, contacts_csv: Path, capsys):
    cli_main([str(contacts_csv)])

    lines = _summary_lines(capsys.readouterr().out)
    assert len(lines) == 1
    m = SUMMARY_RE.match(lines[0])
    assert m, lines[0]
    files, total, success, failed, rows, encrypted, skipped, _ = m.groups()
    assert (files, total, success, failed) == ("1", "1", "1", "0")
    assert (rows, encrypted, skipped) == ("3", "6", "3")


def test_summary_counts_only_successful_files(temp_workdir: Path, contacts_csv: Path, write_csv, capsys):
    bad = write_csv(temp_workdir / "data", "plain.csv", [["Dept"], ["Ops"], ["HR"]])

    cli_main([str(contacts_csv), str(bad)])

    m = SUMMARY_RE.match(_summary_lines(capsys.readouterr().out)[0])
    assert m.group(1, 3, 4, 5) == ("2", "1", "1", "3")


def test_every_line_is_labeled(temp_workdir: Path, contacts_csv: Path, write_csv, capsys):
    bad = write_csv(temp_workdir / "data", "plain.csv", [["Dept"], ["Ops"]])

    cli_main([str(contacts_csv), str(bad)])

    for line in capsys.readouterr().out.splitlines():
        assert re.match(r"^(INFO|WARN|ERROR|SUMMARY) ", line), line
