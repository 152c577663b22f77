from __future__ import annotations

import hashlib
import shutil
from pathlib import Path

import pandas as pd

from pii_hasher.cli import main as cli_main

"""End-to-end Excel runs through the CLI."""

ALICE = "2bd806c97f0e00af1a1fc3328fa763a9269723c8db8fac4f93af71db186d6e90"
PHONE = "9876ccefa1e426aad25916a9cec49e9598bffcd5434d356c7d0c3cd3f0142baa"


def test_excel_end_to_end(temp_workdir: Path, write_config: Path, write_excel, capsys):
    path = write_excel(
        temp_workdir / "data",
        "customers.xlsx",
        {
            "Customers": [
                ["Name", "Email", "Mobile", "Age"],
                ["Alice", "alice", "09012345678", 30],
                ["Bob", None, 9012345678, 41],
            ],
            "Ignored": [["Email"], ["never@touched.com"]],
        },
    )

    assert cli_main([str(path)]) == 0

    produced = temp_workdir / "output"
    outputs = list(produced.glob("customers_*_encrypted.xlsx"))
    assert len(outputs) == 1

    book = pd.ExcelFile(outputs[0])
    assert book.sheet_names == ["Customers"]
    df = book.parse("Customers", header=None, dtype=object)
    rows = df.where(pd.notna(df), None).values.tolist()

    assert rows[0] == ["Name", "Email", "Mobile", "Age"]
    assert rows[1] == ["Alice", ALICE, PHONE, 30]
    # Numeric and empty target cells are left as they were
    assert rows[2] == ["Bob", None, 9012345678, 41]

    out = capsys.readouterr().out
    assert "rows=2 encrypted_cells=2 skipped_cells=2" in out


def test_excel_corrupted_file(temp_workdir: Path, write_config: Path, capsys):
    path = temp_workdir / "data" / "broken.xlsx"
    path.write_bytes(b"not a zip archive")

    assert cli_main([str(path)]) == 2
    assert "ERROR broken.xlsx: Unable to read file" in capsys.readouterr().out


def test_legacy_xls_end_to_end(temp_workdir: Path, write_config: Path, capsys):
    source = temp_workdir / "data" / "legacy.xls"
    shutil.copyfile(Path(__file__).resolve().parents[1] / "fixtures" / "legacy.xls", source)

    assert cli_main([str(source)]) == 0

    outputs = list((temp_workdir / "output").glob("legacy_*_encrypted.xls"))
    assert len(outputs) == 1
    df = pd.ExcelFile(outputs[0]).parse(0, header=None, dtype=object)
    rows = df.values.tolist()

    assert rows[0] == ["Name", "Email", "Age"]
    assert rows[1] == ["Alice", hashlib.sha256(b"alice@example.com").hexdigest(), 30]
    assert rows[2] == ["Bob", hashlib.sha256(b"bob@example.com").hexdigest(), 41]
    assert "rows=2 encrypted_cells=2 skipped_cells=0" in capsys.readouterr().out
