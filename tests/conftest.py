# Shared pytest fixtures
from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from pii_hasher.logging.init import reset_logging

FIXED_DAY = date(2025, 10, 2)


@pytest.fixture(autouse=True)
def _fresh_logging():
    # The logger binds sys.stdout at setup time; rebuild it per test so capsys sees output
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PII_HASHER_CONFIG", raising=False)
    return tmp_path


@pytest.fixture()
def fixed_day() -> date:
    return FIXED_DAY


@pytest.fixture()
def sample_config_yaml() -> str:
    return """chunk_size: 2
output_directory: ./output
logs_directory: ./logs
max_file_size_mb: 5
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "hasher.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_csv(directory: Path, name: str, rows: list[list[str]], delimiter: str = ",") -> Path:
    p = directory / name
    with p.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter=delimiter, quoting=csv.QUOTE_ALL)
        writer.writerows(rows)
    return p


def make_excel(directory: Path, name: str, sheets: dict[str, list[list[object]]]) -> Path:
    p = directory / name
    with pd.ExcelWriter(p, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows, dtype=object).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return p


@pytest.fixture()
def contacts_csv(temp_workdir: Path) -> Path:
    return make_csv(
        temp_workdir / "data",
        "contacts.csv",
        [
            ["First Name", "Last_Name", "E-mail", "Dept"],
            ["  JOHN  ", "Doe", "doe@EXAMPLE.com", "Sales"],
            ["Jane", "", "jane@example.com", "Ops"],
            ["", "Smith", "   ", "HR"],
        ],
    )


@pytest.fixture()
def write_csv():
    return make_csv


@pytest.fixture()
def write_excel():
    return make_excel
