from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from pii_hasher.config.loader import ConfigError, load_config, resolve_config_path
from pii_hasher.excel.reader import ParseError, read_table
from pii_hasher.logging.init import log_summary, setup_logging
from pii_hasher.services.column_matcher import ColumnMatcher
from pii_hasher.services.orchestrator import process_files
from pii_hasher.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (may point PII_HASHER_CONFIG at a config file)
- Load and validate the YAML config (defaults when no config file exists)
- Hash every given file independently, writing {stem}_{date}_encrypted{.ext}
- Print one SUMMARY line and exit with the contract exit code
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv. Failure only warns."""
    if not path.exists():
        return
    try:
        load_dotenv(dotenv_path=path, override=override)
    except OSError as e:
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return number


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pii-hasher",
        description="Replace PII columns (names, email, phone) in CSV/Excel files with SHA-256 digests",
    )
    p.add_argument("files", nargs="*", type=Path, help="CSV / Excel files to process")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--output-dir", type=Path, default=None, help="Directory for the encrypted files")
    p.add_argument("--chunk-size", type=_positive_int, default=None, help="Rows per processing batch")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print header classification then exit")
    return p.parse_args(argv)


def _inspect_data(paths: list[Path]) -> int:
    matcher = ColumnMatcher()
    code = EXIT_SUCCESS_ALL
    for path in paths:
        print(f"FILE: {path.name}")
        try:
            table = read_table(path)
        except ParseError as e:
            print(f"  read_error: {e}")
            code = EXIT_PARTIAL_FAILURE
            continue
        print(f"  rows={table.row_count} cols={table.column_count}")
        for m in matcher.classify(table.headers):
            kind = m.target_type.value if m.target_type else "-"
            print(f"  [{m.column_index}] {m.original_name!r} -> {m.normalized_name!r} {kind}")
    return code


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no list was passed (an empty list means "no args")
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    config_path, required = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path, required=required)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if args.chunk_size is not None:
        cfg = replace(cfg, chunk_size=args.chunk_size)

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    if args.inspect_data:
        return _inspect_data(args.files)

    output_dir = args.output_dir or Path(cfg.output_directory)
    logger.info(f"Processing {len(args.files)} file(s) -> {output_dir}")
    result = process_files(args.files, cfg, output_dir=output_dir)

    # log_summary adds the "SUMMARY " prefix itself
    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
