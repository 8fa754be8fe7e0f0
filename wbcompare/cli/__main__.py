from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from wbcompare.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from wbcompare.excel.reader import WorkbookReadError, read_workbook
from wbcompare.excel.writer import write_workbook
from wbcompare.logging.error_log import ErrorLogBuffer, records_from_report
from wbcompare.logging.init import enable_debug, log_summary, setup_logging
from wbcompare.models.comparison import Side
from wbcompare.models.config_models import CompareConfig
from wbcompare.services.columns import InvalidComparisonRequest
from wbcompare.services.orchestrator import compare_workbooks, default_sheet_order
from wbcompare.services.progress import ProgressTracker
from wbcompare.services.reconcile import MergeInvariantViolation, reconcile_workbooks
from wbcompare.services.report import build_report_workbook
from wbcompare.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- load .env, then the YAML config
- read both workbooks, compare the selected sheets
- write the findings log and the report workbook
- optionally reconcile into the chosen target and write the merged workbook
- print the SUMMARY line and exit with 0 (all sheets compared),
  2 (some sheets failed) or 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV_VAR = "WBCOMPARE_CONFIG"
INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env via python-dotenv; a failure is only reported."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compare two Excel workbooks on a composite key")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    p.add_argument(
        "--reconcile",
        choices=[s.value for s in Side],
        default=None,
        help="Reconcile into this side (overrides config reconcile.target)",
    )
    return p.parse_args(argv)


def _inspect_data(cfg: CompareConfig) -> int:
    for label, file_name in (("A", cfg.file_a), ("B", cfg.file_b)):
        try:
            wb = read_workbook(Path(file_name), na_strings=cfg.na_strings)
        except WorkbookReadError as e:
            print(f"inspect: {e}")
            return EXIT_FATAL
        print(f"FILE {label}: {file_name}")
        for name, sheet in wb.sheets.items():
            if sheet.row_count < cfg.header_row:
                print(f"  SHEET: {name} (no header row {cfg.header_row})")
                continue
            header = sheet.record(cfg.header_row)
            print(f"  SHEET: {name} rows={sheet.row_count} cols={[c.as_text() for c in header.cells]}")
            sample = list(sheet.records_below(cfg.header_row))[:INSPECT_SAMPLE_ROWS]
            print("    sample_rows=", [[c.as_text() for c in r.cells] for r in sample])
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an empty list must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        enable_debug()
        logger.debug("debug mode enabled")

    config_path = args.config or Path(os.getenv(CONFIG_ENV_VAR, str(DEFAULT_CONFIG_PATH)))
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    name_a = Path(cfg.file_a).name
    name_b = Path(cfg.file_b).name
    logger.info(f"Comparing {name_a} (A) with {name_b} (B) on key '{cfg.key_columns}'")
    try:
        wb_a = read_workbook(Path(cfg.file_a), na_strings=cfg.na_strings)
        wb_b = read_workbook(Path(cfg.file_b), na_strings=cfg.na_strings)
    except WorkbookReadError as e:
        logger.error(f"read: {e}")
        return EXIT_FATAL

    sheet_names = cfg.sheets or default_sheet_order(wb_a, wb_b)
    if len(sheet_names) > cfg.max_sheets:
        logger.error(f"too many sheets selected: {len(sheet_names)} > max_sheets={cfg.max_sheets}")
        return EXIT_FATAL

    start = time.perf_counter()
    try:
        with ProgressTracker(len(sheet_names)) as progress:
            report = compare_workbooks(
                wb_a,
                wb_b,
                sheet_names,
                cfg.key_columns,
                cfg.header_row,
                case_sensitive=cfg.case_sensitive_keys,
                progress=progress,
            )
    except InvalidComparisonRequest as e:
        logger.error(f"request: {e}")
        return EXIT_FATAL

    findings = ErrorLogBuffer(Path(cfg.log_directory))
    findings.extend(records_from_report(report, name_a, name_b))
    findings_path = findings.flush()
    if findings_path is not None:
        logger.info(f"findings written to {findings_path}")

    try:
        report_path = write_workbook(build_report_workbook(report, name_a, name_b), Path(cfg.report_path))
        logger.info(f"report written to {report_path}")

        target = Side(args.reconcile) if args.reconcile else (cfg.reconcile.target if cfg.reconcile else None)
        if target is not None:
            if cfg.reconcile is not None:
                output = Path(cfg.reconcile.output_path)
            else:
                base_file = Path(cfg.file_a if target is Side.A else cfg.file_b)
                output = Path(cfg.report_path).with_name(f"{base_file.stem}_reconciled.xlsx")
            merged = reconcile_workbooks(wb_a, wb_b, report, target)
            write_workbook(merged, output)
            logger.info(f"reconciled workbook ({target.value}) written to {output}")
    except MergeInvariantViolation as e:
        logger.error(f"reconcile: {e}")
        return EXIT_FATAL
    except OSError as e:
        logger.error(f"write: {e}")
        return EXIT_FATAL

    elapsed = time.perf_counter() - start
    summary_line = render_summary_line(report, elapsed)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])

    if report.errors:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
