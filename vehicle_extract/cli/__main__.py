from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from vehicle_extract.config.loader import ConfigError, load_config
from vehicle_extract.excel.reader import SheetReadError, WorkbookOpenError, open_workbook
from vehicle_extract.logging.error_log import ErrorLogBuffer
from vehicle_extract.logging.init import log_summary, set_debug, setup_logging
from vehicle_extract.models.config_models import AppConfig
from vehicle_extract.services.header_resolver import HeaderResolver
from vehicle_extract.services.orchestrator import ProcessingError, process_all, scan_input_files
from vehicle_extract.services.output import OUTPUT_FORMATS, write_rows
from vehicle_extract.services.summary import render_summary_line

"""CLI entrypoint.

- Load .env, then config (YAML)
- Collect input files (files as given, directories scanned non-recursively)
- Extract every file, write the combined table as JSON or CSV
- Print a SUMMARY line and exit with a contract exit code

``--serve`` starts the HTTP upload endpoint instead.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2
EXIT_NO_DATA = 3


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env via python-dotenv; a broken file only produces a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except Exception as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="vehicle-extract",
        description="Extract vehicle-collections records from spreadsheets",
    )
    p.add_argument("paths", nargs="*", type=Path, help="Input files or directories")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: config/extract.yml)")
    p.add_argument("--output", "-o", type=Path, default=None, help="Output file (default: stdout)")
    p.add_argument("--format", choices=OUTPUT_FORMATS, default="json", help="Output format")
    p.add_argument("--mode", choices=("streaming", "materialized"), default=None, help="Row source variant")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print header detection per sheet then exit")
    p.add_argument("--serve", action="store_true", help="Run the HTTP upload endpoint")
    return p.parse_args(argv)


def _collect_inputs(paths: list[Path], extensions: tuple[str, ...]) -> list[Path]:
    files: list[Path] = []
    for p in paths:
        if p.is_dir():
            files.extend(scan_input_files(p, extensions))
        elif p.exists():
            files.append(p)
        else:
            raise ProcessingError(f"input not found: {p}")
    return files


def _inspect_data(files: list[Path], cfg: AppConfig, mode: str) -> int:
    settings = cfg.extraction
    resolver = HeaderResolver(scan_rows=settings.header_scan_rows, min_matches=settings.min_header_matches)
    for f in files:
        print(f"FILE: {f.name}")
        try:
            source = open_workbook(f, mode, settings.allowed_extensions)
        except WorkbookOpenError as e:
            print(f"  open_error: {e}")
            continue
        with source:
            for sname in source.sheet_names():
                try:
                    match = resolver.resolve(source.iter_rows(sname))
                except SheetReadError as e:
                    print(f"  SHEET: {sname} error={e}")
                    continue
                if match is None:
                    print(f"  SHEET: {sname} header=none")
                    continue
                mapping = {k.value: v for k, v in match.column_map.items()}
                print(f"  SHEET: {sname} header_row={match.row_index + 1} columns={mapping}")
    return EXIT_SUCCESS


def _serve(cfg: AppConfig) -> int:  # pragma: no cover (network)
    import uvicorn

    from vehicle_extract.api.app import create_app

    uvicorn.run(create_app(cfg), host=cfg.server.host, port=cfg.server.port)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む (テストから [] を渡せるように)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    # rows go to stdout when no --output is given; keep log lines off that stream
    rows_on_stdout = args.output is None and not (args.serve or args.inspect_data)
    logger = setup_logging(sys.stderr if rows_on_stdout else sys.stdout)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.serve:
        return _serve(cfg)

    if not args.paths:
        logger.error("no input paths given")
        return EXIT_FATAL

    try:
        files = _collect_inputs(args.paths, cfg.extraction.allowed_extensions)
    except ProcessingError as e:
        logger.error(f"{e}")
        return EXIT_FATAL

    mode = args.mode or cfg.extraction.reader_mode
    if args.inspect_data:
        return _inspect_data(files, cfg, mode)

    logger.info(f"Extracting {len(files)} file(s) mode={mode}")
    error_log = ErrorLogBuffer(cfg.logs_directory)
    result = process_all(files, cfg.extraction, mode=mode, error_log=error_log)
    error_counts = error_log.counts()
    log_path = error_log.flush()
    if log_path is not None:
        logger.warning(f"error log written: {log_path} {error_counts}")

    if result.rows:
        if args.output is not None:
            write_rows(result.rows, args.format, args.output)
            logger.info(f"wrote {len(result.rows)} rows to {args.output}")
        else:
            write_rows(result.rows, args.format, sys.stdout)

    summary_line = render_summary_line(len(files), result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    if not result.rows:
        logger.warning("No valid data found")
        return EXIT_NO_DATA
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
