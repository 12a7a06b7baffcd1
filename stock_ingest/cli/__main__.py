from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from stock_ingest.config.loader import ConfigError, catalog_from_env, load_catalog
from stock_ingest.logging.error_log import DiagnosticLogBuffer
from stock_ingest.logging.init import enable_debug, log_summary, setup_logging
from stock_ingest.readers import ExtractionError
from stock_ingest.services.batch import BatchError, parse_paths
from stock_ingest.services.engine import StockReportParser
from stock_ingest.services.fingerprint import detect_platform
from stock_ingest.services.summary import render_batch_summary, render_summary_line

"""CLI entrypoint: parse stock reports from the command line.

Flow:
- Load .env (STOCK_INGEST_CATALOG may point at a custom catalog)
- Load the catalog (--catalog wins over the environment)
- Parse every file, printing SUMMARY lines or the JSON results
- Optionally write diagnostics as JSON Lines (--error-log)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="stock-ingest", description="Universal stock-report parser")
    p.add_argument("paths", nargs="+", type=Path, help="Files or directories to parse")
    p.add_argument("--json", action="store_true", help="Print each parse result as JSON")
    p.add_argument("--inspect", action="store_true", help="Print headers, column candidates and platform, then exit")
    p.add_argument("--catalog", type=Path, default=None, help="Heuristics catalog YAML (overrides $STOCK_INGEST_CATALOG)")
    p.add_argument("--error-log", type=Path, default=None, help="Directory for JSON Lines diagnostics")
    p.add_argument("--env-file", type=Path, default=Path(".env"), help="dotenv file to load")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _inspect(parser: StockReportParser, paths: list[Path]) -> int:
    for path in paths:
        print(f"FILE: {path.name}")
        try:
            file_format, encoding, table = parser.extract(path.read_bytes(), path.name)
        except (OSError, ExtractionError) as e:
            print(f"  read_error: {e}")
            continue
        platform, confidence = detect_platform(table.headers, parser.catalog.platforms)
        print(f"  format={file_format} encoding={encoding} rows={len(table.rows)} platform={platform} confidence={confidence}")
        print(f"  headers={table.headers}")
        for field, ranked in parser.suggest_columns(table.headers).items():
            print(f"  {field}: {ranked['suggestions']} (best={ranked['score']})")
        print("  sample_rows=", table.rows[:3])
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no explicit argument list is given
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.env_file.exists():
        load_dotenv(dotenv_path=args.env_file, override=False)

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    try:
        catalog = load_catalog(args.catalog) if args.catalog else catalog_from_env()
    except ConfigError as e:
        logger.error(f"catalog: {e}")
        return EXIT_FATAL

    parser = StockReportParser(catalog)

    if args.inspect:
        missing = [p for p in args.paths if not p.is_file()]
        if missing:
            logger.error(f"not a file: {missing[0]}")
            return EXIT_FATAL
        return _inspect(parser, args.paths)

    error_log = DiagnosticLogBuffer(args.error_log) if args.error_log else None
    try:
        batch, results = parse_paths(args.paths, parser, error_log=error_log)
    except BatchError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL

    for path, result in results:
        if args.json:
            print(json.dumps({"file": path.name, **result.to_dict()}, ensure_ascii=False))
        else:
            # log_summary adds the "SUMMARY " prefix itself
            log_summary(render_summary_line(path.name, result)[len("SUMMARY "):])

    if error_log is not None:
        written = error_log.flush()
        if written is not None:
            logger.info(f"diagnostics written to {written}")

    if not args.json:
        log_summary(render_batch_summary(batch)[len("SUMMARY "):])

    if batch.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
