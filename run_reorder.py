#!/usr/bin/env python3
"""
Command-line script to reorder the <head> of AMP HTML files.

Usage:
    python run_reorder.py page.html
    python run_reorder.py pages/*.html -o out/
    python run_reorder.py page.html --report
    python run_reorder.py page.html --noscript-fallthrough

Options can also come from the environment (or a .env file):
    HEAD_REORDER_NOSCRIPT_FALLTHROUGH=1
    HEAD_REORDER_PARSER=lxml
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from head_reorder.main import HeadNormalizer
from head_reorder.schemas import ReorderOptions
from head_reorder.exceptions import HeadReorderError
from head_reorder.logger import setup_logger


def main():
    parser = argparse.ArgumentParser(
        description="Reorder the <head> of AMP HTML documents into canonical order"
    )
    parser.add_argument("files", nargs="+", help="HTML files to process")
    parser.add_argument(
        "--output", "-o",
        help="Output directory (default: print HTML to stdout)"
    )
    parser.add_argument(
        "--report", "-r",
        action="store_true",
        help="Print a JSON report per file instead of the HTML"
    )
    parser.add_argument(
        "--noscript-fallthrough",
        action="store_true",
        default=None,
        help="Also queue <noscript> into the 'other' bucket (legacy behaviour)"
    )
    parser.add_argument(
        "--parser",
        help="Preferred HTML parser: html5lib, lxml or html.parser"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging"
    )
    args = parser.parse_args()

    setup_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    options = ReorderOptions.from_env(
        noscript_fallthrough=args.noscript_fallthrough,
        parser=args.parser
    )
    normalizer = HeadNormalizer(options)

    output_dir = Path(args.output) if args.output else None
    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    reports = []
    failed = 0

    for filepath in args.files:
        path = Path(filepath)
        print(f"Reordering: {path.name}", file=sys.stderr)

        try:
            result = normalizer.normalize_file(path)
        except HeadReorderError as e:
            failed += 1
            reports.append({"file": str(path), **e.to_response()})
            print(f"  ✗ Error: {e.message}", file=sys.stderr)
            continue
        except OSError as e:
            failed += 1
            reports.append({
                "file": str(path),
                "status": "error",
                "error": type(e).__name__,
                "message": str(e)
            })
            print(f"  ✗ Error: {e}", file=sys.stderr)
            continue

        reports.append({
            "file": str(path),
            "status": "success",
            "report": result.report.model_dump()
        })
        print(
            f"  ✓ {result.report.input_count} in, {result.report.output_count} out",
            file=sys.stderr
        )

        if output_dir:
            # Write back in the charset the page was read with
            target = output_dir / path.name
            target.write_bytes(result.html.encode(result.encoding, errors='xmlcharrefreplace'))
        elif not args.report:
            print(result.html)

    if args.report:
        print(json.dumps(reports, indent=2, ensure_ascii=False))

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
