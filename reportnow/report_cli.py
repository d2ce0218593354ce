from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .api_models import ListRequest, ReportRequest
from .config import AppConfig, load_config
from .report.pdf_builder import (
    ReportGenerationError,
    generate_full_report,
    generate_history_report,
    generate_list_report,
    generate_stats_report,
)

VARIANTS = ("full", "history", "stats", "list")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a ReportNow PDF from a JSON request")
    parser.add_argument("input", type=Path, help="Input request file (.json)")
    parser.add_argument(
        "--variant",
        choices=VARIANTS,
        default="full",
        help="Report variant (default: full)",
    )
    parser.add_argument(
        "--sections",
        default=None,
        help="Comma-separated statistics sections (stats variant only; default: all)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output PDF path (default: <output.directory>/<input_stem>_<variant>.pdf)",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("--theme", choices=("light", "dark"), default=None, help="Override theme")
    parser.add_argument("--lang", choices=("en", "es"), default=None, help="Override language")
    return parser.parse_args(argv)


def _render(args: argparse.Namespace, payload: object, config: AppConfig) -> bytes:
    theme = args.theme or config.report.theme
    lang = args.lang or config.report.lang
    if args.variant == "list":
        list_request = ListRequest.model_validate(payload)
        list_options = list_request.to_options(default_theme=theme, default_lang=lang)
        if args.theme:
            list_options.theme = args.theme
        if args.lang:
            list_options.lang = args.lang
        return generate_list_report(list_options, config=config)

    request = ReportRequest.model_validate(payload)
    options = request.to_options(
        args.input.resolve().parent, default_theme=theme, default_lang=lang
    )
    if args.theme:
        options.theme = args.theme
    if args.lang:
        options.lang = args.lang
    if args.variant == "history":
        return generate_history_report(options, config=config)
    if args.variant == "stats":
        sections = request.sections
        if args.sections is not None:
            sections = [s for s in args.sections.split(",") if s.strip()]
        return generate_stats_report(options, sections=sections, config=config)
    return generate_full_report(options, config=config)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not args.input.exists():
        print(f"Error: input file not found: {args.input}", file=sys.stderr)
        return 1
    try:
        payload = json.loads(args.input.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        print(f"Error: input file contains invalid JSON: {exc}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        pdf = _render(args, payload, config)
    except ValidationError as exc:
        print(f"Error: invalid report request: {exc}", file=sys.stderr)
        return 1
    except (ReportGenerationError, ValueError) as exc:
        print(f"Error: PDF generation failed: {exc}", file=sys.stderr)
        return 1

    out_pdf = args.output or (config.output.directory / f"{args.input.stem}_{args.variant}.pdf")
    out_pdf.parent.mkdir(parents=True, exist_ok=True)
    out_pdf.write_bytes(pdf)
    print(f"wrote report: {out_pdf}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
