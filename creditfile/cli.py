"""Command line entry point: normalize one raw extraction JSON file."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from creditfile.config import InvalidConfigError, NormalizerConfig, load_normalizer_config
from creditfile.core.mapping.rules import MappingRulesError
from creditfile.core.normalize import normalize
from creditfile.validation import apply_validation

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNSUCCESSFUL = 1
EXIT_USAGE = 2


def _load_input(path: Path) -> Any:
    raw_text = path.read_text(encoding="utf-8")
    return json.loads(raw_text)


def _build_config(args: argparse.Namespace) -> NormalizerConfig:
    """Environment config with the command-line flags applied; bad flags raise."""

    overrides: Dict[str, str] = {}
    if args.subject_id:
        overrides["default_subject_id"] = args.subject_id
    if args.currency:
        overrides["currency_code"] = args.currency.upper()
    return dataclasses.replace(load_normalizer_config(), **overrides)


def _write_output(payload: Dict[str, Any], output: str | None) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        return
    sys.stdout.write(text)
    sys.stdout.write("\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="creditfile-normalize",
        description="Normalize raw credit report extraction JSON into a CreditFile.",
    )
    parser.add_argument("input", help="Path to a RawExtractedData JSON document")
    parser.add_argument("--subject-id", help="Subject id used when the input carries none")
    parser.add_argument("--currency", help="ISO 4217 currency code (default: GBP)")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Run schema and referential-integrity validation on the result",
    )
    parser.add_argument("--output", help="Write the result JSON here instead of stdout")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.input)
    try:
        raw_data = _load_input(path)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("CLI_INPUT_UNREADABLE path=%s error=%s", path, exc)
        sys.stderr.write(f"cannot read {path}: {exc}\n")
        return EXIT_USAGE

    try:
        result = normalize(raw_data, config=_build_config(args))
    except (InvalidConfigError, MappingRulesError) as exc:
        logger.error("CLI_CONFIG_INVALID error=%s", exc)
        sys.stderr.write(f"configuration error: {exc}\n")
        return EXIT_USAGE

    if args.validate:
        result = apply_validation(result)

    try:
        _write_output(result.to_dict(), args.output)
    except OSError as exc:
        logger.error("CLI_OUTPUT_FAILED path=%s error=%s", args.output, exc)
        sys.stderr.write(f"cannot write {args.output}: {exc}\n")
        return EXIT_USAGE

    return EXIT_OK if result.success else EXIT_UNSUCCESSFUL


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
