#!/usr/bin/env python
"""
FTC compliance command line.

Usage:
    python -m affiliate_empire.cli check post.md
    python -m affiliate_empire.cli check script.txt --type video
    python -m affiliate_empire.cli check caption.txt --type social --platform tiktok
    python -m affiliate_empire.cli ensure caption.txt --platform instagram
    python -m affiliate_empire.cli report content/ --type blog
    python -m affiliate_empire.cli providers     # real or mock mode per provider

All commands print JSON to stdout. Exit codes: 0 ok, 1 non-compliant, 2 error.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from affiliate_empire.compliance import (
    DEFAULT_RULES,
    ContentType,
    FtcDisclosureValidator,
    Platform,
    combine_rules,
    rules_from_patterns,
)
from affiliate_empire.config import Config, build_secrets_resolver, load_config
from affiliate_empire.integrations import PROVIDERS, ClientHandle, ConfigurationError, ProviderError
from affiliate_empire.utils import configure_logging

EXIT_OK = 0
EXIT_NON_COMPLIANT = 1
EXIT_ERROR = 2

CONTENT_SUFFIXES = (".md", ".txt", ".html")


def build_validator(config: Config) -> FtcDisclosureValidator:
    """Default rules plus any compliance.extra_patterns from config.yaml."""
    patterns = config.section("compliance").get("extra_patterns") or {}
    if not patterns:
        return FtcDisclosureValidator()
    if not isinstance(patterns, dict):
        patterns = {f"custom_{i}": pattern for i, pattern in enumerate(patterns, 1)}
    extra = rules_from_patterns(patterns)
    logger.info(f"[Compliance] Loaded {len(extra)} extra disclosure pattern(s)")
    return FtcDisclosureValidator(combine_rules(DEFAULT_RULES, extra))


def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _emit(payload: Dict) -> None:
    print(json.dumps(payload, indent=2))


def cmd_check(args, validator: FtcDisclosureValidator) -> int:
    result = validator.validate(_read(args.file), args.type, args.platform)
    _emit({"file": args.file, "validation": result.to_dict()})
    return EXIT_OK if result.is_valid else EXIT_NON_COMPLIANT


def cmd_ensure(args, validator: FtcDisclosureValidator) -> int:
    content = _read(args.file)
    fixed = validator.ensure_disclosure(content, args.platform)
    changed = fixed is not content

    if changed and args.write:
        Path(args.file).write_text(fixed, encoding="utf-8")
        logger.info(f"[Compliance] Disclosure written to {args.file}")

    _emit({"file": args.file, "changed": changed, "content": fixed})
    return EXIT_OK


def _content_files(directory: str) -> List[Path]:
    root = Path(directory)
    if not root.is_dir():
        raise ValueError(f"Not a directory: {directory}")
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in CONTENT_SUFFIXES)


def cmd_report(args, validator: FtcDisclosureValidator) -> int:
    items = {str(path): _read(str(path)) for path in _content_files(args.directory)}
    validations = validator.validate_batch(items, args.type, args.platform)
    report = validator.generate_compliance_report(validations)
    logger.info(f"[Compliance] {report.summary()}")
    _emit(report.to_dict())
    return EXIT_OK if report.non_compliant_count == 0 else EXIT_NON_COMPLIANT


async def _provider_modes(config: Config) -> Dict[str, str]:
    resolver = build_secrets_resolver(config)
    modes = {}
    for name, profile in PROVIDERS.items():
        handle = ClientHandle(profile, resolver, config)
        await handle.get()
        modes[name] = handle.mode.value
    return modes


def cmd_providers(args, config: Config) -> int:
    _emit(asyncio.run(_provider_modes(config)))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="affiliate_empire", description="FTC disclosure compliance tools")
    parser.add_argument("--config", default="config/config.yaml", help="YAML config file")
    parser.add_argument("--env-file", default="config/.env", help="dotenv file")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    content_types = [c.value for c in ContentType]
    platforms = [p.value for p in Platform]

    check = sub.add_parser("check", help="Validate one content file")
    check.add_argument("file")
    check.add_argument("--type", default=ContentType.BLOG.value, choices=content_types)
    check.add_argument("--platform", default=Platform.TIKTOK.value, choices=platforms,
                       help="Platform for social captions")

    ensure = sub.add_parser("ensure", help="Append a platform disclosure if missing")
    ensure.add_argument("file")
    ensure.add_argument("--platform", default=Platform.BLOG.value, choices=platforms)
    ensure.add_argument("-w", "--write", action="store_true", help="Rewrite the file in place")

    report = sub.add_parser("report", help="Compliance report for a directory")
    report.add_argument("directory")
    report.add_argument("--type", default=ContentType.BLOG.value, choices=content_types)
    report.add_argument("--platform", default=Platform.TIKTOK.value, choices=platforms)

    sub.add_parser("providers", help="Show real/mock mode per provider")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(env_file=args.env_file, yaml_path=args.config)
    configure_logging(
        level=args.log_level or config.get("LOG_LEVEL", "INFO"),
        log_dir=config.get("LOG_DIR", "logs"),
        file_logging=config.get_bool("LOG_TO_FILE", False),
    )

    try:
        if args.command == "providers":
            return cmd_providers(args, config)

        validator = build_validator(config)
        handlers = {"check": cmd_check, "ensure": cmd_ensure, "report": cmd_report}
        return handlers[args.command](args, validator)
    except (ProviderError, ConfigurationError, ValueError, OSError) as e:
        logger.error(f"[Compliance] {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
