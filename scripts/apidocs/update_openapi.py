#!/usr/bin/env python3
"""Regenerate the Hyperliquid API reference and publish it to GitBook.

Reads request/response schemas from the SDK, builds one OpenAPI 3.1.1
document per method, rewrites the ``## API`` section of SUMMARY.md and
syncs the documents to the GitBook organization's OpenAPI specs.

Usage:
    python3 scripts/apidocs/update_openapi.py
    python3 scripts/apidocs/update_openapi.py --summary docs/SUMMARY.md --skip multiSig --skip noop

Environment:
    GITBOOK_TOKEN       GitBook API token (required)
    GITBOOK_ORG_ID      GitBook organization id (required)
    GITBOOK_API_BASE    GitBook API base URL (default: https://api.gitbook.com/v1)
    HL_SDK_PACKAGE      Import name of the SDK to introspect (default: hl_sdk)
    HL_SKIPPED_METHODS  Comma-separated methods to leave out (default: multiSig)
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

# Allow running as a plain script from a checkout.
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import requests

from scripts.apidocs.build_openapi import build_openapi_documents
from scripts.apidocs.config import Settings, load_env_file, load_settings
from scripts.apidocs.convert_schemas import SdkLayout, get_all_schemas
from scripts.apidocs.errors import ApiDocsError
from scripts.apidocs.gitbook import GitBookClient, SyncResult, sync_openapi_specs
from scripts.apidocs.logs import configure_logging, logger
from scripts.apidocs.update_summary import DEFAULT_SUMMARY_PATH, update_summary

BANNER = "=" * 80


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Regenerate Hyperliquid OpenAPI specs, SUMMARY.md and GitBook docs"
    )
    parser.add_argument(
        "--summary",
        default=str(DEFAULT_SUMMARY_PATH),
        help="Path to SUMMARY.md (default: SUMMARY.md at the repo root)",
    )
    parser.add_argument(
        "--sdk-package",
        default=None,
        help="Import name of the SDK to introspect (overrides HL_SDK_PACKAGE)",
    )
    parser.add_argument(
        "--skip",
        action="append",
        default=None,
        metavar="METHOD",
        help="Method to leave out; repeatable (overrides HL_SKIPPED_METHODS)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def run(settings: Settings, summary_path: str | Path, log: logging.Logger | None = None) -> SyncResult:
    """Run every phase in order; the first error aborts the whole run."""
    schemas = get_all_schemas(SdkLayout(settings.sdk_package), settings.skipped_methods, logger=log)
    specs = build_openapi_documents(schemas, logger=log)
    update_summary(specs, summary_path, logger=log)

    client = GitBookClient(settings.gitbook_token, settings.gitbook_org_id, base_url=settings.api_base)
    return sync_openapi_specs(specs, client, logger=log)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    load_env_file()

    logger.info(BANNER)
    logger.info("Starting Hyperliquid OpenAPI Update Process")
    logger.info(BANNER)

    try:
        settings = load_settings()
        if args.sdk_package:
            settings = dataclasses.replace(settings, sdk_package=args.sdk_package)
        if args.skip is not None:
            settings = dataclasses.replace(settings, skipped_methods=tuple(args.skip))
        run(settings, args.summary)
    except ApiDocsError as exc:
        logger.error("Error: %s", exc)
        return 1
    except requests.RequestException as exc:
        logger.error("Error: could not reach GitBook: %s", exc)
        return 1

    logger.info(BANNER)
    logger.info("Process completed successfully")
    logger.info(BANNER)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
