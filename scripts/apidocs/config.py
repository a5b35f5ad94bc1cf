"""Environment-driven settings for the OpenAPI docs updater.

Environment:
    GITBOOK_TOKEN       GitBook API token (required)
    GITBOOK_ORG_ID      GitBook organization id (required)
    GITBOOK_API_BASE    GitBook API base URL (default: https://api.gitbook.com/v1)
    HL_SDK_PACKAGE      Import name of the SDK to introspect (default: hl_sdk)
    HL_SKIPPED_METHODS  Comma-separated operations to leave out (default: multiSig)

A ``.env`` file in the working directory is loaded before the environment is
read; variables already set in the environment take precedence.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

from scripts.apidocs.errors import ConfigurationError
from scripts.apidocs.gitbook import DEFAULT_API_BASE
from scripts.apidocs.registry import DEFAULT_SKIPPED_METHODS

DEFAULT_SDK_PACKAGE = "hl_sdk"


@dataclass(frozen=True)
class Settings:
    gitbook_token: str
    gitbook_org_id: str
    api_base: str = DEFAULT_API_BASE
    sdk_package: str = DEFAULT_SDK_PACKAGE
    skipped_methods: tuple[str, ...] = DEFAULT_SKIPPED_METHODS


def load_env_file(path: str | None = None) -> bool:
    """Load ``.env`` into ``os.environ`` without overriding existing values."""
    return load_dotenv(dotenv_path=path, override=False)


def parse_skipped(raw: str | None) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_SKIPPED_METHODS
    return tuple(name.strip() for name in raw.split(",") if name.strip())


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from the environment.

    Raises ConfigurationError when GITBOOK_TOKEN or GITBOOK_ORG_ID is unset
    or empty.
    """
    env = os.environ if environ is None else environ

    token = env.get("GITBOOK_TOKEN", "").strip()
    org_id = env.get("GITBOOK_ORG_ID", "").strip()
    if not token or not org_id:
        raise ConfigurationError(
            "GITBOOK_TOKEN and GITBOOK_ORG_ID must be set in environment variables."
        )

    return Settings(
        gitbook_token=token,
        gitbook_org_id=org_id,
        api_base=env.get("GITBOOK_API_BASE") or DEFAULT_API_BASE,
        sdk_package=env.get("HL_SDK_PACKAGE") or DEFAULT_SDK_PACKAGE,
        skipped_methods=parse_skipped(env.get("HL_SKIPPED_METHODS")),
    )
