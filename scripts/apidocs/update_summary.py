"""Regenerate the ``## API`` section of the GitBook SUMMARY.md.

Every other part of the document is left untouched. The section lists one
GitBook OpenAPI block per operation, grouped by endpoint category, each
pointing at the ``hl-{endpoint}-{method}`` spec published by gitbook.py.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Mapping

from scripts.apidocs.errors import NotFoundError, SectionNotFoundError
from scripts.apidocs.logs import phase_logger
from scripts.apidocs.registry import spec_slug

ROOT = Path(__file__).resolve().parents[2]
DEFAULT_SUMMARY_PATH = ROOT / "SUMMARY.md"

API_HEADING = "## API"

_API_HEADING_RE = re.compile(rf"^{re.escape(API_HEADING)}[ \t]*\r?$", re.MULTILINE)
_NEXT_HEADING = "\n## "


def render_api_section(specs: Mapping[str, Mapping[str, Any]]) -> str:
    lines = [API_HEADING, ""]
    for endpoint in sorted(specs):
        methods = sorted(specs[endpoint])
        if not methods:
            continue

        lines.append(f"- {endpoint[:1].upper()}{endpoint[1:]}")
        for method in methods:
            lines.extend([
                "  - ```yaml",
                "    type: builtin:openapi",
                "    props:",
                "      models: false",
                "      downloadLink: false",
                "    dependencies:",
                "      spec:",
                "        ref:",
                "          kind: openapi",
                f"          spec: {spec_slug(endpoint, method)}",
                "    ```",
            ])
        lines.append("")
    lines.append("")
    return "\n".join(lines)


def splice_api_section(text: str, specs: Mapping[str, Mapping[str, Any]]) -> str:
    """Replace the ``## API`` section of ``text`` with a freshly rendered one.

    The section runs from its heading to the next ``## `` heading, or to the
    end of the document. Raises SectionNotFoundError if the heading is absent.
    """
    match = _API_HEADING_RE.search(text)
    if match is None:
        raise SectionNotFoundError(f"Section {API_HEADING} not found in SUMMARY.md")

    start = match.start()
    next_heading = text.find(_NEXT_HEADING, match.end())
    prefix = text[:start]
    suffix = "" if next_heading == -1 else text[next_heading:]

    return f"{prefix}{render_api_section(specs)}{suffix}".rstrip() + "\n"


def update_summary(
    specs: Mapping[str, Mapping[str, Any]],
    path: str | Path = DEFAULT_SUMMARY_PATH,
    logger: logging.Logger | None = None,
) -> None:
    log = phase_logger("Summary", logger)
    path = Path(path)
    log.info("Updating %s...", path.name)

    if not path.exists():
        raise NotFoundError(f"Summary file not found: {path}")

    content = path.read_text(encoding="utf-8")
    path.write_text(splice_api_section(content, specs), encoding="utf-8")

    total = sum(len(methods) for methods in specs.values())
    log.info("Updated with %d methods", total)
