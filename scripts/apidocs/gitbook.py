"""Synchronize OpenAPI documents with GitBook's OpenAPI spec collection.

Remote specs carrying the ``hl-`` slug prefix are owned by this tool: the
sync deletes the ones with no local counterpart, then PUTs every local spec
(PUT creates a missing slug and replaces an existing one).

API:
    GET    /orgs/{org}/openapi?limit=1000&page={cursor}
    DELETE /orgs/{org}/openapi/{slug}
    PUT    /orgs/{org}/openapi/{slug}   body: {"source": {"text": "<json>"}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import requests

from scripts.apidocs.errors import RemoteAPIError
from scripts.apidocs.logs import phase_logger
from scripts.apidocs.registry import SLUG_PREFIX, spec_slug

DEFAULT_API_BASE = "https://api.gitbook.com/v1"
DEFAULT_COLLECTION = "openapi"
DEFAULT_TIMEOUT = 60
PAGE_LIMIT = 1000


@dataclass(frozen=True)
class LocalSpec:
    slug: str
    text: str


@dataclass(frozen=True)
class SyncResult:
    deleted: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)


class GitBookClient:
    def __init__(
        self,
        token: str,
        org_id: str,
        base_url: str = DEFAULT_API_BASE,
        collection: str = DEFAULT_COLLECTION,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.org_id = org_id
        self.collection = collection
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        self.pages_fetched = 0

    @property
    def collection_url(self) -> str:
        return f"{self.base_url}/orgs/{self.org_id}/{self.collection}"

    def _raise_for_status(self, resp: requests.Response, action: str, slug: str | None = None) -> None:
        if not resp.ok:
            raise RemoteAPIError(action, resp.status_code, resp.text, slug)

    def list_specs(self) -> list[dict[str, Any]]:
        """Return every spec in the collection, following ``next.page`` cursors."""
        items: list[dict[str, Any]] = []
        page: str | None = None
        seen_pages: set[str] = set()
        self.pages_fetched = 0
        while True:
            params: dict[str, Any] = {"limit": PAGE_LIMIT}
            if page:
                params["page"] = page
            resp = requests.get(self.collection_url, headers=self.headers, params=params, timeout=self.timeout)
            self._raise_for_status(resp, "List GitBook specs")
            self.pages_fetched += 1

            data = resp.json()
            items.extend(data.get("items", []))
            page = (data.get("next") or {}).get("page")
            # stop on a repeated cursor
            if not page or page in seen_pages:
                return items
            seen_pages.add(page)

    def delete_spec(self, slug: str) -> None:
        resp = requests.delete(f"{self.collection_url}/{slug}", headers=self.headers, timeout=self.timeout)
        self._raise_for_status(resp, "Delete", slug)

    def put_spec(self, slug: str, text: str, action: str = "Upload") -> None:
        resp = requests.put(
            f"{self.collection_url}/{slug}",
            headers=self.headers,
            json={"source": {"text": text}},
            timeout=self.timeout,
        )
        self._raise_for_status(resp, action, slug)


def collect_local_specs(specs: Mapping[str, Mapping[str, Any]]) -> list[LocalSpec]:
    """Serialize every document under its ``hl-{endpoint}-{method}`` slug, sorted by slug."""
    local = [
        LocalSpec(
            slug=spec_slug(endpoint, method),
            text=json.dumps(document, separators=(",", ":"), ensure_ascii=False),
        )
        for endpoint, methods in specs.items()
        for method, document in methods.items()
    ]
    return sorted(local, key=lambda spec: spec.slug)


def sync_openapi_specs(
    specs: Mapping[str, Mapping[str, Any]],
    client: GitBookClient,
    logger: logging.Logger | None = None,
) -> SyncResult:
    log = phase_logger("GitBook", logger)
    log.info("Starting GitBook OpenAPI sync...")

    local = collect_local_specs(specs)
    log.info("Prepared %d local specs", len(local))
    if not local:
        log.info("No specs to upload.")
        return SyncResult()

    local_slugs = {spec.slug for spec in local}

    log.info("Fetching existing specs from GitBook...")
    remote_slugs = sorted({
        slug for slug in (item.get("slug") or "" for item in client.list_specs())
        if slug.startswith(SLUG_PREFIX)
    })
    log.info(
        "Fetched %d existing specs from GitBook over %d page(s)",
        len(remote_slugs), client.pages_fetched,
    )
    remote = set(remote_slugs)

    to_delete = [slug for slug in remote_slugs if slug not in local_slugs]
    if to_delete:
        log.info("Deleting %d obsolete spec(s)...", len(to_delete))
    for slug in to_delete:
        client.delete_spec(slug)
        log.info("Deleted %s", slug)

    updated = [spec.slug for spec in local if spec.slug in remote]
    created = [spec.slug for spec in local if spec.slug not in remote]
    log.info("Uploading %d new, updating %d existing spec(s)...", len(created), len(updated))

    for spec in local:
        is_update = spec.slug in remote
        client.put_spec(spec.slug, spec.text, action="Update" if is_update else "Upload")
        log.info("%s %s", "Updated" if is_update else "Uploaded", spec.slug)

    log.info("Sync completed")
    return SyncResult(deleted=to_delete, updated=updated, created=created)
