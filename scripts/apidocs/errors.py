"""Error kinds raised by the OpenAPI docs updater.

Every error is fatal: the updater stops at the first one and exits non-zero.
"""

from __future__ import annotations


class ApiDocsError(Exception):
    """Base class for all updater failures."""


class NotFoundError(ApiDocsError):
    """An expected symbol, schema name, module or file is absent."""


class InvalidReturnTypeError(ApiDocsError):
    """A function's declared return type is not an asynchronous-result wrapper."""


class SectionNotFoundError(ApiDocsError):
    """The table-of-contents section header is missing from the document."""


class ConfigurationError(ApiDocsError):
    """A required environment setting is missing."""


class RemoteAPIError(ApiDocsError):
    """The documentation host answered with a non-success HTTP status."""

    def __init__(self, action: str, status: int, body: str, slug: str | None = None):
        self.action = action
        self.status = status
        self.body = body
        self.slug = slug
        target = f" for {slug}" if slug else ""
        super().__init__(f"{action} failed{target} ({status}): {body}")
