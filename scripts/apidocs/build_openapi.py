"""Wrap JSON Schema pairs into one OpenAPI 3.1.1 document per operation."""

from __future__ import annotations

import copy
import logging
from typing import Any, Mapping

from scripts.apidocs.convert_schemas import AllSchemas, SchemaPair
from scripts.apidocs.logs import phase_logger

OPENAPI_VERSION = "3.1.1"
DOCUMENT_VERSION = "1.0.0"
PROVIDER = "Hyperliquid"

SERVERS = (
    {"url": "https://api.hyperliquid.xyz", "description": "Mainnet"},
    {"url": "https://api.hyperliquid-testnet.xyz", "description": "Testnet"},
)

DESERIALIZE_ERROR = "Failed to deserialize the JSON body into the target type"

# Keywords that only make sense at a JSON Schema document root.
_ROOT_ONLY_KEYS = ("$schema", "$id", "$defs")

OpenAPISpecs = dict[str, dict[str, dict[str, Any]]]


def to_openapi_schema(schema: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``schema`` as an OpenAPI 3.1 Schema Object."""
    result = copy.deepcopy(dict(schema))
    for key in _ROOT_ONLY_KEYS:
        result.pop(key, None)
    return result


def _responses(endpoint: str, pair: SchemaPair) -> dict[str, Any]:
    responses: dict[str, Any] = {
        "200": {
            "description": pair.response.get("description") or "",
            "content": {"application/json": {"schema": to_openapi_schema(pair.response)}},
        },
        "422": {
            "description": DESERIALIZE_ERROR,
            "content": {"text/plain": {"schema": {"type": "string"}}},
        },
    }
    # Only info documents a 500; exchange must not.
    if endpoint == "info":
        responses["500"] = {
            "description": "Internal Server Error",
            "content": {"application/json": {"schema": {"type": "null"}}},
        }
    return responses


def build_openapi_document(pair: SchemaPair, endpoint: str, method: str) -> dict[str, Any]:
    document: dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": f"{PROVIDER} API - {endpoint}/{method}",
            "version": DOCUMENT_VERSION,
        },
        "servers": [dict(server) for server in SERVERS],
        "tags": [{"name": method, "x-page-title": method, "x-page-slug": method}],
        "paths": {
            f"/{endpoint}": {
                "post": {
                    "tags": [method],
                    "description": pair.request.get("description") or "",
                    "requestBody": {
                        "content": {"application/json": {"schema": to_openapi_schema(pair.request)}},
                        "required": True,
                    },
                    "responses": _responses(endpoint, pair),
                }
            }
        },
    }
    if pair.definitions:
        document["components"] = {
            "schemas": {name: to_openapi_schema(schema) for name, schema in pair.definitions.items()}
        }
    return document


def build_openapi_documents(schemas: AllSchemas, logger: logging.Logger | None = None) -> OpenAPISpecs:
    log = phase_logger("OpenAPI", logger)
    log.info("Converting JSON schemas to OpenAPI specs...")

    result: OpenAPISpecs = {}
    for endpoint, methods in schemas.items():
        result[endpoint] = {
            method: build_openapi_document(pair, endpoint, method) for method, pair in methods.items()
        }

    converted = sum(len(methods) for methods in result.values())
    log.info("Completed: %d specs converted", converted)
    return result
