"""Load SDK schema objects and convert them to JSON Schema.

Schemas are pydantic models (or anything ``TypeAdapter`` accepts) exported
from ``<sdk>/api/<endpoint>``. Each operation's source lives in
``<sdk>/api/<endpoint>/_methods/<method>.py``.

Conversion describes the serialized (output) form, omits constructs that
have no JSON Schema representation, and never emits ``default``.
"""

from __future__ import annotations

import copy
import importlib
import importlib.util
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable, Mapping

from pydantic import TypeAdapter
from pydantic.json_schema import GenerateJsonSchema
from pydantic_core import PydanticOmit

from scripts.apidocs.errors import NotFoundError
from scripts.apidocs.logs import phase_logger
from scripts.apidocs.registry import DEFAULT_SKIPPED_METHODS, ENDPOINTS, METHODS, list_methods
from scripts.apidocs.resolve_schemas import SchemaRefs, resolve_schema_refs

REF_PREFIX = "#/components/schemas/"
REF_TEMPLATE = REF_PREFIX + "{model}"

JsonSchema = dict[str, Any]


@dataclass(frozen=True)
class SchemaPair:
    request: JsonSchema
    response: JsonSchema
    definitions: JsonSchema = field(default_factory=dict)


AllSchemas = dict[str, dict[str, SchemaPair]]


class OutputJsonSchema(GenerateJsonSchema):
    """Lenient generator: skip unsupported constructs and drop defaults."""

    ignored_warning_kinds = {"skipped-choice", "non-serializable-default", "skipped-discriminator"}

    def handle_invalid_for_json_schema(self, schema, error_info):
        raise PydanticOmit

    def default_schema(self, schema):
        json_schema = super().default_schema(schema)
        json_schema.pop("default", None)
        return json_schema


# ---------------------------------------------------------------------------
# SDK layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SdkLayout:
    package: str

    def namespace_module(self, endpoint: str) -> str:
        return f"{self.package}.api.{endpoint}"

    def method_module(self, endpoint: str, method: str) -> str:
        return f"{self.package}.api.{endpoint}._methods.{method}"

    def namespace(self, endpoint: str) -> ModuleType:
        name = self.namespace_module(endpoint)
        try:
            return importlib.import_module(name)
        except ModuleNotFoundError as exc:
            raise NotFoundError(f"Schema namespace '{name}' could not be imported: {exc}") from exc

    def method_source(self, endpoint: str, method: str) -> Path:
        name = self.method_module(endpoint, method)
        try:
            spec = importlib.util.find_spec(name)
        except ModuleNotFoundError as exc:
            raise NotFoundError(f"Source module '{name}' for '{method}' not found: {exc}") from exc
        if spec is None or not spec.origin:
            raise NotFoundError(f"Source module '{name}' for '{method}' not found")
        return Path(spec.origin)


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def load_schema(namespace: ModuleType, name: str) -> Any:
    try:
        return getattr(namespace, name)
    except AttributeError:
        raise NotFoundError(f"Schema '{name}' not found in {namespace.__name__}") from None


def _adapter(value: Any) -> TypeAdapter:
    return value if isinstance(value, TypeAdapter) else TypeAdapter(value)


def _refs_in(node: Any) -> set[str]:
    found: set[str] = set()
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str) and ref.startswith(REF_PREFIX):
            found.add(ref[len(REF_PREFIX):])
        for value in node.values():
            found |= _refs_in(value)
    elif isinstance(node, list):
        for value in node:
            found |= _refs_in(value)
    return found


def _inline_root(schema: JsonSchema, definitions: Mapping[str, JsonSchema]) -> JsonSchema:
    ref = schema.get("$ref")
    if set(schema) == {"$ref"} and isinstance(ref, str) and ref.startswith(REF_PREFIX):
        return copy.deepcopy(definitions[ref[len(REF_PREFIX):]])
    return copy.deepcopy(schema)


def _reachable(roots: Iterable[JsonSchema], definitions: Mapping[str, JsonSchema]) -> JsonSchema:
    pending = set().union(*(_refs_in(root) for root in roots))
    kept: JsonSchema = {}
    while pending:
        name = pending.pop()
        if name in kept or name not in definitions:
            continue
        kept[name] = copy.deepcopy(definitions[name])
        pending |= _refs_in(kept[name])
    return dict(sorted(kept.items()))


def _generate(roots: Mapping[str, Any]) -> tuple[dict, JsonSchema]:
    generator = OutputJsonSchema(ref_template=REF_TEMPLATE)
    return generator.generate_definitions(
        [(side, "serialization", core_schema) for side, core_schema in roots.items()]
    )


def _has_json_schema(core_schema: Any) -> bool:
    try:
        _generate({"root": core_schema})
    except PydanticOmit:
        return False
    return True


def to_json_schema_pair(request: Any, response: Any) -> SchemaPair:
    """Convert two schema values with one generator so shared models share a name.

    A side with no JSON Schema form at all becomes the empty schema ``{}``.
    """
    roots = {
        "request": _adapter(request).core_schema,
        "response": _adapter(response).core_schema,
    }
    kept = {side: core_schema for side, core_schema in roots.items() if _has_json_schema(core_schema)}
    mapping, definitions = _generate(kept) if kept else ({}, {})

    schemas = {
        side: _inline_root(mapping[(side, "serialization")], definitions) if side in kept else {}
        for side in roots
    }
    return SchemaPair(
        request=schemas["request"],
        response=schemas["response"],
        definitions=_reachable(schemas.values(), definitions),
    )


def convert_schema_pair(refs: SchemaRefs, namespace: ModuleType) -> SchemaPair:
    return to_json_schema_pair(
        load_schema(namespace, refs.request),
        load_schema(namespace, refs.response),
    )


def get_all_schemas(
    layout: SdkLayout,
    skipped: Iterable[str] = DEFAULT_SKIPPED_METHODS,
    registry: Mapping[str, Iterable[str]] | None = None,
    logger: logging.Logger | None = None,
) -> AllSchemas:
    """Resolve and convert the schemas of every registered operation.

    ``registry`` defaults to the module-level METHODS table.
    """
    registry = METHODS if registry is None else registry
    log = phase_logger("Schemas", logger)
    log.info("Starting to extract schemas...")

    skipped = tuple(skipped)
    results: AllSchemas = {}
    for endpoint in ENDPOINTS:
        namespace = layout.namespace(endpoint)
        results[endpoint] = {}
        for method in list_methods(endpoint, skipped, registry):
            refs = resolve_schema_refs(layout.method_source(endpoint, method), method, endpoint)
            log.debug("%s/%s: request=%s response=%s", endpoint, method, refs.request, refs.response)
            results[endpoint][method] = convert_schema_pair(refs, namespace)

    log.info("Completed extraction of schemas.")
    return results
