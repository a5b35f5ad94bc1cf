#!/usr/bin/env python3
"""Tests for scripts/apidocs/convert_schemas.py: pydantic schemas to JSON Schema."""

import os
import sys
from typing import Callable, Literal, Optional

import pytest
from pydantic import BaseModel, Field, TypeAdapter

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "fixtures"))

FIXTURE_REGISTRY = {
    "info": ("allMids", "meta"),
    "exchange": ("cancel", "order", "multiSig"),
}


class Leverage(BaseModel):
    type: Literal["cross", "isolated"]
    value: int = 1


class UpdateLeverageRequest(BaseModel):
    """Update cross or isolated leverage on a coin."""

    asset: int
    isCross: bool = True
    leverage: Leverage


class UpdateLeverageResponse(BaseModel):
    status: Literal["ok"]
    leverage: Leverage


class WithHook(BaseModel):
    name: str
    hook: Callable[[], None]


# ---------------------------------------------------------------------------
# Tests: to_json_schema_pair
# ---------------------------------------------------------------------------


class TestToJsonSchemaPair:
    def test_root_models_are_inlined(self):
        from scripts.apidocs.convert_schemas import to_json_schema_pair

        pair = to_json_schema_pair(UpdateLeverageRequest, UpdateLeverageResponse)

        assert pair.request["type"] == "object"
        assert pair.request["description"] == "Update cross or isolated leverage on a coin."
        assert set(pair.request["properties"]) == {"asset", "isCross", "leverage"}
        assert "$ref" not in pair.response

    def test_shared_models_become_components(self):
        from scripts.apidocs.convert_schemas import to_json_schema_pair

        pair = to_json_schema_pair(UpdateLeverageRequest, UpdateLeverageResponse)

        assert list(pair.definitions) == ["Leverage"]
        ref = {"$ref": "#/components/schemas/Leverage"}
        assert pair.request["properties"]["leverage"] == ref
        assert pair.response["properties"]["leverage"] == ref
        assert "UpdateLeverageRequest" not in pair.definitions

    def test_defaults_are_stripped_everywhere(self):
        from scripts.apidocs.convert_schemas import to_json_schema_pair

        pair = to_json_schema_pair(UpdateLeverageRequest, UpdateLeverageResponse)

        assert "default" not in pair.request["properties"]["isCross"]
        assert "default" not in pair.definitions["Leverage"]["properties"]["value"]

    def test_property_named_default_is_kept(self):
        from scripts.apidocs.convert_schemas import to_json_schema_pair

        class Settings(BaseModel):
            default: str

        pair = to_json_schema_pair(Settings, Settings)
        assert "default" in pair.request["properties"]

    def test_unsupported_fields_are_omitted(self):
        from scripts.apidocs.convert_schemas import to_json_schema_pair

        pair = to_json_schema_pair(WithHook, WithHook)

        assert set(pair.request["properties"]) == {"name"}
        assert pair.request["required"] == ["name"]

    def test_unsupported_root_becomes_empty_schema(self):
        from scripts.apidocs.convert_schemas import to_json_schema_pair

        pair = to_json_schema_pair(UpdateLeverageRequest, TypeAdapter(Callable[[], None]))

        assert pair.response == {}
        assert pair.request["title"] == "UpdateLeverageRequest"
        assert set(pair.definitions) == {"Leverage"}

    def test_both_roots_unsupported(self):
        from scripts.apidocs.convert_schemas import to_json_schema_pair

        hook = TypeAdapter(Callable[[], None])
        pair = to_json_schema_pair(hook, hook)

        assert (pair.request, pair.response, pair.definitions) == ({}, {}, {})

    def test_type_adapters_and_plain_types(self):
        from scripts.apidocs.convert_schemas import to_json_schema_pair

        pair = to_json_schema_pair(TypeAdapter(dict[str, str]), list[int])

        assert pair.request == {"type": "object", "additionalProperties": {"type": "string"}}
        assert pair.response == {"type": "array", "items": {"type": "integer"}}
        assert pair.definitions == {}

    def test_describes_serialized_output(self):
        from scripts.apidocs.convert_schemas import to_json_schema_pair

        class Fill(BaseModel):
            px: str = Field(validation_alias="price")
            size: Optional[str] = None

        pair = to_json_schema_pair(Fill, Fill)
        assert "px" in pair.response["properties"]
        assert "price" not in pair.response["properties"]


# ---------------------------------------------------------------------------
# Tests: namespace lookup and SDK layout
# ---------------------------------------------------------------------------


class TestSdkLayout:
    def test_method_source_points_at_module_file(self):
        from scripts.apidocs.convert_schemas import SdkLayout

        path = SdkLayout("hl_sdk_fixture").method_source("info", "allMids")
        assert path.name == "allMids.py"
        assert path.exists()

    def test_missing_method_module(self):
        from scripts.apidocs.convert_schemas import SdkLayout
        from scripts.apidocs.errors import NotFoundError

        with pytest.raises(NotFoundError, match="l2Book"):
            SdkLayout("hl_sdk_fixture").method_source("info", "l2Book")

    def test_missing_package(self):
        from scripts.apidocs.convert_schemas import SdkLayout
        from scripts.apidocs.errors import NotFoundError

        with pytest.raises(NotFoundError):
            SdkLayout("no_such_sdk_package").namespace("info")

    def test_load_schema_missing_name(self):
        from scripts.apidocs.convert_schemas import SdkLayout, load_schema
        from scripts.apidocs.errors import NotFoundError

        namespace = SdkLayout("hl_sdk_fixture").namespace("info")
        with pytest.raises(NotFoundError, match="GhostRequest"):
            load_schema(namespace, "GhostRequest")


# ---------------------------------------------------------------------------
# Tests: get_all_schemas
# ---------------------------------------------------------------------------


class TestGetAllSchemas:
    def test_resolves_every_registered_method(self):
        from scripts.apidocs.convert_schemas import SdkLayout, get_all_schemas

        schemas = get_all_schemas(SdkLayout("hl_sdk_fixture"), registry=FIXTURE_REGISTRY)

        assert sorted(schemas) == ["exchange", "info"]
        assert sorted(schemas["info"]) == ["allMids", "meta"]
        # multiSig is on the default skip list
        assert sorted(schemas["exchange"]) == ["cancel", "order"]

    def test_fixture_conventions(self):
        from scripts.apidocs.convert_schemas import SdkLayout, get_all_schemas

        schemas = get_all_schemas(SdkLayout("hl_sdk_fixture"), registry=FIXTURE_REGISTRY)

        all_mids = schemas["info"]["allMids"]
        assert all_mids.response["description"] == "Mapping of coin symbols to mid prices."
        assert "default" not in all_mids.request["properties"]["dex"]

        meta = schemas["info"]["meta"]
        assert "UniverseAsset" in meta.definitions

        cancel = schemas["exchange"]["cancel"]
        assert cancel.request["description"] == "Cancel order(s)."

        order = schemas["exchange"]["order"]
        assert order.response["description"] == "Successful variant of the order response."

    def test_unskipped_broken_method_aborts(self):
        from scripts.apidocs.convert_schemas import SdkLayout, get_all_schemas
        from scripts.apidocs.errors import NotFoundError

        with pytest.raises(NotFoundError, match="multiSig"):
            get_all_schemas(SdkLayout("hl_sdk_fixture"), skipped=(), registry=FIXTURE_REGISTRY)
