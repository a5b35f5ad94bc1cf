#!/usr/bin/env python3
"""Tests for scripts/apidocs/symbols.py: module-level symbol tables."""

import os
import sys
import textwrap

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

SOURCE = textwrap.dedent("""\
    from __future__ import annotations

    import typing as t
    from typing import TYPE_CHECKING

    if TYPE_CHECKING:
        from .models import MetaResponse
    else:
        MetaResponse = dict

    try:
        from fastjson import loads
    except ImportError:
        from json import loads

    LIMIT: int = 10
    Alias = MetaResponse

    class MetaRequest:
        type: str = "meta"

        def meta(self):
            return None

    async def meta(request: MetaRequest) -> MetaResponse:
        ...
""")


def write(tmp_path, source=SOURCE):
    path = tmp_path / "meta.py"
    path.write_text(source, encoding="utf-8")
    return path


class TestParseSymbols:
    def test_collects_declared_names(self, tmp_path):
        from scripts.apidocs.symbols import parse_symbols

        table = parse_symbols(write(tmp_path))

        assert table.declared["MetaRequest"] == "class"
        assert table.declared["meta"] == "function"
        assert table.declared["LIMIT"] == "variable"
        assert table.declared["Alias"] == "variable"
        assert table.declared["t"] == "import"
        assert table.declared["loads"] == "import"

    def test_conditional_imports_count_as_declared(self, tmp_path):
        from scripts.apidocs.symbols import parse_symbols

        table = parse_symbols(write(tmp_path))
        assert table.declares("MetaResponse")

    def test_dotted_name_checks_first_segment(self, tmp_path):
        from scripts.apidocs.symbols import parse_symbols

        table = parse_symbols(write(tmp_path))
        assert table.declares("t.Any")
        assert not table.declares("models.MetaResponse")

    def test_module_function_wins_over_method(self, tmp_path):
        import ast

        from scripts.apidocs.symbols import parse_symbols

        node = parse_symbols(write(tmp_path)).function("meta")
        assert isinstance(node, ast.AsyncFunctionDef)

    def test_class_is_not_a_function(self, tmp_path):
        from scripts.apidocs.errors import NotFoundError
        from scripts.apidocs.symbols import parse_symbols

        table = parse_symbols(write(tmp_path))
        with pytest.raises(NotFoundError, match="is a class, not a function"):
            table.function("MetaRequest")

    def test_syntax_error_propagates(self, tmp_path):
        from scripts.apidocs.symbols import parse_symbols

        with pytest.raises(SyntaxError):
            parse_symbols(write(tmp_path, "def broken(:\n"))

    def test_missing_file_raises_not_found(self, tmp_path):
        from scripts.apidocs.errors import NotFoundError
        from scripts.apidocs.symbols import parse_symbols

        with pytest.raises(NotFoundError, match="Cannot read SDK source file"):
            parse_symbols(tmp_path / "absent.py")
