"""Resolve the request/response schema names of one SDK operation.

Names are found by convention, trying an ordered list of candidate
strategies until one produces a name the source module declares:

    request:  {Op}Request, {Op}{Endpoint}Request
    response: {Op}Response, {Op}{Endpoint}Response, awaited return type

The awaited return type is the payload of an ``async def`` annotation, or the
single type argument of an ``Awaitable``/``Coroutine``/``Future``/``Task``
return annotation on a plain ``def``.
"""

from __future__ import annotations

import ast
import re
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from scripts.apidocs.errors import InvalidReturnTypeError, NotFoundError
from scripts.apidocs.symbols import FunctionNode, SymbolTable, parse_symbols

# wrapper name -> number of type arguments; the payload is always the last one
ASYNC_WRAPPERS = {"Awaitable": 1, "Coroutine": 3, "Future": 1, "Task": 1}

_SUCCESS_SUFFIX = "SuccessResponse"
_EXAMPLE_HEADER_RE = re.compile(r"^(\s*)Examples?:\s*$")
_FENCE_RE = re.compile(r"^\s*```")


@dataclass(frozen=True)
class SchemaRefs:
    request: str
    response: str
    example: str | None = None


@dataclass(frozen=True)
class _Target:
    table: SymbolTable
    function: FunctionNode
    operation: str
    endpoint: str
    kind: str  # "Request" or "Response"


Strategy = Callable[[_Target], str]


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def normalize_response_name(name: str) -> str:
    """Collapse a trailing ``SuccessResponse`` to ``Response``."""
    if name.endswith(_SUCCESS_SUFFIX):
        return name[: -len(_SUCCESS_SUFFIX)] + "Response"
    return name


# ---------------------------------------------------------------------------
# Return type inspection
# ---------------------------------------------------------------------------


def _as_expr(annotation: ast.expr) -> ast.expr:
    # String annotations ("FooResponse") are parsed into expressions.
    if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
        try:
            return ast.parse(annotation.value, mode="eval").body
        except SyntaxError:
            return annotation
    return annotation


def _dotted_name(node: ast.expr) -> str | None:
    node = _as_expr(node)
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        parent = _dotted_name(node.value)
        return f"{parent}.{node.attr}" if parent else None
    return None


def awaited_type_name(function: FunctionNode) -> str:
    """Return the single named type an operation resolves to when awaited.

    Raises InvalidReturnTypeError when the return annotation is missing, is
    not an asynchronous-result wrapper, or wraps anything other than exactly
    one named type.
    """
    name = function.name
    if function.returns is None:
        raise InvalidReturnTypeError(f"Function '{name}' has no return type annotation")

    annotation = _as_expr(function.returns)
    if isinstance(function, ast.AsyncFunctionDef):
        payload = annotation
    else:
        if not isinstance(annotation, ast.Subscript):
            raise InvalidReturnTypeError(
                f"Function '{name}' must return an awaitable, got '{ast.unparse(annotation)}'"
            )
        wrapper = (_dotted_name(annotation.value) or "").rsplit(".", 1)[-1]
        if wrapper not in ASYNC_WRAPPERS:
            raise InvalidReturnTypeError(
                f"Function '{name}' return type '{ast.unparse(annotation)}' "
                f"is not one of {', '.join(sorted(ASYNC_WRAPPERS))}"
            )
        args = annotation.slice
        params = list(args.elts) if isinstance(args, ast.Tuple) else [args]
        if len(params) != ASYNC_WRAPPERS[wrapper]:
            raise InvalidReturnTypeError(
                f"Function '{name}' return type '{ast.unparse(annotation)}' "
                f"must have {ASYNC_WRAPPERS[wrapper]} type argument(s)"
            )
        payload = params[-1]

    type_name = _dotted_name(payload)
    if type_name is None:
        raise InvalidReturnTypeError(
            f"Function '{name}' must resolve to exactly one named type, "
            f"got '{ast.unparse(payload)}'"
        )
    return type_name


# ---------------------------------------------------------------------------
# Candidate strategies
# ---------------------------------------------------------------------------


def by_convention(target: _Target) -> str:
    return f"{capitalize(target.operation)}{target.kind}"


def by_endpoint_convention(target: _Target) -> str:
    return f"{capitalize(target.operation)}{capitalize(target.endpoint)}{target.kind}"


def by_return_type(target: _Target) -> str:
    return awaited_type_name(target.function)


REQUEST_STRATEGIES: tuple[Strategy, ...] = (by_convention, by_endpoint_convention)
RESPONSE_STRATEGIES: tuple[Strategy, ...] = (
    by_convention,
    by_endpoint_convention,
    by_return_type,
)


def _first_match(target: _Target, strategies: Sequence[Strategy]) -> str:
    tried: list[str] = []
    for strategy in strategies:
        candidate = strategy(target)
        if target.table.declares(candidate):
            return candidate.rsplit(".", 1)[-1]
        tried.append(candidate)
    raise NotFoundError(
        f"No {target.kind.lower()} schema for '{target.operation}' "
        f"({target.endpoint}) in {target.table.path}; tried {', '.join(tried)}"
    )


# ---------------------------------------------------------------------------
# Docstring examples
# ---------------------------------------------------------------------------


def extract_example(docstring: str | None) -> str | None:
    """Return the code under an ``Example:`` docstring section, unfenced."""
    if not docstring:
        return None

    lines = docstring.splitlines()
    for index, line in enumerate(lines):
        header = _EXAMPLE_HEADER_RE.match(line)
        if header:
            break
    else:
        return None

    indent = len(header.group(1))
    body: list[str] = []
    for line in lines[index + 1:]:
        if line.strip() and len(line) - len(line.lstrip()) <= indent:
            break
        body.append(line)

    block = [line for line in textwrap.dedent("\n".join(body)).splitlines() if not _FENCE_RE.match(line)]
    snippet = textwrap.dedent("\n".join(block)).strip("\n")
    return snippet or None


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def resolve_schema_refs(source_path: str | Path, operation: str, endpoint: str) -> SchemaRefs:
    """Resolve the schema names for ``operation`` defined in ``source_path``."""
    table = parse_symbols(source_path)
    function = table.function(operation)

    request = _first_match(
        _Target(table, function, operation, endpoint, "Request"), REQUEST_STRATEGIES
    )
    response = _first_match(
        _Target(table, function, operation, endpoint, "Response"), RESPONSE_STRATEGIES
    )

    return SchemaRefs(
        request=request,
        response=normalize_response_name(response),
        example=extract_example(ast.get_docstring(function)),
    )
