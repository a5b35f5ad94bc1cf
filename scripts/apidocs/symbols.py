"""Module-level symbol table for an SDK source file, built with ``ast``."""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from pathlib import Path

from scripts.apidocs.errors import NotFoundError

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


@dataclass
class SymbolTable:
    path: Path
    # name -> "class" | "function" | "variable" | "import" | "type"
    declared: dict[str, str] = field(default_factory=dict)
    functions: dict[str, FunctionNode] = field(default_factory=dict)

    def declares(self, name: str) -> bool:
        """True if the first segment of a (possibly dotted) name is bound in the module."""
        return name.split(".", 1)[0] in self.declared

    def function(self, name: str) -> FunctionNode:
        node = self.functions.get(name)
        if node is not None:
            return node
        kind = self.declared.get(name)
        if kind is not None:
            raise NotFoundError(
                f"Symbol '{name}' in {self.path} is a {kind}, not a function"
            )
        raise NotFoundError(f"Function '{name}' not found in {self.path}")


def _collect(table: SymbolTable, body: list[ast.stmt]) -> None:
    for node in body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            table.declared[node.name] = "function"
            table.functions[node.name] = node
        elif isinstance(node, ast.ClassDef):
            table.declared[node.name] = "class"
            for member in node.body:
                if isinstance(member, (ast.FunctionDef, ast.AsyncFunctionDef)):
                    # Module-level functions win over same-named methods.
                    table.functions.setdefault(member.name, member)
        elif isinstance(node, ast.Assign):
            for target in node.targets:
                if isinstance(target, ast.Name):
                    table.declared[target.id] = "variable"
        elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            table.declared[node.target.id] = "variable"
        elif isinstance(node, ast.Import):
            for alias in node.names:
                bound = alias.asname or alias.name.split(".", 1)[0]
                table.declared[bound] = "import"
        elif isinstance(node, ast.ImportFrom):
            for alias in node.names:
                if alias.name != "*":
                    table.declared[alias.asname or alias.name] = "import"
        elif isinstance(node, ast.If):
            _collect(table, node.body)
            _collect(table, node.orelse)
        elif isinstance(node, ast.Try):
            _collect(table, node.body)
            for handler in node.handlers:
                _collect(table, handler.body)
            _collect(table, node.orelse)
            _collect(table, node.finalbody)
        elif type(node).__name__ == "TypeAlias":  # `type X = ...`, Python 3.12+
            table.declared[node.name.id] = "type"


def parse_symbols(path: str | Path) -> SymbolTable:
    """Parse ``path`` and return the names it binds at module level.

    A missing or unreadable file raises NotFoundError. Syntax errors
    propagate unchanged so the traceback points at the offending line.
    """
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise NotFoundError(f"Cannot read SDK source file {path}: {exc}") from exc

    tree = ast.parse(source, filename=str(path))
    table = SymbolTable(path=path)
    _collect(table, tree.body)
    return table
