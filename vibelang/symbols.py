"""Scoped symbol table and function signature registry used for semantic checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .nodes import AstNode

MAX_PARAMS = 10


class SemanticError(Exception):
    """Raised when a declaration or call breaks the language's rules."""


@dataclass
class Symbol:
    """A named entity declared in some scope."""

    name: str
    type: str
    role: str
    scope_level: int


@dataclass
class FunctionInfo:
    """The signature of a declared function."""

    name: str
    return_type: str
    param_types: list[str] = field(default_factory=list)
    defined: bool = False

    @property
    def param_count(self) -> int:
        return len(self.param_types)


def _is_args(node: AstNode) -> bool:
    return node.node_type == "args"


class SymbolTable:
    """Symbols organised by nesting level, plus the known functions."""

    def __init__(self) -> None:
        self.symbols: list[Symbol] = []
        self.current_scope = 0
        self.functions: dict[str, FunctionInfo] = {}

    def insert_symbol(self, name: str, role: str, type_name: str) -> Symbol:
        """Declare ``name`` in the current scope."""
        if any(s.name == name and s.scope_level == self.current_scope for s in self.symbols):
            raise SemanticError(f"Redeclaration of '{name}' in same scope")
        symbol = Symbol(name=name, type=type_name, role=role, scope_level=self.current_scope)
        self.symbols.append(symbol)
        return symbol

    def lookup(self, name: str) -> Optional[Symbol]:
        """Find the innermost visible symbol called ``name``."""
        return next((s for s in reversed(self.symbols) if s.name == name), None)

    def lookup_current_scope(self, name: str) -> Optional[Symbol]:
        """Find ``name`` among the symbols of the current scope only."""
        return next(
            (s for s in reversed(self.symbols)
             if s.name == name and s.scope_level == self.current_scope),
            None,
        )

    def enter_scope(self) -> None:
        self.current_scope += 1

    def exit_scope(self) -> None:
        """Drop the symbols of the current scope and return to the enclosing one."""
        while self.symbols and self.symbols[-1].scope_level == self.current_scope:
            self.symbols.pop()
        self.current_scope -= 1

    def add_function(self, name: str, return_type: str) -> FunctionInfo:
        if name in self.functions:
            raise SemanticError(f"Function '{name}' already declared")
        info = FunctionInfo(name=name, return_type=return_type)
        self.functions[name] = info
        return info

    def add_function_param(self, func_name: str, param_type: str) -> None:
        info = self.functions.get(func_name)
        if info is None:
            raise SemanticError(f"Function '{func_name}' not found when adding param")
        if info.param_count >= MAX_PARAMS:
            raise SemanticError(f"Too many parameters for function '{func_name}'")
        info.param_types.append(param_type)

    def check_function_args(self, func_name: str, args: Optional[AstNode]) -> None:
        """Check a call's argument list against the declared signature.

        Arguments are counted along ``right`` links of ``args`` nodes and
        their types are checked along ``left`` links.
        """
        info = self.functions.get(func_name)
        if info is None:
            raise SemanticError(f"Function '{func_name}' not declared")

        arg_count = 0
        current = args
        while current is not None:
            arg_count += 1
            current = current.right if _is_args(current) else None
        if arg_count != info.param_count:
            raise SemanticError(f"Argument count mismatch for function '{func_name}'")

        current = args
        for position, param_type in enumerate(info.param_types, start=1):
            if current is None or current.type != param_type:
                raise SemanticError(
                    f"Argument type mismatch for function '{func_name}' (param {position})"
                )
            if _is_args(current):
                current = current.left

    def verify_return_type(self, func_name: str, return_type: str) -> None:
        info = self.functions.get(func_name)
        if info is None:
            raise SemanticError(f"Function '{func_name}' not found")
        if info.return_type != return_type:
            raise SemanticError(f"Return type mismatch for function '{func_name}'")