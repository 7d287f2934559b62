"""Syntax tree nodes produced by the parser and consumed by the interpreter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class AstNode:
    """A binary syntax tree node.

    ``node_type`` names the construct (``"args"``, ``"ID"``, ``"+"``, ...),
    ``type`` is the static type attached to it (``"int"``, ``"float"``, ...)
    and ``value`` holds the node's text, such as an identifier or a literal.
    """

    node_type: str
    type: Optional[str] = None
    value: Optional[str] = None
    left: Optional["AstNode"] = None
    right: Optional["AstNode"] = None