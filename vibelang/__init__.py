"""Tree-walking interpreter, syntax tree nodes and symbol tables for the Vibe language."""

__version__ = "0.1.0"
__all__ = ["interpreter", "nodes", "symbols"]