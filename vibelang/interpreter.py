"""Tree-walking evaluator for parsed programs."""

from __future__ import annotations

import math
import re
import struct
import sys
from dataclasses import dataclass
from typing import Any, Callable, Optional, TextIO

from .nodes import AstNode
from .symbols import SymbolTable

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_LITERALS = frozenset({"INT", "FLOAT", "STRING", "BOOL"})
_BINARY_OPS = frozenset(
    {"+", "-", "*", "/", "==", "!=", "<", ">", "<=", ">=", "AND", "OR"}
)
_UNARY_OPS = frozenset({"NOT", "UMINUS"})
_ORDERINGS: dict[str, Callable[[Any, Any], bool]] = {
    "<": lambda a, b: a < b,
    ">": lambda a, b: a > b,
    "<=": lambda a, b: a <= b,
    ">=": lambda a, b: a >= b,
}


class InterpreterError(Exception):
    """Raised when a program fails at run time."""


class ProgramExit(Exception):
    """Raised by a ``return`` statement to end the program."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code


def _wrap_int(number: int) -> int:
    """Reduce ``number`` to a signed 32-bit integer."""
    number &= 0xFFFFFFFF
    return number - 0x100000000 if number >= 0x80000000 else number


def _to_float32(number: float) -> float:
    """Round ``number`` to single precision."""
    try:
        return struct.unpack("f", struct.pack("f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def _parse_int(text: str) -> int:
    match = _INT_RE.match(text)
    return _wrap_int(int(match.group(1))) if match else 0


def _parse_float(text: str) -> float:
    match = _FLOAT_RE.match(text)
    return _to_float32(float(match.group(1))) if match else 0.0


@dataclass
class Value:
    """A typed run-time value."""

    type: str
    value: Any = None

    def render(self) -> Optional[str]:
        """Return the printed form, or ``None`` for types that print nothing."""
        if self.type == "int":
            return str(self.value)
        if self.type == "float":
            return f"{self.value:f}"
        if self.type == "string":
            return self.value
        if self.type == "bool":
            return "true" if self.value else "false"
        return None


def create_variable(type_name: str, text: Optional[str]) -> Value:
    """Build a value of ``type_name`` from its text, or its zero value if ``text`` is None."""
    if text is not None:
        if type_name == "int":
            return Value(type_name, _parse_int(text))
        if type_name == "float":
            return Value(type_name, _parse_float(text))
        if type_name == "string":
            return Value(type_name, text)
        if type_name == "bool":
            return Value(type_name, text == "true")
        return Value(type_name)
    defaults = {"int": 0, "float": 0.0, "string": "", "bool": False}
    return Value(type_name, defaults.get(type_name))


class Interpreter:
    """Executes a syntax tree, writing printed values to ``output``."""

    def __init__(self, output: Optional[TextIO] = None) -> None:
        self.output = output if output is not None else sys.stdout
        self.scopes = SymbolTable()
        self._variables: list[tuple[str, Value]] = []
        self._statements: dict[str, Callable[[AstNode], None]] = {
            "functions": self._sequence,
            "statements": self._sequence,
            "function": self._function,
            "block": self._block,
            "decl_assign": self._declare,
            "assign": self._assign,
            "if": self._if,
            "else_if": self._else_if,
            "else": self._else,
            "for_loop": self._for_loop,
            "while_loop": self._while_loop,
            "do_while": self._do_while,
            "call": self._call,
            "return": self._return,
            "print": self._print,
        }

    # Statements

    def interpret(self, node: Optional[AstNode]) -> None:
        """Execute the statement or declaration rooted at ``node``."""
        if node is None:
            return
        handler = self._statements.get(node.node_type)
        if handler is None:
            raise InterpreterError(f"Unknown node type: {node.node_type}")
        handler(node)

    def _sequence(self, node: AstNode) -> None:
        self.interpret(node.left)
        self.interpret(node.right)

    def _function(self, node: AstNode) -> None:
        if node.value == "main":
            self.interpret(node.left)

    def _block(self, node: AstNode) -> None:
        self.scopes.enter_scope()
        try:
            self.interpret(node.left)
        finally:
            self.scopes.exit_scope()

    def _declare(self, node: AstNode) -> None:
        value = self.evaluate(node.right)
        self._variables.append((node.left.value, Value(node.type, value.value)))

    def _assign(self, node: AstNode) -> None:
        name = node.left.value
        variable = self.find_variable(name)
        if variable is None:
            raise InterpreterError(f"Variable '{name}' not found")
        value = self.evaluate(node.right)
        if variable.type != value.type:
            raise InterpreterError(f"Type mismatch in assignment to '{name}'")
        variable.value = value.value

    def _condition(self, node: Optional[AstNode], message: str) -> bool:
        cond = self.evaluate(node)
        if cond.type != "bool":
            raise InterpreterError(message)
        return bool(cond.value)

    def _if(self, node: AstNode) -> None:
        if self._condition(node.left, "Condition must be boolean"):
            self.interpret(node.right)
        elif node.right is not None and node.right.right is not None:
            self.interpret(node.right.right)

    def _else_if(self, node: AstNode) -> None:
        self._condition(node.left, "Condition must be boolean")
        self.interpret(node.right)

    def _else(self, node: AstNode) -> None:
        self.interpret(node.left)

    def _for_loop(self, node: AstNode) -> None:
        header = node.left
        self.interpret(header.left)
        while self._condition(header.right.left, "Loop condition must be boolean"):
            self.interpret(node.right)
            self.interpret(header.right.right)

    def _while_loop(self, node: AstNode) -> None:
        while self._condition(node.left, "Loop condition must be boolean"):
            self.interpret(node.right)

    def _do_while(self, node: AstNode) -> None:
        while True:
            self.interpret(node.left)
            if not self._condition(node.right, "Loop condition must be boolean"):
                break

    def _arguments(self, node: AstNode):
        args = node.right
        while args is not None:
            yield self.evaluate(args)
            args = args.left if args.node_type == "args" else None

    def _call(self, node: AstNode) -> None:
        if node.value == "print":
            for value in self._arguments(node):
                self._emit(value)
            return
        for _ in self._arguments(node):
            pass

    def _return(self, node: AstNode) -> None:
        if node.left is not None:
            self.evaluate(node.left)
        raise ProgramExit(0)

    def _print(self, node: AstNode) -> None:
        self._emit(self.evaluate(node.left))

    def _emit(self, value: Value) -> None:
        text = value.render()
        if text is not None:
            self.output.write(text + "\n")

    # Expressions

    def evaluate(self, node: Optional[AstNode]) -> Value:
        """Evaluate the expression rooted at ``node``."""
        if node is None:
            raise InterpreterError("Null expression")
        kind = node.node_type
        if kind == "ID":
            return self._identifier(node)
        if kind in _LITERALS:
            return self._literal(node)
        if kind in _BINARY_OPS:
            return self._binary(node)
        if kind in _UNARY_OPS:
            return self._unary(node)
        if kind == "call":
            self._call(node)
            return Value(node.type or "void")
        raise InterpreterError(f"Unknown expression type: {kind}")

    def find_variable(self, name: str) -> Optional[Value]:
        """Return the most recently declared variable called ``name``."""
        return next((v for n, v in reversed(self._variables) if n == name), None)

    def _identifier(self, node: AstNode) -> Value:
        variable = self.find_variable(node.value)
        if variable is None:
            raise InterpreterError(f"Variable '{node.value}' not found")
        return Value(variable.type, variable.value)

    @staticmethod
    def _literal(node: AstNode) -> Value:
        kind = node.node_type
        if kind == "INT":
            return Value(node.type, _parse_int(node.value or ""))
        if kind == "FLOAT":
            return Value(node.type, _parse_float(node.value or ""))
        if kind == "STRING":
            return Value(node.type, node.value if node.value is not None else "")
        return Value(node.type, node.value == "true")

    def _binary(self, node: AstNode) -> Value:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        op = node.node_type
        both = left.type if left.type == right.type else None

        if op in ("+", "-", "*"):
            if both == "int":
                a, b = left.value, right.value
                result = a + b if op == "+" else a - b if op == "-" else a * b
                return Value("int", _wrap_int(result))
            if both == "float":
                a, b = left.value, right.value
                result = a + b if op == "+" else a - b if op == "-" else a * b
                return Value("float", _to_float32(result))
            if both == "string" and op == "+":
                return Value("string", left.value + right.value)
            raise InterpreterError(f"Invalid operands for {op}")

        if op == "/":
            if both == "int":
                if right.value == 0:
                    raise InterpreterError("Division by zero")
                quotient = abs(left.value) // abs(right.value)
                if (left.value < 0) != (right.value < 0):
                    quotient = -quotient
                return Value("int", _wrap_int(quotient))
            if both == "float":
                if right.value == 0.0:
                    raise InterpreterError("Division by zero")
                return Value("float", _to_float32(left.value / right.value))
            raise InterpreterError("Invalid operands for /")

        if op in ("==", "!="):
            if both is None:
                raise InterpreterError("Type mismatch in comparison")
            if both not in ("int", "float", "string", "bool"):
                raise InterpreterError("Unsupported type in comparison")
            equal = left.value == right.value
            return Value("bool", equal if op == "==" else not equal)

        if op in _ORDERINGS:
            if both in ("int", "float"):
                return Value("bool", _ORDERINGS[op](left.value, right.value))
            raise InterpreterError("Invalid operands for comparison")

        if left.type != "bool" or right.type != "bool":
            raise InterpreterError("Logical operators require boolean operands")
        if op == "AND":
            return Value("bool", bool(left.value and right.value))
        return Value("bool", bool(left.value or right.value))

    def _unary(self, node: AstNode) -> Value:
        operand = self.evaluate(node.left)
        if node.node_type == "NOT":
            if operand.type != "bool":
                raise InterpreterError("NOT operator requires boolean")
            return Value("bool", not operand.value)
        if operand.type == "int":
            return Value("int", _wrap_int(-operand.value))
        if operand.type == "float":
            return Value("float", -operand.value)
        raise InterpreterError("UMINUS requires numeric type")


def run(node: Optional[AstNode], output: Optional[TextIO] = None) -> int:
    """Execute a program tree and return its exit status."""
    try:
        Interpreter(output).interpret(node)
    except ProgramExit as exit_:
        return exit_.code
    return 0