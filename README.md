# vibelang

`vibelang` runs programs written in Vibe, a small, statically typed language. A program is given as a syntax tree. The package evaluates that tree directly. It also provides the scoped symbol table and function signature registry that semantic checks use.

## Syntax trees

You build trees from `vibelang.nodes.AstNode` objects. Each node has these fields:

| Field | Meaning |
| --- | --- |
| `node_type` | The kind of construct, such as `"block"`, `"ID"`, `"INT"`, `"+"` or `"args"`. |
| `type` | The static type name, if any: `"int"`, `"float"`, `"string"` or `"bool"`. |
| `value` | The node's text, if any, such as an identifier name or a literal. |
| `left`, `right` | The two child nodes, either of which may be missing. |

For example, `print 1 + 2` is written like this:

```python
from vibelang.nodes import AstNode

tree = AstNode(
    "print",
    left=AstNode(
        "+",
        left=AstNode("INT", type="int", value="1"),
        right=AstNode("INT", type="int", value="2"),
    ),
)
```

## What the language supports

- **Values:** `int`, `float`, `string` and `bool`.
  - Integers behave as signed 32-bit numbers and wrap on overflow.
  - Floats are single precision.
- **Arithmetic:** `+`, `-`, `*` and `/`.
  - Both operands must have the same type.
  - `+` also joins two strings.
  - Integer division truncates toward zero.
  - Division by zero is an error.
- **Comparison:**
  - `==` and `!=` work on two operands of the same type.
  - `<`, `>`, `<=` and `>=` work on two ints or on two floats.
- **Logic:** `AND`, `OR` and `NOT` take booleans only. `UMINUS` (unary minus) takes an int or a float.
- **Statements:**
  - `decl_assign`: a declaration with an initial value
  - `assign`: an assignment, checked against the variable's type
  - `if`, `else_if` and `else`
  - `for_loop`, `while_loop` and `do_while`
  - `print`
  - `call`
  - `return`
  - `block`
  - `statements` and `functions` sequences
- **Conditions:** every `if`, `else_if` and loop condition must be a `bool`.
- **Functions:** of the `function` nodes, only the one whose value is `main` is executed.
- **Calls:** a `call` to `print` prints each of its arguments. A call to any other function evaluates the arguments and does not run a body.

## Running a tree

```python
import io

from vibelang.interpreter import run

out = io.StringIO()
status = run(tree, out)   # writes "3\n" for the tree above; status is 0
```

`run` takes these arguments:

- `node`: the root of the tree.
- `output`: an optional text stream. Every printed value goes to it on its own line. Without one, output goes to standard output.

`run` returns the program's exit status. A `return` statement ends the program early with status 0.

### Keeping state between calls

To keep state from one call to the next, use `vibelang.interpreter.Interpreter`:

- `interpret(node)` executes a statement tree. A `return` statement raises `ProgramExit`, whose `code` attribute holds the status.
- `evaluate(node)` returns the `Value` of an expression.
- `find_variable(name)` returns the most recently declared variable with that name, or `None`.

### Errors

Run-time faults raise `InterpreterError`. These include:

- an unknown node type
- an unknown variable
- a type mismatch
- a condition that is not a `bool`
- division by zero

## Values

`Value` holds a type name and a Python value. `Value.render()` returns the printed form of the value, or `None` for types that print nothing.

`create_variable(type_name, text)` builds a value from text. When `text` is `None`, it builds the zero value of the type instead.

```python
from vibelang.interpreter import create_variable

create_variable("int", "42").render()      # "42"
create_variable("bool", "true").render()   # "true"
create_variable("float", "1.5").render()   # "1.500000"
create_variable("string", None).render()   # ""
```

Floats are printed with six decimal places.

## Symbol and function tables

```python
from vibelang.nodes import AstNode
from vibelang.symbols import SemanticError, SymbolTable

table = SymbolTable()
table.enter_scope()
table.insert_symbol("count", "variable", "int")
table.lookup("count")            # the Symbol, searched innermost first

try:
    table.insert_symbol("count", "variable", "int")
except SemanticError as err:
    print(err)                   # Redeclaration of 'count' in same scope

table.exit_scope()               # drops every symbol of that scope

table.add_function("area", "float")
table.add_function_param("area", "float")
table.check_function_args("area", AstNode("FLOAT", type="float", value="2.0"))
table.verify_return_type("area", "float")
```

### Looking up symbols

- `lookup(name)` finds the innermost visible symbol with that name.
- `lookup_current_scope(name)` searches the current scope only.
- Both return `None` when nothing matches.

### Functions

- A function takes at most ten parameters.
- Declaring a function twice raises `SemanticError`.
- Adding a parameter to an unknown function raises `SemanticError`.
- `check_function_args` checks a call's arguments against the declared parameters. The arguments are either a single expression node or a chain of `args` nodes. It raises `SemanticError` when the function is unknown, or when the count or a type does not match.
- `verify_return_type` raises `SemanticError` when the function is unknown, or when its declared return type differs from the given one.

## What the package does not do

- There is no parser. Trees must be built from `AstNode` objects by your own code or front end.
- There is no command-line program.
- The interpreter does not call user-defined functions. It runs `main` only.
- The interpreter does not consult the symbol table for semantic checks. Those checks are left to the caller.