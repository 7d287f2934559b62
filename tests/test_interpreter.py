import io

import pytest

from vibelang.interpreter import (
    Interpreter,
    InterpreterError,
    ProgramExit,
    Value,
    create_variable,
    run,
)
from vibelang.nodes import AstNode


def int_lit(text):
    return AstNode("INT", type="int", value=text)


def float_lit(text):
    return AstNode("FLOAT", type="float", value=text)


def str_lit(text):
    return AstNode("STRING", type="string", value=text)


def bool_lit(text):
    return AstNode("BOOL", type="bool", value=text)


def ident(name):
    return AstNode("ID", value=name)


def binop(op, left, right):
    return AstNode(op, left=left, right=right)


def show(expr, right=None):
    return AstNode("print", left=expr, right=right)


def declare(type_name, name, expr):
    return AstNode("decl_assign", type=type_name, left=ident(name), right=expr)


def assign(name, expr):
    return AstNode("assign", left=ident(name), right=expr)


def seq(*stmts):
    node = stmts[-1]
    for stmt in reversed(stmts[:-1]):
        node = AstNode("statements", left=stmt, right=node)
    return node


def execute(tree):
    out = io.StringIO()
    code = run(tree, out)
    return code, out.getvalue()


def test_print_int_literal():
    code, text = execute(show(int_lit("42")))
    assert code == 0
    assert text == "42\n"


def test_render_formats():
    assert Value("float", 1.5).render() == "1.500000"
    assert Value("bool", True).render() == "true"
    assert Value("bool", False).render() == "false"
    assert Value("void").render() is None


def test_create_variable_defaults_and_parsing():
    assert create_variable("int", None).value == 0
    assert create_variable("string", None).value == ""
    assert create_variable("bool", None).value is False
    assert create_variable("bool", "true").value is True
    assert create_variable("int", "12abc").value == 12
    assert create_variable("string", "hi").value == "hi"


def test_declare_assign_and_print():
    tree = seq(
        declare("int", "x", int_lit("1")),
        assign("x", int_lit("9")),
        show(ident("x")),
    )
    assert execute(tree)[1] == "9\n"


def test_assignment_type_mismatch():
    tree = seq(declare("int", "x", int_lit("1")), assign("x", str_lit("no")))
    with pytest.raises(InterpreterError, match="Type mismatch"):
        run(tree, io.StringIO())


def test_undefined_variable():
    with pytest.raises(InterpreterError, match="not found"):
        Interpreter(io.StringIO()).evaluate(ident("missing"))


@pytest.mark.parametrize("left,right", [(int_lit("4"), int_lit("0")), (float_lit("4"), float_lit("0"))])
def test_division_by_zero(left, right):
    with pytest.raises(InterpreterError, match="Division by zero"):
        Interpreter(io.StringIO()).evaluate(binop("/", left, right))


def test_int_division_truncates_toward_zero():
    result = Interpreter(io.StringIO()).evaluate(binop("/", int_lit("-7"), int_lit("2")))
    assert result == Value("int", -3)


def test_int_overflow_wraps():
    result = Interpreter(io.StringIO()).evaluate(
        binop("+", int_lit("2147483647"), int_lit("1"))
    )
    assert result.value == -2147483648


def test_string_concatenation():
    result = Interpreter(io.StringIO()).evaluate(binop("+", str_lit("ab"), str_lit("cd")))
    assert result == Value("string", "ab" + "cd")


def test_string_minus_is_invalid():
    with pytest.raises(InterpreterError, match="Invalid operands for -"):
        Interpreter(io.StringIO()).evaluate(binop("-", str_lit("a"), str_lit("b")))


def test_equality_and_inequality():
    interp = Interpreter(io.StringIO())
    assert interp.evaluate(binop("==", str_lit("x"), str_lit("x"))).value is True
    assert interp.evaluate(binop("!=", int_lit("3"), int_lit("3"))).value is False
    assert interp.evaluate(binop("==", bool_lit("true"), bool_lit("false"))).value is False


def test_comparison_type_mismatch():
    with pytest.raises(InterpreterError, match="Type mismatch in comparison"):
        Interpreter(io.StringIO()).evaluate(binop("==", int_lit("1"), str_lit("1")))


def test_ordering_on_strings_is_invalid():
    with pytest.raises(InterpreterError, match="Invalid operands for comparison"):
        Interpreter(io.StringIO()).evaluate(binop("<", str_lit("a"), str_lit("b")))


def test_logical_operators():
    interp = Interpreter(io.StringIO())
    assert interp.evaluate(binop("AND", bool_lit("true"), bool_lit("false"))).value is False
    assert interp.evaluate(binop("OR", bool_lit("true"), bool_lit("false"))).value is True
    with pytest.raises(InterpreterError, match="boolean operands"):
        interp.evaluate(binop("AND", int_lit("1"), bool_lit("true")))


def test_unary_operators():
    interp = Interpreter(io.StringIO())
    assert interp.evaluate(AstNode("UMINUS", left=int_lit("5"))) == Value("int", -5)
    assert interp.evaluate(AstNode("NOT", left=bool_lit("true"))).value is False
    with pytest.raises(InterpreterError, match="NOT operator"):
        interp.evaluate(AstNode("NOT", left=int_lit("1")))
    with pytest.raises(InterpreterError, match="UMINUS"):
        interp.evaluate(AstNode("UMINUS", left=str_lit("s")))


def _counting_loop_body():
    return seq(show(ident("i")), assign("i", binop("+", ident("i"), int_lit("1"))))


def test_while_loop_counts():
    tree = seq(
        declare("int", "i", int_lit("0")),
        AstNode(
            "while_loop",
            left=binop("<", ident("i"), int_lit("3")),
            right=_counting_loop_body(),
        ),
    )
    assert execute(tree)[1].splitlines() == [str(n) for n in range(3)]


def test_for_loop_counts():
    header = AstNode(
        "for_header",
        left=declare("int", "i", int_lit("0")),
        right=AstNode(
            "for_tail",
            left=binop("<", ident("i"), int_lit("4")),
            right=assign("i", binop("+", ident("i"), int_lit("1"))),
        ),
    )
    tree = AstNode("for_loop", left=header, right=show(ident("i")))
    assert execute(tree)[1].splitlines() == [str(n) for n in range(4)]


def test_do_while_runs_body_once():
    tree = AstNode("do_while", left=show(str_lit("once")), right=bool_lit("false"))
    assert execute(tree)[1] == "once\n"


def test_non_boolean_condition():
    tree = AstNode("while_loop", left=int_lit("1"), right=show(int_lit("1")))
    with pytest.raises(InterpreterError, match="Loop condition must be boolean"):
        run(tree, io.StringIO())


@pytest.mark.parametrize("cond,expected", [("true", "then\n"), ("false", "else\n")])
def test_if_else(cond, expected):
    else_branch = AstNode("else", left=show(str_lit("else")))
    then_branch = show(str_lit("then"), right=else_branch)
    tree = AstNode("if", left=bool_lit(cond), right=then_branch)
    assert execute(tree)[1] == expected


def test_return_stops_program():
    tree = seq(
        show(str_lit("before")),
        AstNode("return", left=int_lit("0")),
        show(str_lit("after")),
    )
    code, text = execute(tree)
    assert code == 0
    assert text == "before\n"


def test_return_raises_program_exit_directly():
    with pytest.raises(ProgramExit):
        Interpreter(io.StringIO()).interpret(AstNode("return"))


def test_only_main_runs():
    tree = AstNode(
        "functions",
        left=AstNode("function", value="helper", left=show(str_lit("helper"))),
        right=AstNode("function", value="main", left=show(str_lit("main"))),
    )
    assert execute(tree)[1] == "main\n"


def test_variables_survive_block():
    tree = seq(
        AstNode("block", left=declare("string", "s", str_lit("kept"))),
        show(ident("s")),
    )
    assert execute(tree)[1] == "kept\n"


def test_print_call():
    tree = AstNode("call", value="print", right=str_lit("hello"))
    assert execute(tree)[1] == "hello\n"


def test_call_expression_type():
    interp = Interpreter(io.StringIO())
    assert interp.evaluate(AstNode("call", value="f")).type == "void"
    assert interp.evaluate(AstNode("call", value="f", type="int")).type == "int"


def test_unknown_node_type():
    with pytest.raises(InterpreterError, match="Unknown node type"):
        run(AstNode("mystery"), io.StringIO())


def test_null_expression():
    with pytest.raises(InterpreterError, match="Null expression"):
        Interpreter(io.StringIO()).evaluate(None)


def test_find_variable_returns_latest():
    interp = Interpreter(io.StringIO())
    interp.interpret(seq(declare("int", "x", int_lit("1")), declare("int", "x", int_lit("2"))))
    assert interp.find_variable("x") == Value("int", 2)
    assert interp.find_variable("y") is None