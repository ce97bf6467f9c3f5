import pytest

from adapters.expression_parser.cascade_parser import CascadeParser, parse, tokenize
from contracts import (
    BinaryNode,
    ExprSyntaxError,
    FunctionNode,
    NumberNode,
    Operator,
    TernaryNode,
    UnaryNode,
    VariableNode,
)
from ports.expression_parser import ExpressionParser


def _num(value: float) -> NumberNode:
    return NumberNode(value=value)


def test_tokenize_reads_two_char_operators_before_single_chars():
    tokens = tokenize("a<=b && !c")

    assert [t.text for t in tokens] == ["a", "<=", "b", "&&", "!", "c"]
    assert [t.kind for t in tokens] == ["ident", "op", "ident", "op", "op", "ident"]
    assert tokens[1].pos == 1


def test_tokenize_keeps_exponent_in_number():
    tokens = tokenize("2.5e10 + 1E-3")

    assert [t.text for t in tokens] == ["2.5e10", "+", "1E-3"]


def test_parse_number_literals():
    assert parse("2.5e10") == _num(2.5e10)
    assert parse("1E-3") == _num(0.001)
    assert parse("007") == _num(7.0)


def test_multiplicative_binds_tighter_than_additive():
    ast = parse("1 * 2 + 3")

    assert ast == BinaryNode(
        left=BinaryNode(left=_num(1), op=Operator.MUL, right=_num(2)),
        op=Operator.ADD,
        right=_num(3),
    )


def test_relational_binds_weaker_than_additive():
    ast = parse("4 < 1 * 2 + 3")

    assert isinstance(ast, BinaryNode)
    assert ast.op == Operator.LT
    assert ast.left == _num(4)
    assert ast.right.op == Operator.ADD


def test_subtraction_is_left_associative():
    assert parse("8 - 3 - 2") == BinaryNode(
        left=BinaryNode(left=_num(8), op=Operator.SUB, right=_num(3)),
        op=Operator.SUB,
        right=_num(2),
    )


def test_relational_chain_folds_left():
    a, b, c = VariableNode(name="a"), VariableNode(name="b"), VariableNode(name="c")

    assert parse("a < b < c") == BinaryNode(
        left=BinaryNode(left=a, op=Operator.LT, right=b),
        op=Operator.LT,
        right=c,
    )


def test_and_binds_tighter_than_or():
    assert parse("1 || 0 && 0") == BinaryNode(
        left=_num(1),
        op=Operator.OR,
        right=BinaryNode(left=_num(0), op=Operator.AND, right=_num(0)),
    )


def test_equality_binds_weaker_than_relational():
    ast = parse("1 < 2 == 3 > 4")

    assert ast.op == Operator.EQ
    assert ast.left.op == Operator.LT
    assert ast.right.op == Operator.GT


def test_ternary_is_right_associative():
    assert parse("1 ? 2 : 3 ? 4 : 5") == TernaryNode(
        condition=_num(1),
        then_branch=_num(2),
        else_branch=TernaryNode(condition=_num(3), then_branch=_num(4), else_branch=_num(5)),
    )


def test_ternary_nests_in_then_branch():
    ast = parse("a ? b ? 1 : 2 : 3")

    assert isinstance(ast.then_branch, TernaryNode)
    assert ast.else_branch == _num(3)


def test_unary_operators_bind_tightest_and_nest():
    assert parse("-2 * 3") == BinaryNode(
        left=UnaryNode(op=Operator.SUB, operand=_num(2)),
        op=Operator.MUL,
        right=_num(3),
    )
    assert parse("!-x") == UnaryNode(
        op=Operator.NOT,
        operand=UnaryNode(op=Operator.SUB, operand=VariableNode(name="x")),
    )
    assert parse("--1") == UnaryNode(
        op=Operator.SUB,
        operand=UnaryNode(op=Operator.SUB, operand=_num(1)),
    )


def test_identifier_followed_by_paren_is_function_call():
    assert parse("abc(1, 2)") == FunctionNode(name="abc", args=[_num(1), _num(2)])
    assert parse("abc") == VariableNode(name="abc")
    assert parse("_x1") == VariableNode(name="_x1")


def test_function_arguments_are_full_expressions():
    ast = parse("max_(1 ? 2 : 3, (4), f())")

    assert isinstance(ast, FunctionNode)
    assert len(ast.args) == 3
    assert isinstance(ast.args[0], TernaryNode)
    assert ast.args[1] == _num(4)
    assert ast.args[2] == FunctionNode(name="f", args=[])


def test_whitespace_is_insignificant():
    assert parse("  1+\t2 ") == parse("1 + 2")


def test_full_hierarchy_parses():
    ast = parse("1*2+3==5 ? (6<4 || 7>=7) : (8!=8 && 9>=10)")

    assert isinstance(ast, TernaryNode)
    assert ast.condition.op == Operator.EQ
    assert ast.then_branch.op == Operator.OR
    assert ast.else_branch.op == Operator.AND


@pytest.mark.parametrize(
    ("text", "position", "expected", "found"),
    [
        ("1 +", 3, "expression", "end of input"),
        ("", 0, "expression", "end of input"),
        ("   ", 3, "expression", "end of input"),
        ("(1 + 2", 6, "')'", "end of input"),
        ("1 2", 2, "end of input", "'2'"),
        ("1 ? 2", 5, "':'", "end of input"),
        ("f(1 2)", 4, "',' or ')'", "'2'"),
        ("*3", 0, "expression", "'*'"),
        ("1 $ 2", 2, "token", "'$'"),
        ("1 = 2", 2, "token", "'='"),
        ("1.", 0, "number", "'1.'"),
        ("2e", 0, "number", "'2e'"),
        ("3x", 0, "number", "'3x'"),
        ("٣ + 1", 0, "token", "'٣'"),
        ("1٣", 1, "token", "'٣'"),
    ],
)
def test_malformed_input_raises_syntax_error(text, position, expected, found):
    with pytest.raises(ExprSyntaxError) as exc_info:
        parse(text)

    err = exc_info.value
    assert err.position == position
    assert err.expected == expected
    assert err.found == found
    assert isinstance(err, SyntaxError)


def test_syntax_error_message_names_position():
    with pytest.raises(ExprSyntaxError, match="expected expression, found end of input at position 3"):
        parse("1 +")


def test_nesting_depth_is_limited():
    parser = CascadeParser(max_depth=3)

    assert parser.parse("((1))") == _num(1)
    with pytest.raises(ExprSyntaxError):
        parser.parse("(((1)))")


def test_deep_nesting_is_a_syntax_error_not_a_crash():
    text = "(" * 200 + "1" + ")" * 200

    with pytest.raises(ExprSyntaxError):
        parse(text)


def test_long_flat_chain_parses_without_recursion():
    ast = parse(" + ".join(["1"] * 3000))

    assert ast.op == Operator.ADD
    assert ast.right == _num(1)


def test_prefix_chain_does_not_count_as_nesting():
    assert parse("-" * 200 + "1").eval() == 1.0
    assert parse("!" * 51 + "0").eval() == 1.0
    assert CascadeParser(max_depth=1).parse("--!1") == UnaryNode(
        op=Operator.SUB,
        operand=UnaryNode(
            op=Operator.SUB,
            operand=UnaryNode(op=Operator.NOT, operand=_num(1)),
        ),
    )


def test_parenthesised_operand_of_prefix_still_counts_as_nesting():
    parser = CascadeParser(max_depth=3)

    assert parser.parse("-(-(1))") == parse("--1")
    with pytest.raises(ExprSyntaxError):
        parser.parse("-(-(-(1)))")


def test_cascade_parser_implements_port():
    assert isinstance(CascadeParser(), ExpressionParser)
