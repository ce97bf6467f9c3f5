from __future__ import annotations

import math

import pytest
from pydantic import TypeAdapter, ValidationError

from adapters.expression_parser.cascade_parser import parse
from contracts import (
    ArityError,
    ExprAST,
    ExprSyntaxError,
    NumberNode,
    Operator,
    UnaryNode,
    format_number,
)


def test_operator_enum_has_fourteen_members():
    assert len(Operator) == 14
    assert Operator("&&") is Operator.AND
    assert Operator("-") is Operator.SUB


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (5.0, "5"),
        (-3.0, "-3"),
        (2.5, "2.5"),
        (2.5e10, "25000000000"),
        (1e20, "1e+20"),
        (math.inf, "inf"),
        (-math.inf, "-inf"),
        (math.nan, "NaN"),
        (-0.0, "-0"),
        (0.0, "0"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


@pytest.mark.parametrize(
    "text",
    [
        "1 * 2 + 3",
        "8 - 3 - 2",
        "a < b < c",
        "1 ? 2 : 3 ? 4 : 5",
        "-(-x)",
        "!0 || abs(-1, 2) && f()",
        "2.5e10 % 1e-5",
        "1*2+3==5 ? (6<4 || 7>=7) : (8!=8 && 9>=10)",
    ],
)
def test_to_source_round_trips(text):
    ast = parse(text)

    assert parse(ast.to_source()) == ast


def test_to_source_is_fully_parenthesised():
    assert parse("1 + 2 * 3").to_source() == "(1.0 + (2.0 * 3.0))"
    assert parse("c ? f(1) : -y").to_source() == "(c ? f(1.0) : -y)"


def test_nodes_are_frozen():
    node = NumberNode(value=1)

    with pytest.raises(ValidationError):
        node.value = 2.0


def test_unary_node_rejects_binary_only_operator():
    with pytest.raises(ValidationError):
        UnaryNode(op=Operator.ADD, operand=NumberNode(value=1))


def test_ast_dumps_and_validates_back():
    ast = parse("abs(-1) ? x : 2 >= 1")

    data = ast.model_dump()

    assert data["node_type"] == "ternary"
    assert data["condition"]["node_type"] == "function"
    assert TypeAdapter(ExprAST).validate_python(data) == ast


def test_ast_json_uses_operator_symbols():
    assert '"op":"+"' in parse("1 + 2").model_dump_json()


def test_error_types():
    err = ExprSyntaxError(3, "expression", "end of input", "1 +")

    assert isinstance(err, SyntaxError)
    assert str(err) == "expected expression, found end of input at position 3"
    assert isinstance(ArityError("abs", 1, 2), ValueError)
    assert str(ArityError("abs", 1, 2)) == "wrong arity: abs() takes 1 argument, got 2"
