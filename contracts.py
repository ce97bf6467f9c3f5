"""
contracts.py — single source of truth for every data type in ExprCalc.
All modules import types exclusively from here.

AST nodes are frozen pydantic models: a tree is built once by the parser and
never mutated afterwards. Every node exclusively owns its children, so trees
are finite and acyclic by construction.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

CONTRACTS_VERSION = "1.0.0"


# ─────────────────────────── Helpers ─────────────────────────────────────

def format_number(value: float) -> str:
    """Formats a result the way the REPL prints it: ``5``, ``2.5``, ``inf``, ``NaN``."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer() and abs(value) < 1e16:
        # Keep the sign of negative zero.
        return "-0" if math.copysign(1.0, value) < 0 and value == 0 else str(int(value))
    return repr(value)


# ─────────────────────────── Errors ──────────────────────────────────────

class ExprSyntaxError(SyntaxError):
    """Input does not match the grammar. Always recoverable by the caller."""

    def __init__(self, position: int, expected: str, found: str, source: str = "") -> None:
        self.position = position
        self.expected = expected
        self.found = found
        self.source = source
        super().__init__(f"expected {expected}, found {found} at position {position}")


class EvalError(ValueError):
    """Base class for recoverable evaluation failures."""


class UnknownFunctionError(EvalError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown function: {name!r}")


class ArityError(EvalError):
    def __init__(self, name: str, expected: int, got: int) -> None:
        self.name = name
        self.expected = expected
        self.got = got
        plural = "" if expected == 1 else "s"
        super().__init__(f"wrong arity: {name}() takes {expected} argument{plural}, got {got}")


# ─────────────────────────── Operators ───────────────────────────────────

class Operator(str, Enum):
    ADD = "+"
    SUB = "-"    # binary subtraction or unary negation, depending on node shape
    MUL = "*"
    DIV = "/"
    REM = "%"
    AND = "&&"
    OR = "||"
    NOT = "!"    # unary only
    EQ = "=="
    NEQ = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="


BinaryOperator = Literal[
    Operator.ADD, Operator.SUB, Operator.MUL, Operator.DIV, Operator.REM,
    Operator.AND, Operator.OR,
    Operator.EQ, Operator.NEQ, Operator.LT, Operator.GT, Operator.LE, Operator.GE,
]
UnaryOperator = Literal[Operator.SUB, Operator.NOT]


# ─────────────────────────── AST ─────────────────────────────────────────

class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    def eval(self) -> float:
        """Evaluates the tree with the default evaluator."""
        from adapters.evaluator.ast_evaluator import default_evaluator
        return default_evaluator().eval_expr(self).value  # type: ignore[arg-type]

    def to_source(self) -> str:
        """Fully parenthesised source text that parses back to an equal tree."""
        raise NotImplementedError


class NumberNode(_Node):
    node_type: Literal["number"] = "number"
    value: float

    def to_source(self) -> str:
        if math.isfinite(self.value) and self.value >= 0:
            return repr(self.value)
        return format_number(self.value)


class VariableNode(_Node):
    """Syntactic placeholder; always evaluates to 0.0 (no environment exists)."""
    node_type: Literal["variable"] = "variable"
    name: str

    def to_source(self) -> str:
        return self.name


class UnaryNode(_Node):
    node_type: Literal["unary"] = "unary"
    op: UnaryOperator
    operand: "ExprAST"

    def to_source(self) -> str:
        return f"{self.op.value}{self.operand.to_source()}"


class BinaryNode(_Node):
    node_type: Literal["binary"] = "binary"
    left: "ExprAST"
    op: BinaryOperator
    right: "ExprAST"

    def to_source(self) -> str:
        return f"({self.left.to_source()} {self.op.value} {self.right.to_source()})"


class TernaryNode(_Node):
    node_type: Literal["ternary"] = "ternary"
    condition: "ExprAST"
    then_branch: "ExprAST"
    else_branch: "ExprAST"

    def to_source(self) -> str:
        return (
            f"({self.condition.to_source()} ? {self.then_branch.to_source()}"
            f" : {self.else_branch.to_source()})"
        )


class FunctionNode(_Node):
    node_type: Literal["function"] = "function"
    name: str
    args: tuple["ExprAST", ...] = ()

    def to_source(self) -> str:
        return f"{self.name}({', '.join(arg.to_source() for arg in self.args)})"


ExprAST = Annotated[
    Union[NumberNode, VariableNode, UnaryNode, BinaryNode, TernaryNode, FunctionNode],
    Field(discriminator="node_type"),
]
UnaryNode.model_rebuild()
BinaryNode.model_rebuild()
TernaryNode.model_rebuild()
FunctionNode.model_rebuild()

# Name used throughout the docs for "any AST node".
Expression = _Node


# ─────────────────────────── Evaluator ───────────────────────────────────

class EvalResult(BaseModel):
    value: float
    steps: list[str] = Field(default_factory=list)  # post-order trace, empty unless requested


class FunctionSpec(BaseModel):
    name: str
    arity: int
