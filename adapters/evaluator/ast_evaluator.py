"""
Adapter: ASTEvaluator
Implements the Evaluator port: a recursive post-order walk over ExprAST.

There is no boolean type. Comparisons and logical operators yield 1.0 or 0.0;
a value is truthy iff it is not equal to 0.0 (so -0.0 is falsy, NaN truthy).
&& and || evaluate both operands; the ternary is the only short-circuiting
construct.

eval_expr() — computes the value, optionally with a step trace
simplify()  — constant folding: operators over numbers become a NumberNode
"""
from __future__ import annotations

import logging
from typing import Callable

from adapters.evaluator.functions import ieee_div, ieee_rem, lookup
from contracts import (
    ArityError,
    BinaryNode,
    EvalError,
    EvalResult,
    ExprAST,
    FunctionNode,
    NumberNode,
    Operator,
    TernaryNode,
    UnaryNode,
    VariableNode,
    format_number,
)

logger = logging.getLogger("exprcalc.evaluator")


def _flag(cond: bool) -> float:
    return 1.0 if cond else 0.0


_BINARY_OPS: dict[Operator, Callable[[float, float], float]] = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUB: lambda a, b: a - b,
    Operator.MUL: lambda a, b: a * b,
    Operator.DIV: ieee_div,
    Operator.REM: ieee_rem,
    Operator.AND: lambda a, b: _flag(a != 0.0 and b != 0.0),
    Operator.OR:  lambda a, b: _flag(a != 0.0 or b != 0.0),
    Operator.EQ:  lambda a, b: _flag(a == b),
    Operator.NEQ: lambda a, b: _flag(a != b),
    Operator.LT:  lambda a, b: _flag(a < b),
    Operator.GT:  lambda a, b: _flag(a > b),
    Operator.LE:  lambda a, b: _flag(a <= b),
    Operator.GE:  lambda a, b: _flag(a >= b),
}

_UNARY_OPS: dict[Operator, Callable[[float], float]] = {
    Operator.SUB: lambda a: -a,
    Operator.NOT: lambda a: _flag(a == 0.0),
}


class ASTEvaluator:
    """Stateless evaluator for expression trees."""

    def __init__(self, strict_arity: bool = True) -> None:
        # strict_arity=False tolerates (and never evaluates) surplus call arguments.
        self._strict_arity = strict_arity

    # -- Evaluator protocol ------------------------------------------------

    def eval_expr(self, ast: ExprAST, trace: bool = False) -> EvalResult:
        steps: list[str] | None = [] if trace else None
        try:
            value = self._eval(ast, steps)
        except RecursionError:
            raise EvalError("expression is nested too deeply") from None
        return EvalResult(value=value, steps=steps or [])

    def simplify(self, ast: ExprAST) -> ExprAST:
        if isinstance(ast, (NumberNode, VariableNode)):
            return ast
        if isinstance(ast, UnaryNode):
            operand = self.simplify(ast.operand)
            if isinstance(operand, NumberNode):
                return NumberNode(value=_UNARY_OPS[ast.op](operand.value))
            return UnaryNode(op=ast.op, operand=operand)
        if isinstance(ast, BinaryNode):
            left = self.simplify(ast.left)
            right = self.simplify(ast.right)
            if isinstance(left, NumberNode) and isinstance(right, NumberNode):
                return NumberNode(value=_BINARY_OPS[ast.op](left.value, right.value))
            return BinaryNode(left=left, op=ast.op, right=right)
        if isinstance(ast, TernaryNode):
            cond = self.simplify(ast.condition)
            if isinstance(cond, NumberNode):
                branch = ast.then_branch if cond.value != 0.0 else ast.else_branch
                return self.simplify(branch)
            return TernaryNode(
                condition=cond,
                then_branch=self.simplify(ast.then_branch),
                else_branch=self.simplify(ast.else_branch),
            )
        if isinstance(ast, FunctionNode):
            return FunctionNode(name=ast.name, args=[self.simplify(a) for a in ast.args])
        raise TypeError(f"Unknown AST node type: {type(ast)}")

    # -- Private -------------------------------------------------------------

    def _eval(self, node: ExprAST, steps: list[str] | None) -> float:
        if isinstance(node, NumberNode):
            return node.value

        if isinstance(node, VariableNode):
            # No environment exists: every variable reads as zero.
            if steps is not None:
                steps.append(f"{node.name} = 0")
            return 0.0

        if isinstance(node, UnaryNode):
            operand = self._eval(node.operand, steps)
            result = _UNARY_OPS[node.op](operand)
            if steps is not None:
                steps.append(f"{node.op.value}({format_number(operand)}) = {format_number(result)}")
            return result

        if isinstance(node, BinaryNode):
            left = self._eval(node.left, steps)
            right = self._eval(node.right, steps)
            result = _BINARY_OPS[node.op](left, right)
            if steps is not None:
                steps.append(
                    f"{format_number(left)} {node.op.value} {format_number(right)}"
                    f" = {format_number(result)}"
                )
            return result

        if isinstance(node, TernaryNode):
            cond = self._eval(node.condition, steps)
            branch = node.then_branch if cond != 0.0 else node.else_branch
            result = self._eval(branch, steps)
            if steps is not None:
                chosen = "then" if cond != 0.0 else "else"
                steps.append(f"{format_number(cond)} ? -> {chosen} = {format_number(result)}")
            return result

        if isinstance(node, FunctionNode):
            return self._call(node, steps)

        raise TypeError(f"Unknown AST node type: {type(node)}")

    def _call(self, node: FunctionNode, steps: list[str] | None) -> float:
        arity, fn = lookup(node.name)
        got = len(node.args)
        if got < arity or (self._strict_arity and got != arity):
            raise ArityError(node.name, arity, got)
        if got > arity:
            logger.debug("Ignoring %d surplus argument(s) to %s()", got - arity, node.name)

        args = [self._eval(arg, steps) for arg in node.args[:arity]]
        result = fn(*args)
        if steps is not None:
            rendered = ", ".join(format_number(a) for a in args)
            steps.append(f"{node.name}({rendered}) = {format_number(result)}")
        return result


_DEFAULT_EVALUATOR = ASTEvaluator()


def default_evaluator() -> ASTEvaluator:
    return _DEFAULT_EVALUATOR
