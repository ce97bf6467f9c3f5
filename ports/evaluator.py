"""
Port: Evaluator
Responsibility: deterministic evaluation of an AST to a float.
"""
from typing import Protocol, runtime_checkable

from contracts import EvalResult, ExprAST


@runtime_checkable
class Evaluator(Protocol):
    def eval_expr(self, ast: ExprAST, trace: bool = False) -> EvalResult:
        """
        Evaluates an AST to a float result.
        trace: when True, EvalResult.steps holds one human-readable step per
        evaluated node, in post-order.
        Raises UnknownFunctionError for names outside the function table.
        Raises ArityError when a call has the wrong number of arguments.
        """
        ...

    def simplify(self, ast: ExprAST) -> ExprAST:
        """
        Constant-folds an AST. Function calls and variables are preserved.
        Returns a potentially simplified AST; the input tree is untouched.
        """
        ...
