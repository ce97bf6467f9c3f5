"""
Port: ExpressionParser
Responsibility: turning one line of source text into an AST.
"""
from typing import Protocol, runtime_checkable

from contracts import ExprAST


@runtime_checkable
class ExpressionParser(Protocol):
    def parse(self, text: str) -> ExprAST:
        """
        Parses an expression into an AST rooted at the ternary production.

        Raises ExprSyntaxError (with position, expected and found) when the
        text does not match the grammar. Never returns a partial tree.
        Function arity is not checked here.
        """
        ...
