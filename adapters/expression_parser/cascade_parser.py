"""
Adapter: CascadeParser
Implements the ExpressionParser port.

Recursive descent with one method per precedence level, loosest first:

  ternary    = logic_or ('?' ternary ':' ternary)?
  logic_or   = logic_and ('||' logic_and)*
  logic_and  = equality ('&&' equality)*
  equality   = relational (('=='|'!=') relational)*
  relational = additive (('<'|'>'|'<='|'>=') additive)*
  additive   = multiplic (('+'|'-') multiplic)*
  multiplic  = unary (('*'|'/'|'%') unary)*
  unary      = ('!'|'-') unary | primary
  primary    = NUMBER | IDENT '(' args? ')' | IDENT | '(' ternary ')'

All binary levels are left-associative; unary and ternary nest on the
right. Relational chains fold left: a<b<c is (a<b)<c. Only ternary
nesting (which covers parentheses and call arguments) is bounded by
max_depth.
"""
from __future__ import annotations

import logging
import re
from typing import NamedTuple

from contracts import (
    BinaryNode,
    ExprAST,
    ExprSyntaxError,
    FunctionNode,
    NumberNode,
    Operator,
    TernaryNode,
    UnaryNode,
    VariableNode,
)

logger = logging.getLogger("exprcalc.parser")

DEFAULT_MAX_DEPTH = 50


# ──────────────────────────────────────────────────────────────────────────────
# Tokenizer
# ──────────────────────────────────────────────────────────────────────────────

_TOKEN_RE = re.compile(
    r'(?P<ws>\s+)'
    r'|(?P<number>[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?)'
    r'|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)'
    r'|(?P<op>&&|\|\||==|!=|<=|>=|[-+*/%!<>?:(),])'
)

# Anything glued to the end of a number makes the literal malformed: "1.", "2e", "3x".
_NUMBER_TAIL_RE = re.compile(r'[A-Za-z0-9_.]+')


class Token(NamedTuple):
    kind: str   # "number" | "ident" | "op"
    text: str
    pos: int


def tokenize(text: str) -> list[Token]:
    """Splits source text into tokens. Whitespace is dropped."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise ExprSyntaxError(pos, "token", repr(text[pos]), text)
        kind = m.lastgroup
        if kind == "number":
            tail = _NUMBER_TAIL_RE.match(text, m.end())
            if tail is not None:
                raise ExprSyntaxError(pos, "number", repr(text[pos:tail.end()]), text)
        if kind != "ws":
            tokens.append(Token(kind, m.group(), pos))  # type: ignore[arg-type]
        pos = m.end()
    return tokens


# ──────────────────────────────────────────────────────────────────────────────
# Recursive descent
# ──────────────────────────────────────────────────────────────────────────────

_EQUALITY_OPS = frozenset({"==", "!="})
_RELATIONAL_OPS = frozenset({"<", ">", "<=", ">="})
_ADDITIVE_OPS = frozenset({"+", "-"})
_MULTIPLICATIVE_OPS = frozenset({"*", "/", "%"})
_UNARY_OPS = frozenset({"!", "-"})


class _Parser:
    """Single-use cursor over one token stream."""

    def __init__(self, text: str, tokens: list[Token], max_depth: int) -> None:
        self._text = text
        self._tokens = tokens
        self._pos = 0
        self._depth = 0
        self._max_depth = max_depth

    def _peek(self) -> Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _peek_op(self) -> str | None:
        tok = self._peek()
        return tok.text if tok is not None and tok.kind == "op" else None

    def _consume(self) -> Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _error(self, expected: str) -> ExprSyntaxError:
        tok = self._peek()
        if tok is None:
            return ExprSyntaxError(len(self._text), expected, "end of input", self._text)
        return ExprSyntaxError(tok.pos, expected, repr(tok.text), self._text)

    def _expect(self, op: str) -> None:
        if self._peek_op() != op:
            raise self._error(repr(op))
        self._consume()

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > self._max_depth:
            raise self._error(f"at most {self._max_depth} levels of nesting")

    def parse(self) -> ExprAST:
        node = self._ternary()
        if self._peek() is not None:
            raise self._error("end of input")
        return node

    def _ternary(self) -> ExprAST:
        self._enter()
        cond = self._logic_or()
        if self._peek_op() == "?":
            self._consume()
            then_branch = self._ternary()
            self._expect(":")
            else_branch = self._ternary()
            cond = TernaryNode(condition=cond, then_branch=then_branch, else_branch=else_branch)
        self._depth -= 1
        return cond

    def _logic_or(self) -> ExprAST:
        node = self._logic_and()
        while self._peek_op() == "||":
            self._consume()
            node = BinaryNode(left=node, op=Operator.OR, right=self._logic_and())
        return node

    def _logic_and(self) -> ExprAST:
        node = self._equality()
        while self._peek_op() == "&&":
            self._consume()
            node = BinaryNode(left=node, op=Operator.AND, right=self._equality())
        return node

    def _equality(self) -> ExprAST:
        node = self._relational()
        while self._peek_op() in _EQUALITY_OPS:
            op = Operator(self._consume().text)
            node = BinaryNode(left=node, op=op, right=self._relational())
        return node

    def _relational(self) -> ExprAST:
        node = self._additive()
        while self._peek_op() in _RELATIONAL_OPS:
            op = Operator(self._consume().text)
            node = BinaryNode(left=node, op=op, right=self._additive())
        return node

    def _additive(self) -> ExprAST:
        node = self._multiplicative()
        while self._peek_op() in _ADDITIVE_OPS:
            op = Operator(self._consume().text)
            node = BinaryNode(left=node, op=op, right=self._multiplicative())
        return node

    def _multiplicative(self) -> ExprAST:
        node = self._unary()
        while self._peek_op() in _MULTIPLICATIVE_OPS:
            op = Operator(self._consume().text)
            node = BinaryNode(left=node, op=op, right=self._unary())
        return node

    def _unary(self) -> ExprAST:
        # Prefix chains are collected iteratively and do not count towards max_depth.
        prefix: list[Operator] = []
        while self._peek_op() in _UNARY_OPS:
            prefix.append(Operator(self._consume().text))
        node = self._primary()
        for op in reversed(prefix):
            node = UnaryNode(op=op, operand=node)
        return node

    def _primary(self) -> ExprAST:
        tok = self._peek()
        if tok is None:
            raise self._error("expression")

        if tok.kind == "number":
            self._consume()
            return NumberNode(value=float(tok.text))

        if tok.kind == "ident":
            self._consume()
            if self._peek_op() == "(":
                self._consume()
                return FunctionNode(name=tok.text, args=self._arguments())
            return VariableNode(name=tok.text)

        if tok.text == "(":
            self._consume()
            node = self._ternary()
            self._expect(")")
            return node

        raise self._error("expression")

    def _arguments(self) -> list[ExprAST]:
        args: list[ExprAST] = []
        if self._peek_op() == ")":
            self._consume()
            return args
        while True:
            args.append(self._ternary())
            op = self._peek_op()
            if op == ",":
                self._consume()
            elif op == ")":
                self._consume()
                return args
            else:
                raise self._error("',' or ')'")


# ──────────────────────────────────────────────────────────────────────────────
# Adapter
# ──────────────────────────────────────────────────────────────────────────────

class CascadeParser:
    """
    Parses a single line of the expression language into an AST.
    Stateless between calls; safe to share across threads.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._max_depth = max_depth

    # -- ExpressionParser protocol -----------------------------------------

    def parse(self, text: str) -> ExprAST:
        tokens = tokenize(text)
        logger.debug("Tokenized %d tokens from %r", len(tokens), text)
        ast = _Parser(text, tokens, self._max_depth).parse()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Parsed %r -> %s", text, ast.to_source())
        return ast


_DEFAULT_PARSER = CascadeParser()


def parse(text: str) -> ExprAST:
    """Parses text with the default parser. Raises ExprSyntaxError."""
    return _DEFAULT_PARSER.parse(text)
