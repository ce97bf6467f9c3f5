#!/usr/bin/env python3
"""
exprcalc.py — ExprCalc CLI.

Runs entirely locally: parses and evaluates expressions of the calculator
language (C-like precedence, 1.0/0.0 booleans, built-in math functions).

Configuration: environment variables with the EXPRCALC_ prefix or a .env file
(e.g. EXPRCALC_PROMPT="calc> ", EXPRCALC_STRICT_ARITY=false).

Subcommands:
    repl       — interactive read-eval-print loop with line history (default)
    eval       — evaluate one expression
    parse      — print the AST of one expression
    functions  — list the built-in functions

Usage:
    python exprcalc.py
    python exprcalc.py eval --text "1 * 2 + 3 == 5 ? 10 : 20"
    python exprcalc.py eval --trace --text "hypot(3, 4) > 4"
    python exprcalc.py parse --json --text "abs(-1) + x"
    echo "2.5e10 / 5" | python exprcalc.py eval
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

try:
    import readline
except ImportError:  # not available on Windows
    readline = None  # type: ignore[assignment]

logger = logging.getLogger("exprcalc.cli")


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None
_ERR_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _err_console() -> Console:
    global _ERR_CONSOLE
    if _ERR_CONSOLE is None:
        _ERR_CONSOLE = Console(stderr=True, highlight=False)
    return _ERR_CONSOLE


def _read_text(args: argparse.Namespace) -> str:
    text = getattr(args, "text", None) or sys.stdin.read().strip()
    if not text:
        _err_console().print("Error: pass an expression with --text or on stdin", style="red")
        sys.exit(1)
    return text


def _print_syntax_error(console: Console, text: str, exc: Any) -> None:
    console.print(f"Syntax error: {exc}", style="red", markup=False)
    console.print(text, markup=False)
    console.print(" " * exc.position + "^", style="red", markup=False)


def _print_steps_table(steps: list[str]) -> None:
    table = Table(title=f"Evaluation steps [{len(steps)}]", box=box.ASCII, show_lines=False)
    table.add_column("#", justify="right", no_wrap=True, style="cyan")
    table.add_column("Step")
    for idx, step in enumerate(steps, 1):
        table.add_row(str(idx), step)
    _console().print(table)


def _node_label(node: Any) -> str:
    from contracts import format_number

    node_type = node.node_type
    if node_type == "number":
        return f"Number {format_number(node.value)}"
    if node_type == "variable":
        return f"Variable {node.name}"
    if node_type == "unary":
        return f"Unary {node.op.name} ({node.op.value})"
    if node_type == "binary":
        return f"Binary {node.op.name} ({node.op.value})"
    if node_type == "ternary":
        return "Ternary (? :)"
    return f"Function {node.name}/{len(node.args)}"


def _node_children(node: Any) -> list[Any]:
    node_type = node.node_type
    if node_type == "unary":
        return [node.operand]
    if node_type == "binary":
        return [node.left, node.right]
    if node_type == "ternary":
        return [node.condition, node.then_branch, node.else_branch]
    if node_type == "function":
        return list(node.args)
    return []


def _ast_tree(node: Any, parent: Tree | None = None) -> Tree:
    label = _node_label(node)
    branch = Tree(label) if parent is None else parent.add(label)
    for child in _node_children(node):
        _ast_tree(child, branch)
    return branch


def _load_history(path: str, length: int) -> None:
    if readline is None or not path:
        return
    readline.set_history_length(length)
    try:
        readline.read_history_file(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not read history file %s: %s", path, exc)


def _save_history(path: str) -> None:
    if readline is None or not path:
        return
    try:
        readline.write_history_file(path)
    except OSError as exc:
        logger.warning("Could not write history file %s: %s", path, exc)


# -- subcommands -----------------------------------------------------------

def _repl(args: argparse.Namespace) -> None:
    from adapters.evaluator.ast_evaluator import ASTEvaluator
    from adapters.expression_parser.cascade_parser import CascadeParser
    from config import Settings
    from contracts import EvalError, ExprSyntaxError, format_number

    settings = Settings()
    parser = CascadeParser(max_depth=settings.max_depth)
    evaluator = ASTEvaluator(strict_arity=settings.strict_arity)
    console = _console()

    _load_history(settings.history_file, settings.history_length)
    try:
        while True:
            try:
                line = input(settings.prompt)
            except KeyboardInterrupt:
                console.print("Interrupted CTRL-C: Bye!")
                break
            except EOFError:
                console.print("CTRL-D")
                break

            line = line.strip()
            if not line:
                continue
            try:
                result = evaluator.eval_expr(parser.parse(line))
            except ExprSyntaxError as exc:
                _print_syntax_error(console, line, exc)
                continue
            except EvalError as exc:
                console.print(f"Evaluation error: {exc}", style="red", markup=False)
                continue
            console.print(format_number(result.value), markup=False)
    finally:
        _save_history(settings.history_file)


def _eval(args: argparse.Namespace) -> None:
    from adapters.evaluator.ast_evaluator import ASTEvaluator
    from adapters.expression_parser.cascade_parser import CascadeParser
    from config import Settings
    from contracts import EvalError, ExprSyntaxError, format_number

    text = _read_text(args)
    settings = Settings()
    parser = CascadeParser(max_depth=settings.max_depth)
    evaluator = ASTEvaluator(strict_arity=settings.strict_arity)

    try:
        result = evaluator.eval_expr(parser.parse(text), trace=args.trace)
    except ExprSyntaxError as exc:
        _print_syntax_error(_err_console(), text, exc)
        sys.exit(1)
    except EvalError as exc:
        _err_console().print(f"Evaluation error: {exc}", style="red", markup=False)
        sys.exit(1)

    if args.trace:
        _print_steps_table(result.steps)
    _console().print(format_number(result.value), markup=False)


def _parse(args: argparse.Namespace) -> None:
    from adapters.evaluator.ast_evaluator import ASTEvaluator
    from adapters.expression_parser.cascade_parser import CascadeParser
    from config import Settings
    from contracts import ExprSyntaxError

    text = _read_text(args)
    settings = Settings()
    try:
        ast = CascadeParser(max_depth=settings.max_depth).parse(text)
    except ExprSyntaxError as exc:
        _print_syntax_error(_err_console(), text, exc)
        sys.exit(1)

    if args.simplify:
        ast = ASTEvaluator(strict_arity=settings.strict_arity).simplify(ast)

    if args.json:
        print(ast.model_dump_json(indent=2))
        return
    _console().print(_ast_tree(ast))
    _console().print(f"source: {ast.to_source()}", markup=False)


def _functions(args: argparse.Namespace) -> None:
    from adapters.evaluator.functions import function_specs

    specs = function_specs()
    table = Table(title=f"Built-in functions [{len(specs)}]", box=box.ASCII)
    table.add_column("Name", no_wrap=True, style="bold cyan")
    table.add_column("Arity", justify="right", no_wrap=True)
    for spec in specs:
        table.add_row(spec.name, str(spec.arity))
    _console().print(table)


# -- main ------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    from config import Settings

    parser = argparse.ArgumentParser(
        prog="exprcalc",
        description="ExprCalc — expression calculator (C-like precedence, float results)",
    )
    sub = parser.add_subparsers(dest="command")

    # repl
    sub.add_parser("repl", help="Interactive calculator with line history (default)")

    # eval
    p = sub.add_parser("eval", help="Evaluate one expression")
    p.add_argument("--text", "-t", help="Expression (or stdin)")
    p.add_argument("--trace", action="store_true",
                   help="Show every evaluation step")

    # parse
    p = sub.add_parser("parse", help="Print the AST of one expression")
    p.add_argument("--text", "-t", help="Expression (or stdin)")
    p.add_argument("--json", action="store_true", help="Print the AST as JSON")
    p.add_argument("--simplify", action="store_true",
                   help="Constant-fold the AST before printing")

    # functions
    sub.add_parser("functions", help="List built-in functions and their arity")

    args = parser.parse_args(argv)
    logging.basicConfig(level=Settings().log_level.upper())

    commands = {
        "repl":      _repl,
        "eval":      _eval,
        "parse":     _parse,
        "functions": _functions,
    }
    commands[args.command or "repl"](args)


if __name__ == "__main__":
    main()
