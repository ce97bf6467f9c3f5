"""
dependencies.py — FastAPI dependency injection.
Each dependency returns the matching adapter from Request.app.state.
"""
from __future__ import annotations

from fastapi import Request

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expression_parser.cascade_parser import CascadeParser


def get_parser(request: Request) -> CascadeParser:
    return request.app.state.parser


def get_evaluator(request: Request) -> ASTEvaluator:
    return request.app.state.evaluator
