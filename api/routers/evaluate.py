"""
Router: POST /evaluate

Parses and evaluates one expression. Syntax and evaluation errors are
mapped to HTTP responses by the handlers registered in api.main.
"""
from __future__ import annotations

import math

from fastapi import APIRouter, Depends

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expression_parser.cascade_parser import CascadeParser
from api.dependencies import get_evaluator, get_parser
from api.schemas import EvaluateRequest, EvaluateResponse
from contracts import format_number

router = APIRouter(prefix="/evaluate", tags=["evaluate"])


@router.post("", response_model=EvaluateResponse)
async def evaluate(
    body: EvaluateRequest,
    parser: CascadeParser = Depends(get_parser),
    evaluator: ASTEvaluator = Depends(get_evaluator),
) -> EvaluateResponse:
    result = evaluator.eval_expr(parser.parse(body.text), trace=body.trace)
    # JSON has no inf/NaN literals.
    value = result.value if math.isfinite(result.value) else format_number(result.value)
    return EvaluateResponse(text=body.text, value=value, steps=result.steps)
