"""
Router: POST /parse
Returns the AST of an expression as JSON, optionally constant-folded.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expression_parser.cascade_parser import CascadeParser
from api.dependencies import get_evaluator, get_parser
from api.schemas import ParseRequest, ParseResponse

router = APIRouter(prefix="/parse", tags=["parse"])


@router.post("", response_model=ParseResponse)
async def parse(
    body: ParseRequest,
    parser: CascadeParser = Depends(get_parser),
    evaluator: ASTEvaluator = Depends(get_evaluator),
) -> ParseResponse:
    ast = parser.parse(body.text)
    if body.simplify:
        ast = evaluator.simplify(ast)
    return ParseResponse(text=body.text, ast=ast, source=ast.to_source())
