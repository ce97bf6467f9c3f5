"""
api/main.py — FastAPI entry point.

Parser and evaluator are stateless, so they are created once per app and
shared by every request. Library errors are mapped to HTTP statuses here:
ExprSyntaxError -> 400, EvalError -> 422.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expression_parser.cascade_parser import CascadeParser
from api.routers import evaluate, functions, parse
from api.schemas import EvalErrorResponse, HealthResponse, SyntaxErrorResponse
from config import Settings
from contracts import EvalError, ExprSyntaxError

logger = logging.getLogger("exprcalc.api")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
    )
    app.state.settings = settings
    app.state.parser = CascadeParser(max_depth=settings.max_depth)
    app.state.evaluator = ASTEvaluator(strict_arity=settings.strict_arity)

    # Routers
    app.include_router(evaluate.router)
    app.include_router(parse.router)
    app.include_router(functions.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(status="ok", version=settings.app_version)

    @app.exception_handler(ExprSyntaxError)
    async def syntax_error_handler(request: Request, exc: ExprSyntaxError):
        logger.info("Rejected expression: %s", exc)
        body = SyntaxErrorResponse(
            detail=str(exc),
            position=exc.position,
            expected=exc.expected,
            found=exc.found,
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(EvalError)
    async def eval_error_handler(request: Request, exc: EvalError):
        logger.info("Evaluation failed: %s", exc)
        body = EvalErrorResponse(detail=str(exc), function=getattr(exc, "name", None))
        return JSONResponse(status_code=422, content=body.model_dump())

    logger.info("%s API ready.", settings.app_title)
    return app


app = create_app()
