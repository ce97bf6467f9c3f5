"""
schemas.py — FastAPI request/response models.
Kept apart from contracts.py so the API can evolve independently.
"""
from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field

from contracts import ExprAST, FunctionSpec


# ─────────────────────────── /evaluate ───────────────────────────

class EvaluateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=10_000)
    trace: bool = False   # fills `steps` with the post-order evaluation trace


class EvaluateResponse(BaseModel):
    text: str
    value: Union[float, str]   # "inf", "-inf" or "NaN" for non-finite results
    steps: list[str] = Field(default_factory=list)


# ─────────────────────────── /parse ──────────────────────────────

class ParseRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=10_000)
    simplify: bool = False


class ParseResponse(BaseModel):
    text: str
    ast: ExprAST
    source: str


# ─────────────────────────── errors ──────────────────────────────

class SyntaxErrorResponse(BaseModel):
    detail: str
    position: int
    expected: str
    found: str


class EvalErrorResponse(BaseModel):
    detail: str
    function: Optional[str] = None


# ─────────────────────────── /functions ──────────────────────────

class FunctionsResponse(BaseModel):
    functions: list[FunctionSpec]


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
