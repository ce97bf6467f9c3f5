"""
Router: GET /functions
"""
from fastapi import APIRouter

from adapters.evaluator.functions import function_specs
from api.schemas import FunctionsResponse

router = APIRouter(prefix="/functions", tags=["functions"])


@router.get("", response_model=FunctionsResponse)
async def list_functions() -> FunctionsResponse:
    return FunctionsResponse(functions=function_specs())
