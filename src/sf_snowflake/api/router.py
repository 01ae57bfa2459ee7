"""sf_snowflake REST endpoints.

POST /snowflakes                 — mint one or more ids from the process generator
GET  /snowflakes/{snowflake_id}  — decode an id into its fields
"""

from fastapi import APIRouter, Query, Request

from src.sf_common.response import ApiResponse, success_response
from src.sf_snowflake.application.service import SnowflakeApplicationService
from src.sf_snowflake.domain.snowflake import MAX_EPOCH_MS, MAX_INCREMENT

router = APIRouter(prefix="/snowflakes", tags=["snowflakes"])

_service = SnowflakeApplicationService()


@router.post("")
async def generate_snowflakes(
    request: Request,
    count: int = Query(1, ge=1, le=MAX_INCREMENT + 1),
) -> ApiResponse:
    result = _service.generate(count)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))


@router.get("/{snowflake_id}")
async def decode_snowflake(
    snowflake_id: str,
    request: Request,
    epoch: int | None = Query(
        None, ge=0, le=MAX_EPOCH_MS, description="Epoch in ms. Default: service epoch."
    ),
) -> ApiResponse:
    result = _service.decode(snowflake_id, epoch)
    return success_response(result.model_dump(), getattr(request.state, "request_id", None))
