"""Generation and usage API router."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from logo_forge.common.exceptions import (
    InvalidRequestError,
    LedgerPersistenceError,
    QuotaExceededError,
)
from logo_forge.common.security import CallerContext, resolve_caller
from logo_forge.generation.provider import ReferenceImage
from logo_forge.usage.schemas import (
    GenerateBatchRequest,
    GenerateBatchResponse,
    QuotaExceededResponse,
    UsageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service():
    from logo_forge.deps import get_usage_service
    return get_usage_service()


@router.post(
    "/generate-batch",
    response_model=GenerateBatchResponse,
    responses={429: {"model": QuotaExceededResponse}},
)
async def generate_batch(
    body: GenerateBatchRequest,
    caller: CallerContext = Depends(resolve_caller),
):
    svc = _get_service()
    reference_images = [
        ReferenceImage(data=img.data, mime_type=img.mime_type)
        for img in body.reference_images or []
    ]
    try:
        outcome = await svc.generate_batch(caller, body.prompts, reference_images or None)
    except QuotaExceededError as e:
        return JSONResponse(
            status_code=429,
            content=QuotaExceededResponse(error=e.message, total=e.total).model_dump(),
        )
    except InvalidRequestError as e:
        return JSONResponse(status_code=400, content={"error": e.message, "code": e.code})
    except LedgerPersistenceError as e:
        return JSONResponse(status_code=503, content={"error": e.message, "code": e.code})

    return GenerateBatchResponse(
        logos=outcome.logos,
        usage=UsageResponse(**outcome.usage.as_dict()),
    )


@router.get("/usage", response_model=UsageResponse)
async def get_usage(caller: CallerContext = Depends(resolve_caller)):
    svc = _get_service()
    snapshot = await svc.get_usage(caller)
    return UsageResponse(**snapshot.as_dict())
