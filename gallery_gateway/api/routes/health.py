"""
Health check endpoint.

/healthz is a readiness check: it touches the bucket, so it fails when no
bucket is configured or the store can't be reached. The plain liveness
endpoint lives at "/" in main.py.
"""

import logging

from fastapi import APIRouter, status

from ..dependencies import ObjectStoreDep
from ..schemas import GatewayResponse

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(GatewayResponse):
    bucket: str


@router.get(
    "/healthz",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns 200 if the configured bucket is reachable.",
)
async def healthz(store: ObjectStoreDep) -> HealthResponse:
    """
    Readiness check - can we reach the bucket?

    Missing configuration surfaces as StorageUnavailableError and an
    unreachable bucket as StorageError; both render as 500.
    """
    await store.check_bucket()
    return HealthResponse(bucket=store.bucket_name)
