"""
Album registration endpoint.

The client posts the full gallery document once per project. It is stored
verbatim as album.json under domain/albumname_projectId, with a summary
attached as object metadata for quick inspection in the bucket console.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from ..dependencies import GalleryServiceDep, verify_auth
from ..schemas import GatewayRequest, GatewayResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class CreateAlbumRequest(GatewayRequest):
    """Request to register an album."""
    project_id: str = Field(min_length=1, description="Client project identifier")
    album_name: str = Field(min_length=1, description="Human-readable album name")
    full_metadata: dict[str, Any] = Field(description="Complete gallery document")
    photos: Optional[list[Any]] = Field(
        default=None,
        description="Photo list; its length is the fallback photo count",
    )
    domain: Optional[str] = Field(default=None, description="Studio domain, default 'unknown'")


class CreateAlbumResponse(GatewayResponse):
    album_path: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/create-album",
    response_model=CreateAlbumResponse,
    status_code=status.HTTP_200_OK,
    summary="Create album",
    dependencies=[Depends(verify_auth)],
)
async def create_album(
    request: CreateAlbumRequest,
    service: GalleryServiceDep,
) -> CreateAlbumResponse:
    album_path = await service.create_album(
        album_name=request.album_name,
        project_id=request.project_id,
        full_metadata=request.full_metadata,
        photos=request.photos,
        domain=request.domain,
    )
    return CreateAlbumResponse(album_path=album_path)
