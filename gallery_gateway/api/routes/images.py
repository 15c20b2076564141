"""
Image upload endpoints.

Two ways to get image bytes into the bucket:

1. Direct upload (POST /upload): multipart body streamed through this
   service. Capped at MAX_UPLOAD_SIZE_MB.
2. Signed URL (POST /get-upload-url, then PUT to the URL, then
   POST /set-image-metadata): the client writes straight to the bucket and
   this service only authorizes and labels the object.

Both paths skip objects that already exist, so a client can safely re-run
a whole gallery sync.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import Field

from ...core.errors import PayloadTooLargeError
from ..dependencies import ContextDep, GalleryServiceDep, verify_auth
from ..schemas import GatewayRequest, GatewayResponse

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_auth)])


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class ImageLocation(GatewayRequest):
    """Fields addressing an image under a domain-qualified album."""
    filename: str = Field(min_length=1)
    album_name: str = Field(min_length=1)
    project_id: str = Field(min_length=1)
    domain: str = Field(min_length=1)


class SetImageMetadataRequest(ImageLocation):
    scene: Optional[str] = None
    photo_id: Optional[str] = None


class UploadUrlRequest(ImageLocation):
    pass


class UploadResponse(GatewayResponse):
    """Exactly one of uploaded/skipped is present."""
    uploaded: Optional[bool] = None
    skipped: Optional[bool] = None
    object_path: str


class SetImageMetadataResponse(GatewayResponse):
    object_path: str


class UploadUrlResponse(GatewayResponse):
    skipped: bool
    upload_url: Optional[str] = None
    object_path: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/upload",
    response_model=UploadResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Upload an image",
    description="Store an image unless it already exists; refresh its metadata either way.",
)
async def upload_image(
    context: ContextDep,
    service: GalleryServiceDep,
    file: Annotated[UploadFile, File(description="Image bytes")],
    filename: Annotated[str, Form(min_length=1)],
    album_name: Annotated[str, Form(alias="albumName", min_length=1)],
    project_id: Annotated[str, Form(alias="projectId", min_length=1)],
    scene: Annotated[Optional[str], Form()] = None,
    photo_id: Annotated[Optional[str], Form(alias="photoId")] = None,
    domain: Annotated[Optional[str], Form()] = None,
) -> UploadResponse:
    """
    Upload one image.

    The whole file is read into memory before the existence check; the
    body cap keeps that bounded.
    """
    data = await file.read()

    max_bytes = context.settings.max_upload_size_bytes
    if len(data) > max_bytes:
        raise PayloadTooLargeError(
            f"Upload exceeds {context.settings.max_upload_size_mb}MB"
        )

    result = await service.upload_image(
        filename=filename,
        album_name=album_name,
        project_id=project_id,
        content=data,
        content_type=file.content_type,
        scene=scene,
        photo_id=photo_id,
        domain=domain,
    )

    if result.skipped:
        return UploadResponse(skipped=True, object_path=result.object_path)
    return UploadResponse(uploaded=True, object_path=result.object_path)


@router.post(
    "/set-image-metadata",
    response_model=SetImageMetadataResponse,
    status_code=status.HTTP_200_OK,
    summary="Label an image uploaded via signed URL",
)
async def set_image_metadata(
    request: SetImageMetadataRequest,
    service: GalleryServiceDep,
) -> SetImageMetadataResponse:
    object_path = await service.set_image_metadata(
        filename=request.filename,
        album_name=request.album_name,
        project_id=request.project_id,
        domain=request.domain,
        scene=request.scene,
        photo_id=request.photo_id,
    )
    return SetImageMetadataResponse(object_path=object_path)


@router.post(
    "/get-upload-url",
    response_model=UploadUrlResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Get a signed upload URL",
    description="Returns skipped=true and no URL when the image already exists.",
)
async def get_upload_url(
    request: UploadUrlRequest,
    service: GalleryServiceDep,
) -> UploadUrlResponse:
    result = await service.get_upload_url(
        filename=request.filename,
        album_name=request.album_name,
        project_id=request.project_id,
        domain=request.domain,
    )
    return UploadUrlResponse(
        skipped=result.skipped,
        upload_url=result.upload_url,
        object_path=result.object_path,
    )
