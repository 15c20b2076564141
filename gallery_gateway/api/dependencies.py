"""
FastAPI dependency injection.

The application builds one immutable GatewayContext at startup (settings,
authenticator, store) and keeps it on app.state. Dependencies read from it
per request, so routes never touch globals and tests can build an app
around an in-memory store.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from ..config.settings import Settings
from ..core.errors import StorageUnavailableError
from ..core.gallery.auth import Authenticator
from ..core.gallery.service import GalleryService, ObjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewayContext:
    """Process-wide configuration, constructed once by create_app."""
    settings: Settings
    authenticator: Authenticator
    store: Optional[ObjectStore]


def get_context(request: Request) -> GatewayContext:
    return request.app.state.context


ContextDep = Annotated[GatewayContext, Depends(get_context)]


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_auth(
    context: ContextDep,
    x_pt_auth: Annotated[Optional[str], Header(alias="X-PT-Auth")] = None,
    authorization: Annotated[Optional[str], Header()] = None,
) -> None:
    """
    Reject the request unless it carries the shared secret.

    Raises AuthMissingError (401) or AuthInvalidError (403); both are
    rendered by the app's GatewayError handler.
    """
    context.authenticator.check(x_pt_auth=x_pt_auth, authorization=authorization)


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_store(context: ContextDep) -> ObjectStore:
    """Provide the bucket, or fail with a fixed 500 when none is configured."""
    if context.store is None:
        raise StorageUnavailableError()
    return context.store


def get_gallery_service(
    context: ContextDep,
    store: Annotated[ObjectStore, Depends(get_store)],
) -> GalleryService:
    """
    Provide GalleryService bound to the configured store.

    The service is stateless, so a new instance per request is cheap.
    """
    return GalleryService(
        store=store,
        signed_url_expiry_seconds=context.settings.signed_url_expiry_seconds,
        unify_upload_paths=context.settings.unify_upload_paths,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
ObjectStoreDep = Annotated[ObjectStore, Depends(get_store)]
GalleryServiceDep = Annotated[GalleryService, Depends(get_gallery_service)]
