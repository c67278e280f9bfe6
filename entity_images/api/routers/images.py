"""
Image serving endpoints.

Routes:
- GET /{slug}/{filename} - Serve a variant of a simple schema image
- GET /{slug}/{locale}/{filename} - Serve a variant of a translatable schema image

Filenames follow ``{identity}[-{variant}].{format}``; the bare form names
the original variant. Gated schemas serve the blurred file unless the
access gate grants the current user access.

Dependencies: entity_images.application.services, fastapi
System role: Public HTTP delivery of derived images
"""

import logging
import mimetypes
import os
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import FileResponse

from entity_images.application.services import ImageService
from entity_images.api.deps.dependencies import get_image_service
from entity_images.core.exceptions import UnresolvableSlug
from entity_images.core.path_codec import parse_public_filename

from .image_error_handling import handle_image_errors

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])

MAX_AGE = 60 * 60 * 24 * 31
ACCEPTED_TYPES = ("image/webp", "image/avif")


def _accepts_modern_images(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return any(media_type in accept for media_type in ACCEPTED_TYPES)


def _not_modified_since(request: Request, modified_at: datetime) -> bool:
    header = request.headers.get("if-modified-since")
    if not header:
        return False
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return since >= modified_at


@router.get("/{slug}/{path:path}")
@handle_image_errors
async def serve_image(
    slug: str,
    path: str,
    request: Request,
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """
    Serve one derived image file.

    Returns 406 unless the client accepts WebP or AVIF, 404 when the URL
    names no existing file, and 304 when the client copy is current.
    """
    if not _accepts_modern_images(request):
        raise HTTPException(
            status_code=status.HTTP_406_NOT_ACCEPTABLE,
            detail="Client must accept image/webp",
        )

    schema = image_service.context.registry.find_by_slug(slug)
    if schema is None:
        raise UnresolvableSlug(slug)

    # Translatable schemas take exactly one locale segment, simple ones none
    segments = path.split("/")
    if len(segments) != (2 if schema.translatable else 1):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    locale = segments[0] if schema.translatable else None
    filename = segments[-1]

    parsed = parse_public_filename(filename, list(schema.variants))
    if parsed is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    identity, variant, fmt = parsed

    if schema.variant(variant).format != fmt:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")

    processor = await image_service.resolve(slug, identity, locale)
    file_path = processor.resolve_absolute_file_path(variant)
    if not os.path.isfile(file_path):
        logger.info(
            "Image file missing",
            extra={"slug": slug, "identity": identity, "variant": variant},
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")

    modified_at = datetime.fromtimestamp(int(os.path.getmtime(file_path)), tz=timezone.utc)
    headers = {
        "Cache-Control": f"public, max-age={MAX_AGE}",
        "Last-Modified": format_datetime(modified_at, usegmt=True),
    }

    if _not_modified_since(request, modified_at):
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)

    media_type = mimetypes.guess_type(file_path)[0] or f"image/{fmt}"
    return FileResponse(file_path, media_type=media_type, headers=headers)
