"""
After School Lessons Backend — Lesson Artwork
===============================================

What:  GET /images/{file}: serves the SVG illustrations written by the
       artwork tool (afterschool-artwork) from IMAGES_DIR.
How:   Resolves the requested name under the images directory, refuses
       anything that escapes it, and streams the file with FileResponse.
       A missing file is a structured 404 like every other error.
"""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from afterschool.exceptions import InvalidArgumentError, NotFoundError
from afterschool.schemas.common import ErrorResponse

router = APIRouter(tags=["Images"])


@router.get(
    "/images/{file_path:path}",
    summary="Serve lesson artwork",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Invalid file path", "model": ErrorResponse},
        404: {"description": "Image not found", "model": ErrorResponse},
    },
)
async def serve_image(file_path: str, request: Request) -> FileResponse:
    images_root = Path(request.app.state.images_dir).resolve()
    full_path = (images_root / file_path).resolve()

    # Path traversal (../../etc/passwd) resolves outside the images root
    if not full_path.is_relative_to(images_root):
        raise InvalidArgumentError(message="Invalid file path", field="file")

    if not full_path.is_file():
        raise NotFoundError(
            resource="image",
            resource_id=file_path,
            message=f"The requested image {file_path} does not exist on the server",
        )

    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
