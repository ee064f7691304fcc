"""
After School Lessons Backend — Service Index
==============================================

What:  GET /: a welcome message, the API version and the endpoint list.
"""

from fastapi import APIRouter

from afterschool import __version__
from afterschool.schemas.common import ServiceInfoResponse

router = APIRouter(tags=["Index"])

ENDPOINTS = {
    "lessons": "GET /lessons - Get all lessons",
    "search": "GET /search?q=query - Search lessons",
    "order": "POST /order - Create a new order",
    "updateLesson": "PUT /lessons/:id - Update lesson spaces",
    "images": "GET /images/:file - Lesson artwork",
}


@router.get("/", response_model=ServiceInfoResponse, summary="Service metadata")
async def index() -> ServiceInfoResponse:
    return ServiceInfoResponse(
        message="Welcome to After School Classes API",
        version=__version__,
        endpoints=ENDPOINTS,
    )
