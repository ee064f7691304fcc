"""
After School Lessons Backend — Lesson Route Handlers
======================================================

What:  GET /lessons, GET /search and PUT /lessons/{id}.
How:   Delegates to LessonRepository; list endpoints return a bare JSON
       array (no envelope), the update returns the updated lesson.
Who:   Called by the storefront to render the catalogue, filter it as the
       user types, and adjust remaining spaces after checkout.
"""

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from afterschool.repositories import LessonRepository
from afterschool.routes.dependencies import get_lesson_repository
from afterschool.schemas.common import ErrorResponse
from afterschool.schemas.lesson import LessonResponse, UpdateSpacesCommand

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Lessons"])


@router.get(
    "/lessons",
    response_model=List[LessonResponse],
    responses={500: {"description": "Store failure", "model": ErrorResponse}},
    summary="List all lessons",
)
async def list_lessons(
    lessons: LessonRepository = Depends(get_lesson_repository),
) -> List[LessonResponse]:
    """Every lesson, in insertion order."""
    return [LessonResponse.model_validate(lesson) for lesson in await lessons.list()]


@router.get(
    "/search",
    response_model=List[LessonResponse],
    responses={500: {"description": "Store failure", "model": ErrorResponse}},
    summary="Search lessons",
    description=(
        "Case-insensitive substring match on subject and location, and on "
        "price and spaces rendered as text. Any matching field selects the lesson. "
        "An absent or empty `q` returns every lesson."
    ),
)
async def search_lessons(
    q: Optional[str] = Query(default=None, description="Text to look for"),
    lessons: LessonRepository = Depends(get_lesson_repository),
) -> List[LessonResponse]:
    return [LessonResponse.model_validate(lesson) for lesson in await lessons.search(q)]


@router.put(
    "/lessons/{lesson_id}",
    response_model=LessonResponse,
    responses={
        400: {"description": "Invalid spaces value or lesson ID", "model": ErrorResponse},
        404: {"description": "Lesson not found", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Update a lesson's remaining spaces",
)
async def update_lesson_spaces(
    lesson_id: str,
    payload: Any = Body(default=None, examples=[{"spaces": 3}]),
    lessons: LessonRepository = Depends(get_lesson_repository),
) -> LessonResponse:
    """
    Set `spaces` on one lesson.

    Body: {"spaces": <integer >= 0>}. The body is validated before the
    identifier, so a bad body on an unknown lesson is a 400, not a 404.
    """
    command = UpdateSpacesCommand.from_payload(payload)
    lesson = await lessons.update_spaces(lesson_id, command.spaces)
    return LessonResponse.model_validate(lesson)
