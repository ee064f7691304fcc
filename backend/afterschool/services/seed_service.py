"""
After School Lessons Backend — Lesson Seeding Service
=======================================================

What:  Loads the sample lesson file and resets the `lessons` collection
       so it contains exactly those lessons.
Who:   The `afterschool-seed` command; never called on the request path.

Workflow:
    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐    ┌───────────┐
    │ Read JSON   │───▶│ Validate as  │───▶│ Create schema│───▶│ Delete +  │
    │ (aiofiles)  │    │ LessonCreate │    │ if missing   │    │ insert    │
    └─────────────┘    └──────────────┘    └──────────────┘    └───────────┘

Lesson file format: a JSON array of objects with subject, location, price,
spaces and optional icon, image, description.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import aiofiles
from pydantic import ValidationError as PydanticValidationError

from afterschool.database import Database
from afterschool.exceptions import InvalidArgumentError
from afterschool.repositories import LessonRepository
from afterschool.schemas.common import error_fields
from afterschool.schemas.lesson import LessonCreate

logger = logging.getLogger(__name__)


async def read_lessons_json(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read the raw lesson objects from `path`.

    Raises:
        InvalidArgumentError: file missing, not JSON, or not an array of objects.
    """
    file_path = Path(path)
    try:
        async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
            raw = await f.read()
    except FileNotFoundError as e:
        raise InvalidArgumentError(
            message=f"Lessons file not found: {file_path}",
            field="file",
        ) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(
            message=f"Lessons file is not valid JSON: {e.msg} (line {e.lineno})",
            field="file",
        ) from e

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise InvalidArgumentError(
            message="Lessons file must contain a JSON array of lesson objects",
            field="file",
        )
    return data


def parse_lessons(items: Sequence[Dict[str, Any]]) -> List[LessonCreate]:
    """
    Validate raw lesson objects.

    Raises:
        InvalidArgumentError: naming the index and fields of the first bad entry.
    """
    lessons: List[LessonCreate] = []
    for index, item in enumerate(items):
        try:
            lessons.append(LessonCreate.model_validate(item))
        except PydanticValidationError as e:
            raise InvalidArgumentError(
                message=f"Lesson #{index + 1} is invalid",
                context={"index": index, "fields": error_fields(e)},
            ) from e
    return lessons


async def seed_lessons(database: Database, lessons: Sequence[LessonCreate]) -> int:
    """
    Replace every stored lesson with `lessons`. Returns the number inserted.

    Raises:
        StoreUnavailableError: the store could not be reached or written.
    """
    await database.connect()
    await database.create_schema()
    async with database.session() as session:
        count = await LessonRepository(session).replace_all(lessons)

    for position, lesson in enumerate(lessons, start=1):
        logger.info(
            "%d. %s - %s - $%s - %d spaces",
            position, lesson.subject, lesson.location, f"{lesson.price:g}", lesson.spaces,
        )
    return count
