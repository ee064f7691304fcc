"""
After School Lessons Backend — Lesson Repository
==================================================

What:  Façade over the `lessons` collection: list, search, spaces update,
       and the bulk replace used by the seed tool.

Search semantics:
    A lesson matches when ANY of these contains the query (case-insensitive):
        subject, location, price rendered as text, spaces rendered as text
    Whole prices render without a fractional part ("100", not "100.0"),
    matching the JSON the API returns, on every backend.
    The query is a literal substring used as given, without trimming.
    LIKE wildcards (% and _) and the escape character are escaped first.

Spaces update:
    One `UPDATE lessons SET spaces = :n WHERE id = :id RETURNING *` statement.
    No read-before-write, so concurrent updates resolve last-write-wins at
    the store, and the CHECK constraint keeps spaces >= 0.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional, Union

from sqlalchemy import Integer, String, case, cast, delete, or_, select, update

from afterschool.exceptions import InvalidArgumentError, NotFoundError
from afterschool.models.lesson import Lesson
from afterschool.repositories.base import BaseRepository
from afterschool.schemas.lesson import LessonCreate, UpdateSpacesCommand

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so `term` matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def price_text():
    """SQL expression rendering `lessons.price` the way the API serializes it."""
    whole = cast(Lesson.price, Integer)
    return case(
        (Lesson.price == whole, cast(whole, String)),
        else_=cast(Lesson.price, String),
    )


def parse_lesson_id(lesson_id: Union[str, uuid.UUID]) -> uuid.UUID:
    """
    Parse a lesson identifier.

    Raises:
        InvalidArgumentError: not a syntactically valid UUID.
    """
    if isinstance(lesson_id, uuid.UUID):
        return lesson_id
    try:
        return uuid.UUID(str(lesson_id))
    except ValueError as e:
        raise InvalidArgumentError(
            message=f"Invalid lesson ID: {lesson_id}",
            field="id",
        ) from e


class LessonRepository(BaseRepository):
    """Operations on the `lessons` collection."""

    async def list(self) -> List[Lesson]:
        """Every lesson, in insertion order. No filtering, no pagination."""
        lessons = await self._run("list_lessons", self._fetch(self._ordered(select(Lesson))))
        logger.info("Retrieved %d lessons from database", len(lessons))
        return lessons

    async def search(self, query: Optional[str]) -> List[Lesson]:
        """
        Lessons whose subject, location, price or spaces contain `query`.

        An absent or empty query returns the same result as list(). Any
        other query, whitespace included, is matched literally.
        """
        if not query:
            return await self.list()

        pattern = f"%{escape_like(query)}%"
        stmt = select(Lesson).where(
            or_(
                Lesson.subject.ilike(pattern, escape=LIKE_ESCAPE),
                Lesson.location.ilike(pattern, escape=LIKE_ESCAPE),
                price_text().ilike(pattern, escape=LIKE_ESCAPE),
                cast(Lesson.spaces, String).ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
        lessons = await self._run("search_lessons", self._fetch(self._ordered(stmt)))
        logger.info("Search for '%s' returned %d results", query, len(lessons))
        return lessons

    async def update_spaces(self, lesson_id: Union[str, uuid.UUID], spaces: Any) -> Lesson:
        """
        Set a lesson's spaces and return the updated lesson.

        Validation happens before any store access; an invalid call never
        mutates the store.

        Raises:
            InvalidArgumentError: spaces missing, not an integer, or negative;
                                  lesson_id malformed.
            NotFoundError: no lesson with that identifier.
            StoreUnavailableError: store failure or timeout.
        """
        command = UpdateSpacesCommand.from_payload({"spaces": spaces})
        lid = parse_lesson_id(lesson_id)

        stmt = (
            update(Lesson)
            .where(Lesson.id == lid)
            .values(spaces=command.spaces)
            .returning(Lesson)
        )
        lesson = await self._run("update_lesson_spaces", self._update_one(stmt))

        if lesson is None:
            raise NotFoundError(resource="lesson", resource_id=str(lid))

        logger.info("Updated lesson %s - new spaces: %d", lid, lesson.spaces)
        return lesson

    async def replace_all(self, lessons: Iterable[LessonCreate]) -> int:
        """
        Delete every lesson, then insert `lessons` in the given order.

        Used by the seed tool only; the API never deletes lessons.
        Returns the number of lessons inserted.
        """
        # Distinct, increasing timestamps keep the file order as the listing order
        started = datetime.now(timezone.utc)
        rows = [
            Lesson(**item.model_dump(), created_at=started + timedelta(microseconds=index))
            for index, item in enumerate(lessons)
        ]
        await self._run("replace_lessons", self._replace(rows))
        logger.info("Inserted %d lessons", len(rows))
        return len(rows)

    # ── Store round-trips ─────────────────────────────────────────────────

    @staticmethod
    def _ordered(stmt):
        return stmt.order_by(Lesson.created_at, Lesson.id)

    async def _fetch(self, stmt) -> List[Lesson]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _update_one(self, stmt) -> Optional[Lesson]:
        result = await self.session.execute(stmt)
        lesson = result.scalar_one_or_none()
        await self.session.commit()
        return lesson

    async def _replace(self, rows: List[Lesson]) -> None:
        await self.session.execute(delete(Lesson))
        self.session.add_all(rows)
        await self.session.commit()
