"""
After School Lessons Backend — Route Dependencies
===================================================

What:  FastAPI dependencies that build a repository around the request's
       database session.
Who:   Injected into the lesson and order routes; tests can swap them via
       app.dependency_overrides.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from afterschool.database import get_db_session
from afterschool.repositories import LessonRepository, OrderRepository


async def get_lesson_repository(
    db: AsyncSession = Depends(get_db_session),
) -> LessonRepository:
    return LessonRepository(db)


async def get_order_repository(
    db: AsyncSession = Depends(get_db_session),
) -> OrderRepository:
    return OrderRepository(db)
