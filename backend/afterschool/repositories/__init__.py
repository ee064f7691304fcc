# Repositories package init
"""
After School Lessons Backend — Store Façades
==============================================

What:  Thin repositories over the two collections.
How:   Each repository is constructed with an AsyncSession (injected per
       request by FastAPI), bounds every store call with a timeout, and
       converts driver failures into StoreUnavailableError.

Repository Inventory:
    - LessonRepository: list, search, update_spaces, replace_all (seed only)
    - OrderRepository:  create
"""

from afterschool.repositories.lesson_repository import LessonRepository
from afterschool.repositories.order_repository import OrderRepository

__all__ = ["LessonRepository", "OrderRepository"]
