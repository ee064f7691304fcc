"""
After School Lessons Backend — Order SQLAlchemy Model
=======================================================

What:  ORM model representing the `orders` table (the "orders" collection).
Who:   Written by OrderRepository.create(); never read back by the API.

Table Design:
    - lesson_ids: JSON array of lesson identifiers, in the order the
      customer submitted them (duplicates allowed, not foreign keys)
    - spaces: JSON, stored as sent; never validated against the lessons
    - order_date: set by the server at insert time, never by the client
"""

import uuid
from datetime import datetime, timezone
from typing import Any, List

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from afterschool.database import Base


class Order(Base):
    """A single booking request. Insert-only."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    phone: Mapped[str] = mapped_column(String(50), nullable=False)

    lesson_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False)

    # Requested spaces exactly as the client sent them (any JSON value)
    spaces: Mapped[Any] = mapped_column(JSON, nullable=True, default=None)

    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, name='{self.name}', lessons={len(self.lesson_ids or [])})>"
