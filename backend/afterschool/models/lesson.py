"""
After School Lessons Backend — Lesson SQLAlchemy Model
========================================================

What:  ORM model representing the `lessons` table (the "lessons" collection).
Who:   Used by LessonRepository for reads and the spaces update, by the seed
       tool for bulk loading, and by Alembic for schema management.

Table Design:
    - UUID primary key: assigned once at insert, never changed
    - spaces: CHECK (spaces >= 0) so no write can leave a negative count
    - created_at: insertion timestamp; listings are ordered by it
    - idx_lessons_subject_location: composite index over the two text
      fields that search matches on
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Float, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from afterschool.database import Base


class Lesson(Base):
    """
    One offered class.

    Lifecycle:
        1. Created in bulk by the seed tool
        2. Read by GET /lessons and GET /search
        3. spaces mutated only by PUT /lessons/{id}
        4. Deleted only by the seed tool's reset step
    """

    __tablename__ = "lessons"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique lesson identifier, exposed over HTTP as _id",
    )

    subject: Mapped[str] = mapped_column(String(120), nullable=False)

    location: Mapped[str] = mapped_column(String(120), nullable=False)

    price: Mapped[float] = mapped_column(Float, nullable=False)

    spaces: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Remaining spaces; never negative",
    )

    # Font Awesome class name used by the storefront (e.g. fa-calculator)
    icon: Mapped[str | None] = mapped_column(String(80), nullable=True, default=None)

    # File name under /images, produced by the artwork tool
    image: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)

    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="Insertion time; defines listing order",
    )

    __table_args__ = (
        CheckConstraint("spaces >= 0", name="ck_lessons_spaces_non_negative"),
        CheckConstraint("price >= 0", name="ck_lessons_price_non_negative"),
        Index("idx_lessons_subject_location", "subject", "location"),
    )

    def __repr__(self) -> str:
        return (
            f"<Lesson(id={self.id}, subject='{self.subject}', "
            f"location='{self.location}', spaces={self.spaces})>"
        )
