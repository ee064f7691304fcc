"""
After School Lessons Backend — Command-Line Tools
===================================================

What:  Console entry points for the one-off utilities.

Commands:
    afterschool-seed     [--file lessons.json] [--database-url URL]
    afterschool-artwork  [--file lessons.json] [--output-dir public/images]

Exit status is 0 on success and 1 on any failure (the error is logged).
"""

import argparse
import asyncio
import logging
from typing import Optional, Sequence

from afterschool.config import settings
from afterschool.database import Database
from afterschool.exceptions import AfterSchoolError
from afterschool.logging_config import setup_logging
from afterschool.services.artwork_service import generate_artwork
from afterschool.services.seed_service import parse_lessons, read_lessons_json, seed_lessons

logger = logging.getLogger("afterschool.cli")


async def _seed(lessons_file: str, database_url: str) -> int:
    lessons = parse_lessons(await read_lessons_json(lessons_file))
    database = Database(
        database_url,
        connect_timeout=settings.db_connect_timeout,
        pool_timeout=settings.db_pool_timeout,
    )
    try:
        count = await seed_lessons(database, lessons)
    finally:
        await database.dispose()
    return count


def seed_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="afterschool-seed",
        description="Replace all lessons in the database with the contents of a lessons file.",
    )
    parser.add_argument("--file", default=settings.lessons_file, help="JSON array of lessons")
    parser.add_argument("--database-url", default=settings.database_url, help="Async SQLAlchemy URL")
    args = parser.parse_args(argv)

    setup_logging()
    try:
        count = asyncio.run(_seed(args.file, args.database_url))
    except AfterSchoolError as e:
        logger.error("Seed error: %s", e.message)
        return 1
    logger.info("Inserted %d lessons into 'lessons'", count)
    return 0


async def _artwork(lessons_file: str, output_dir: str) -> int:
    lessons = await read_lessons_json(lessons_file)
    written = await generate_artwork(lessons, output_dir)
    return len(written)


def artwork_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="afterschool-artwork",
        description="Generate an SVG illustration for every lesson in a lessons file.",
    )
    parser.add_argument("--file", default=settings.lessons_file, help="JSON array of lessons")
    parser.add_argument("--output-dir", default=settings.images_dir, help="Where to write the SVGs")
    args = parser.parse_args(argv)

    setup_logging()
    try:
        count = asyncio.run(_artwork(args.file, args.output_dir))
    except (AfterSchoolError, OSError) as e:
        logger.error("Image generation error: %s", getattr(e, "message", str(e)))
        return 1
    logger.info("Wrote %d files to %s", count, args.output_dir)
    return 0
