"""
After School Lessons Backend — Lesson Artwork Generator
=========================================================

What:  Writes one placeholder SVG illustration per lesson into the images
       directory served at /images, plus a generic `default-lesson.svg`.
How:   Each subject maps to a gradient, an accent colour and a glyph;
       unknown subjects get the default palette. Files are written with
       aiofiles.
Who:   The `afterschool-artwork` command.

File naming:
    lesson["image"] when present, else "<slug(subject)>.svg"
    e.g. "Art & Design" → "art-design.svg"
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple, Union
from xml.sax.saxutils import escape, quoteattr

import aiofiles

logger = logging.getLogger(__name__)

FALLBACK_FILENAME = "default-lesson.svg"

FONT_FAMILY = quoteattr("'Poppins', 'Segoe UI', sans-serif")


@dataclass(frozen=True)
class Artwork:
    glyph: str
    gradient: Tuple[str, str]
    accent: str
    tagline: str


SUBJECT_ARTWORK: Dict[str, Artwork] = {
    "Mathematics": Artwork("∑", ("#4f46e5", "#4338ca"), "#eef2ff", "Numbers, logic & problem solving"),
    "English Literature": Artwork("✒️", ("#f97316", "#ea580c"), "#fff7ed", "Stories, poetry & critical thinking"),
    "Science": Artwork("🔬", ("#0ea5e9", "#0284c7"), "#e0f2fe", "Experiments to explain our world"),
    "Computer Programming": Artwork("</>", ("#7c3aed", "#5b21b6"), "#ede9fe", "Build apps, games & ideas"),
    "Art & Design": Artwork("🎨", ("#ec4899", "#db2777"), "#fce7f3", "Creative expression in every medium"),
    "Music Theory": Artwork("🎼", ("#6366f1", "#312e81"), "#e0e7ff", "Harmony, rhythm & performance"),
    "Physical Education": Artwork("⚽", ("#facc15", "#f97316"), "#fefce8", "Skills, stamina & teamwork"),
    "History": Artwork("🏛️", ("#f59e0b", "#b45309"), "#fef3c7", "Past events shaping tomorrow"),
    "Geography": Artwork("🧭", ("#14b8a6", "#0f766e"), "#d1fae5", "Places, people & environments"),
    "Spanish Language": Artwork("🌎", ("#ef4444", "#b91c1c"), "#fee2e2", "Conversation, culture & confidence"),
    "Chemistry": Artwork("⚗️", ("#22d3ee", "#0ea5e9"), "#cffafe", "Atoms, reactions & lab safety"),
    "Drama & Theatre": Artwork("🎭", ("#fb7185", "#be123c"), "#ffe4e6", "Acting, improvisation & stagecraft"),
    "Biology": Artwork("🧬", ("#84cc16", "#4d7c0f"), "#ecfccb", "Life, ecosystems & discovery"),
    "Physics": Artwork("🔭", ("#a855f7", "#6d28d9"), "#ede9fe", "Motion, energy & the universe"),
    "Economics": Artwork("📈", ("#10b981", "#047857"), "#d1fae5", "Markets, money & smart choices"),
}

DEFAULT_ARTWORK = Artwork("✏️", ("#6366f1", "#312e81"), "#e0e7ff", "Learn something amazing today")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, collapse each run of non-alphanumerics to '-', trim '-'."""
    return _NON_ALNUM.sub("-", str(text).lower()).strip("-")


def artwork_for(subject: str) -> Artwork:
    return SUBJECT_ARTWORK.get(subject, DEFAULT_ARTWORK)


def render_lesson_svg(subject: str) -> str:
    """640x480 card: gradient background, radial accent, circles, glyph."""
    art = artwork_for(subject)
    gradient_id = f"{slugify(subject) or 'lesson'}-gradient"
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="640" height="480" viewBox="0 0 640 480">
  <title>{escape(subject)}: {escape(art.tagline)}</title>
  <defs>
    <linearGradient id="{gradient_id}" x1="0%" y1="0%" x2="100%" y2="100%">
      <stop offset="0%" stop-color="{art.gradient[0]}" />
      <stop offset="100%" stop-color="{art.gradient[1]}" />
    </linearGradient>
    <radialGradient id="{gradient_id}-pulse" cx="50%" cy="50%" r="60%">
      <stop offset="0%" stop-color="{art.accent}" stop-opacity="0.85" />
      <stop offset="100%" stop-color="{art.accent}" stop-opacity="0" />
    </radialGradient>
  </defs>
  <rect width="640" height="480" rx="32" fill="url(#{gradient_id})" />
  <circle cx="188" cy="156" r="96" fill="url(#{gradient_id}-pulse)" opacity="0.55" />
  <circle cx="500" cy="120" r="72" fill="rgba(255,255,255,0.18)" />
  <circle cx="540" cy="360" r="96" fill="rgba(255,255,255,0.12)" />
  <text x="320" y="280" text-anchor="middle" dominant-baseline="middle" font-size="200" font-family={FONT_FAMILY} fill="rgba(255,255,255,0.92)" font-weight="600">{escape(art.glyph)}</text>
</svg>
"""


def render_fallback_svg() -> str:
    """Generic book card for lessons whose image is missing."""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="640" height="480" viewBox="0 0 640 480">
  <defs>
    <linearGradient id="fallback-gradient" x1="0%" y1="0%" x2="100%" y2="100%">
      <stop offset="0%" stop-color="#6366f1" />
      <stop offset="100%" stop-color="#4338ca" />
    </linearGradient>
  </defs>
  <rect width="640" height="480" rx="32" fill="url(#fallback-gradient)" />
  <text x="320" y="240" text-anchor="middle" dominant-baseline="middle" font-size="190" font-family={FONT_FAMILY} fill="rgba(255,255,255,0.92)" font-weight="600">📚</text>
</svg>
"""


def image_filename(lesson: Dict[str, Any]) -> str:
    """The file a lesson's artwork is written to (its `image`, or the subject slug)."""
    subject = lesson.get("subject") or lesson.get("topic") or "lesson"
    return lesson.get("image") or f"{slugify(subject)}.svg"


async def _write(path: Path, content: str) -> None:
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(content)


async def generate_artwork(
    lessons: Sequence[Dict[str, Any]],
    output_dir: Union[str, Path],
) -> List[Path]:
    """
    Write one SVG per lesson and the fallback image.

    Existing lesson images are overwritten; an existing fallback is kept.
    Returns the paths written, in lesson order (fallback last, if written).
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    for lesson in lessons:
        subject = lesson.get("subject") or lesson.get("topic") or "lesson"
        dest = out / Path(image_filename(lesson)).name
        logger.info("Creating %s graphic...", dest.name)
        await _write(dest, render_lesson_svg(subject))
        written.append(dest)

    fallback = out / FALLBACK_FILENAME
    if not fallback.exists():
        await _write(fallback, render_fallback_svg())
        written.append(fallback)

    logger.info("All lesson illustrations generated in %s", out)
    return written
