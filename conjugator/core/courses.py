from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from conjugator.core.models import Challenge, Course, Form, Level, Lives, Mode

logger = logging.getLogger(__name__)

COURSES_DIR = Path(__file__).resolve().parent.parent / "data" / "courses"
DEFAULT_DATA_SOURCE = "default"


class CourseRepository:
    """Loads courses from YAML files named after their data-source identifier."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = base_dir or COURSES_DIR

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path_for(self, data_source: str) -> Path:
        if not data_source or "/" in data_source or "\\" in data_source or data_source in {".", ".."}:
            raise ValueError(f"Invalid data source: {data_source!r}")
        return self._base_dir / f"{data_source}.yaml"

    def load(self, data_source: str) -> Course:
        course_path = self.path_for(data_source)
        if not course_path.exists():
            raise FileNotFoundError(f"Course file not found: {course_path}")
        raw = yaml.safe_load(course_path.read_text(encoding="utf-8"))
        return _course_from_dict(course_path.name, data_source, raw)

    async def fetch(self, data_source: str) -> Optional[Course]:
        """Load a course without blocking the event loop; None if it cannot be loaded."""
        try:
            course = await asyncio.to_thread(self.load, data_source)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning("Could not load course %r: %s", data_source, e)
            return None
        logger.info("Loaded course %r with %d level(s)", data_source, len(course.levels))
        return course


def _course_from_dict(file_name: str, data_source: str, raw: Any) -> Course:
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{file_name}: expected YAML with 'levels'")
    raw_levels = raw.get("levels")
    if not isinstance(raw_levels, list) or not raw_levels:
        raise ValueError(f"{file_name}: missing or empty 'levels'")
    levels = [_level_from_dict(file_name, item) for item in raw_levels]
    return Course(
        data_source=data_source,
        levels=levels,
        name=_optional_str(raw.get("name")),
        announcement_title=_optional_str(raw.get("announcement_title")),
        announcement=_optional_str(raw.get("announcement")),
    )


def _level_from_dict(file_name: str, raw: Any) -> Level:
    if not isinstance(raw, dict):
        raise ValueError(f"{file_name}: each level must be a mapping")
    title = raw.get("title")
    if not title or not isinstance(title, str):
        raise ValueError(f"{file_name}: level missing or invalid 'title'")
    title = title.strip()
    raw_challenges = raw.get("challenges") or []
    if not isinstance(raw_challenges, list):
        raise ValueError(f"{file_name}: '{title}' challenges must be a list")
    challenges = [_challenge_from_dict(file_name, title, item) for item in raw_challenges]
    if len(challenges) < 2:
        raise ValueError(f"{file_name}: '{title}' needs at least two challenges")
    return Level(
        title=title,
        description=str(raw.get("description") or "").strip(),
        color_hex=_parse_color(file_name, title, raw.get("color")),
        mode=_parse_mode(file_name, title, raw.get("mode", "random")),
        lives=_parse_lives(file_name, title, raw.get("lives", 3)),
        challenges=challenges,
    )


def _challenge_from_dict(file_name: str, level_title: str, raw: Any) -> Challenge:
    if not isinstance(raw, dict):
        raise ValueError(f"{file_name}: '{level_title}' has a challenge that is not a mapping")
    verb = raw.get("verb")
    if not verb or not isinstance(verb, str):
        raise ValueError(f"{file_name}: '{level_title}' has a challenge with no 'verb'")
    forms = raw.get("forms")
    if not isinstance(forms, list):
        raise ValueError(f"{file_name}: '{verb}' is missing its 'forms' list")
    # Form count is checked when the round is built, not here.
    return Challenge(verb=verb.strip(), verb_forms=[str(item).strip() for item in forms])


def _parse_mode(file_name: str, level_title: str, value: Any) -> Mode:
    text = str(value).strip().lower()
    if text == "random":
        return Mode.random_form()
    try:
        return Mode.set_form(Form(text))
    except ValueError:
        raise ValueError(f"{file_name}: '{level_title}' has unknown mode {value!r}") from None


def _parse_lives(file_name: str, level_title: str, value: Any) -> Lives:
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "unlimited":
            return Lives.unlimited()
        if text in {"sudden_death", "sudden-death"}:
            return Lives.sudden_death()
    if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
        return Lives.fixed(value)
    raise ValueError(f"{file_name}: '{level_title}' has invalid lives {value!r}")


def _parse_color(file_name: str, level_title: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    if text.startswith("#") and len(text) == 7:
        try:
            return int(text[1:], 16)
        except ValueError:
            pass
    raise ValueError(f"{file_name}: '{level_title}' has invalid color {value!r}")


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

