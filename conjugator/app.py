"""Application entry point and setup for the Conjugator practice app."""

import asyncio
import logging
import sys

from conjugator.core.courses import CourseRepository
from conjugator.core.settings import SettingsStore
from conjugator.ui.console import play_shell
from conjugator.ui.view_model import ViewModel


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Load settings and courses, then start the practice menus."""
    configure_logging()

    settings = SettingsStore()
    settings.load()
    repository = CourseRepository()

    view_model = ViewModel(settings=settings, repository=repository)
    asyncio.run(view_model.load_courses())
    logging.info("Loaded %d course(s)", len(view_model.courses))

    sys.exit(play_shell(view_model))


if __name__ == "__main__":  # pragma: no cover
    run()
