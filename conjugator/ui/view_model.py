"""Observable state for the UI: courses, the selected level and the live session."""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from conjugator.core.courses import CourseRepository
from conjugator.core.models import Choice, Conversation, Course, GameSummary, Level
from conjugator.core.session import QuizSession
from conjugator.core.settings import SettingsStore

logger = logging.getLogger(__name__)


class KeyboardMode(Enum):
    """What the answer area shows."""

    BLANK = "blank"
    INFO = "info"
    CONVERSATION = "conversation"
    FINISHED = "finished"


class ViewModel(QObject):
    loading_changed = Signal(bool)
    courses_changed = Signal()
    selection_changed = Signal()
    conversation_changed = Signal()
    message_added = Signal(object)
    level_finished = Signal(object)

    MAXIMUM_COURSES_TO_DISPLAY = 6

    def __init__(
        self,
        settings: SettingsStore,
        repository: CourseRepository,
        rng: Optional[random.Random] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._repository = repository
        self._rng = rng
        self._is_loading = True
        self._showing_details = False
        self._courses: List[Course] = []
        self._selected_course: Optional[Course] = None
        self._selected_level: Optional[Level] = None
        self._session: Optional[QuizSession] = None

    @property
    def settings(self) -> SettingsStore:
        return self._settings

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def showing_details(self) -> bool:
        """True when no course could be loaded and the data-source details should show."""
        return self._showing_details

    @property
    def courses(self) -> List[Course]:
        return list(self._courses)

    @property
    def displayed_courses(self) -> List[Course]:
        return self._courses[: self.MAXIMUM_COURSES_TO_DISPLAY]

    @property
    def selected_course(self) -> Optional[Course]:
        return self._selected_course

    @property
    def selected_level(self) -> Optional[Level]:
        return self._selected_level

    @property
    def session(self) -> Optional[QuizSession]:
        return self._session

    @property
    def conversation(self) -> Optional[Conversation]:
        return self._session.conversation if self._session else None

    @property
    def summary(self) -> Optional[GameSummary]:
        return self._session.summary if self._session else None

    @property
    def keyboard_mode(self) -> KeyboardMode:
        if self._selected_level is None:
            return KeyboardMode.BLANK
        if self._session is None:
            return KeyboardMode.INFO
        if self._session.is_finished():
            return KeyboardMode.FINISHED
        return KeyboardMode.CONVERSATION

    async def load_courses(self) -> None:
        """Fetch every configured course and pick the selected one.

        A result is dropped if the configured data sources change before it
        arrives; the newer load owns the state.
        """
        requested = self._settings.data_sources
        self._set_loading(True)

        courses: List[Course] = []
        for data_source in requested:
            course = await self._repository.fetch(data_source)
            if course is not None:
                courses.append(course)

        if self._settings.data_sources != requested:
            logger.info("Discarding stale course load for %s", requested)
            return

        self._set_loading(False)
        if not courses:
            self._showing_details = True
            logger.warning("No courses could be loaded from %s", requested)
            self.courses_changed.emit()
            return

        selected = self._settings.selected_data_source
        self._courses = courses
        self._showing_details = False
        self._selected_course = next(
            (course for course in courses if course.data_source == selected), courses[0]
        )
        self.courses_changed.emit()
        self.selection_changed.emit()

    def select_course(self, data_source: str) -> None:
        course = next((c for c in self._courses if c.data_source == data_source), None)
        if course is None:
            raise KeyError(data_source)
        self._settings.select_data_source(data_source)
        self._selected_course = course
        self._selected_level = None
        self._session = None
        self.selection_changed.emit()

    def select_level(self, level: Level) -> None:
        """Show a level's info; the quiz starts with :meth:`start_level`."""
        self._selected_level = level
        self._session = None
        self.selection_changed.emit()

    def start_level(self) -> Conversation:
        if self._selected_level is None:
            raise RuntimeError("No level selected")
        self._session = QuizSession(self._selected_level, rng=self._rng)
        logger.info("Started level '%s'", self._selected_level.title)
        self.conversation_changed.emit()
        for message in self._session.conversation.messages:
            self.message_added.emit(message)
        return self._session.conversation

    def close_level(self) -> None:
        self._selected_level = None
        self._session = None
        self.selection_changed.emit()

    def submit(self, choice: Choice) -> bool:
        session = self._require_session()
        before = len(session.conversation.messages)
        was_finished = session.is_finished()
        correct = session.submit(choice)
        for message in session.conversation.messages[before:]:
            self.message_added.emit(message)
        self.conversation_changed.emit()
        if session.is_finished() and not was_finished:
            self.level_finished.emit(session.summary)
        return correct

    def advance(self) -> Optional[Conversation]:
        session = self._require_session()
        conversation = session.advance()
        self.conversation_changed.emit()
        if conversation is None:
            self.level_finished.emit(session.summary)
        else:
            for message in conversation.messages:
                self.message_added.emit(message)
        return conversation

    def _require_session(self) -> QuizSession:
        if self._session is None:
            raise RuntimeError("No level in progress")
        return self._session

    def _set_loading(self, loading: bool) -> None:
        if self._is_loading != loading:
            self._is_loading = loading
            self.loading_changed.emit(loading)
