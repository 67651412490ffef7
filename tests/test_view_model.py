"""Tests for conjugator.ui.view_model – observable presentation state."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from conjugator.core.models import Course, Form, Level, Lives, Outcome, Prompt, Response
from conjugator.core.settings import SettingsStore
from conjugator.ui.view_model import KeyboardMode, ViewModel


class FakeRepository:
    def __init__(self, courses: Dict[str, Course]) -> None:
        self.courses = courses
        self.fetched: List[str] = []
        self.on_fetch: Optional[Callable[[str], None]] = None

    async def fetch(self, data_source: str) -> Optional[Course]:
        self.fetched.append(data_source)
        await asyncio.sleep(0)
        if self.on_fetch is not None:
            self.on_fetch(data_source)
        return self.courses.get(data_source)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def settings(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture()
def course_a(level: Level) -> Course:
    return Course(data_source="a", levels=[level], name="Curso A")


@pytest.fixture()
def course_b(level: Level) -> Course:
    return Course(data_source="b", levels=[level], name="Curso B")


@pytest.fixture()
def repository(course_a: Course, course_b: Course) -> FakeRepository:
    return FakeRepository({"a": course_a, "b": course_b})


@pytest.fixture()
def vm(settings: SettingsStore, repository: FakeRepository, rng) -> ViewModel:
    settings.add_data_source("a")
    settings.add_data_source("b")
    return ViewModel(settings=settings, repository=repository, rng=rng)


def _record(signal) -> list:
    events: list = []
    signal.connect(lambda *args: events.append(args))
    return events


# ---------------------------------------------------------------------------
# load_courses
# ---------------------------------------------------------------------------

class TestLoadCourses:
    def test_loads_available_courses_in_order(self, vm: ViewModel, repository: FakeRepository):
        changed = _record(vm.courses_changed)
        loading = _record(vm.loading_changed)
        asyncio.run(vm.load_courses())
        assert repository.fetched == ["default", "a", "b"]
        assert [c.data_source for c in vm.courses] == ["a", "b"]
        assert not vm.is_loading
        assert loading == [(False,)]
        assert len(changed) == 1

    def test_selects_stored_data_source(self, vm: ViewModel, settings: SettingsStore):
        settings.select_data_source("b")
        asyncio.run(vm.load_courses())
        assert vm.selected_course.data_source == "b"

    def test_falls_back_to_first_course(self, vm: ViewModel):
        asyncio.run(vm.load_courses())
        assert vm.selected_course.data_source == "a"

    def test_nothing_loaded_shows_details(self, settings: SettingsStore):
        vm = ViewModel(settings=settings, repository=FakeRepository({}))
        asyncio.run(vm.load_courses())
        assert vm.courses == []
        assert vm.selected_course is None
        assert vm.showing_details

    def test_stale_result_is_discarded(self, vm: ViewModel, settings: SettingsStore, repository: FakeRepository):
        def change_sources(data_source: str) -> None:
            if data_source == "a":
                settings.remove_data_source("b")

        repository.on_fetch = change_sources
        asyncio.run(vm.load_courses())
        assert vm.courses == []
        assert vm.is_loading

        repository.on_fetch = None
        asyncio.run(vm.load_courses())
        assert [c.data_source for c in vm.courses] == ["a"]

    def test_displayed_courses_capped(self, settings: SettingsStore, level: Level):
        courses = {str(i): Course(data_source=str(i), levels=[level]) for i in range(8)}
        for key in courses:
            settings.add_data_source(key)
        vm = ViewModel(settings=settings, repository=FakeRepository(courses))
        asyncio.run(vm.load_courses())
        assert len(vm.courses) == 8
        assert len(vm.displayed_courses) == ViewModel.MAXIMUM_COURSES_TO_DISPLAY


# ---------------------------------------------------------------------------
# Selection and keyboard mode
# ---------------------------------------------------------------------------

class TestSelection:
    def test_select_course_persists(self, vm: ViewModel, settings: SettingsStore):
        asyncio.run(vm.load_courses())
        vm.select_course("b")
        assert vm.selected_course.data_source == "b"
        assert settings.selected_data_source == "b"

    def test_select_unknown_course(self, vm: ViewModel):
        asyncio.run(vm.load_courses())
        with pytest.raises(KeyError):
            vm.select_course("zzz")

    def test_keyboard_modes(self, vm: ViewModel, level: Level):
        assert vm.keyboard_mode is KeyboardMode.BLANK
        vm.select_level(level)
        assert vm.keyboard_mode is KeyboardMode.INFO
        assert vm.session is None
        vm.start_level()
        assert vm.session is not None
        assert vm.keyboard_mode is KeyboardMode.CONVERSATION
        vm.close_level()
        assert vm.keyboard_mode is KeyboardMode.BLANK

    def test_start_without_level(self, vm: ViewModel):
        with pytest.raises(RuntimeError):
            vm.start_level()

    def test_advance_without_level(self, vm: ViewModel):
        with pytest.raises(RuntimeError):
            vm.advance()


# ---------------------------------------------------------------------------
# Playing a level through the view model
# ---------------------------------------------------------------------------

class TestPlay:
    def _choice(self, vm: ViewModel, form: Form):
        return next(c for c in vm.conversation.choices if c.form is form)

    def test_messages_and_summary_are_emitted(self, vm: ViewModel, level: Level):
        messages = _record(vm.message_added)
        finished = _record(vm.level_finished)
        vm.select_level(level)
        vm.start_level()
        assert vm.submit(self._choice(vm, Form.TU)) is False
        assert vm.submit(self._choice(vm, Form.YO)) is True
        vm.advance()
        vm.submit(self._choice(vm, Form.TU))
        assert vm.advance() is None

        kinds = [type(args[0].content) for args in messages]
        assert kinds == [Prompt, Response, Response, Prompt, Response]
        [(summary,)] = finished
        assert summary is vm.summary
        assert summary.accuracy == 0.5
        assert vm.keyboard_mode is KeyboardMode.FINISHED

    def test_failure_emits_summary_on_submit(self, vm: ViewModel, make_level):
        finished = _record(vm.level_finished)
        vm.select_level(make_level(lives=Lives.sudden_death()))
        vm.start_level()
        vm.submit(self._choice(vm, Form.ELLOS))
        [(summary,)] = finished
        assert summary.outcome is Outcome.FAILED
        assert vm.keyboard_mode is KeyboardMode.FINISHED
