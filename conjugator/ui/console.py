"""Text-mode front end driving the view model."""

from __future__ import annotations

from typing import Callable, Optional

from conjugator.core.errors import DataError
from conjugator.core.models import Course, GameSummary, Level, Message, Prompt, Response
from conjugator.ui.view_model import ViewModel

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
QUIT_COMMANDS = {"q", ":q", "quit"}


def format_message(message: Message) -> str:
    content = message.content
    if isinstance(content, Prompt):
        header = f"[{content.header}] " if content.header else ""
        return f"{header}{content.title}?"
    if isinstance(content, Response):
        mark = "✓" if content.correct else "✗"
        return f"  > {content.choice.text} {mark}"
    return ""


def format_summary(summary: GameSummary) -> str:
    if summary.accuracy is None:
        return f"Sin vidas. {len(summary.answers)} respuesta(s) antes de fallar."
    first_try = sum(1 for answer in summary.answers if answer.first_try)
    return f"Precisión: {summary.accuracy:.0%} ({first_try}/{len(summary.answers)} al primer intento)"


def play_level(view_model: ViewModel, input_fn: InputFn = input, print_fn: PrintFn = print) -> Optional[GameSummary]:
    """Play the selected level until it ends or the user quits; return the summary."""
    def show(message: Message) -> None:
        print_fn(format_message(message))

    view_model.message_added.connect(show)
    try:
        view_model.start_level()
        while True:
            session = view_model.session
            if session is None:
                return None
            if session.is_finished():
                print_fn(format_summary(session.summary))
                return session.summary
            conversation = session.conversation
            if conversation.status.complete:
                view_model.advance()
                continue

            for number, choice in enumerate(conversation.choices, start=1):
                struck = any(c is choice for c in conversation.strikethrough_choices)
                label = f"~{choice.text}~" if struck else choice.text
                print_fn(f"{number}) {label}")
            raw = input_fn("Elige: ").strip().lower()
            if raw in QUIT_COMMANDS:
                view_model.close_level()
                return None
            if not raw.isdigit() or not 1 <= int(raw) <= len(conversation.choices):
                print_fn("Opción no válida.")
                continue
            view_model.submit(conversation.choices[int(raw) - 1])
    except DataError as e:
        print_fn(f"Error en este nivel. Por favor avisa a tu profesor. ({e})")
        view_model.close_level()
        return None
    finally:
        view_model.message_added.disconnect(show)


def _pick(options: list, label: Callable[[object], str], input_fn: InputFn, print_fn: PrintFn) -> Optional[object]:
    for number, option in enumerate(options, start=1):
        print_fn(f"{number}) {label(option)}")
    print_fn("q) Salir")
    while True:
        raw = input_fn("Elige: ").strip().lower()
        if raw in QUIT_COMMANDS:
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return options[int(raw) - 1]
        print_fn("Opción no válida.")


def _course_label(course: Course) -> str:
    return course.name or "Curso sin título"


def _level_label(level: Level) -> str:
    return f"{level.title} - {level.description}" if level.description else level.title


def play_shell(view_model: ViewModel, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Course and level menus around :func:`play_level`."""
    if not view_model.courses:
        print_fn("No hay cursos disponibles. Revisa tus fuentes de datos.")
        return 1

    courses = view_model.displayed_courses
    if len(courses) > 1:
        print_fn("\n=== Mis cursos ===")
        course = _pick(courses, _course_label, input_fn, print_fn)
        if course is None:
            return 0
        view_model.select_course(course.data_source)

    course = view_model.selected_course
    print_fn(f"\n=== {_course_label(course)} ===")
    if course.announcement:
        if course.announcement_title:
            print_fn(course.announcement_title)
        print_fn(course.announcement)

    while True:
        level = _pick(course.levels, _level_label, input_fn, print_fn)
        if level is None:
            return 0
        view_model.select_level(level)
        play_level(view_model, input_fn, print_fn)
