"""Content and session data models for conjugation practice."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class Form(Enum):
    """Grammatical person, declared in canonical order."""

    YO = "yo"
    TU = "tu"
    EL = "el"
    NOSOTROS = "nosotros"
    VOSOTROS = "vosotros"
    ELLOS = "ellos"

    @property
    def title(self) -> str:
        return _FORM_TITLES[self]


_FORM_TITLES = {
    Form.YO: "Yo",
    Form.TU: "Tú",
    Form.EL: "Él/Ella/Usted",
    Form.NOSOTROS: "Nosotros",
    Form.VOSOTROS: "Vosotros",
    Form.ELLOS: "Ellos",
}


@dataclass(eq=False)
class Choice:
    """One selectable conjugation. Compared by identity, never by value."""

    form: Form
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class Challenge:
    verb: str
    verb_forms: List[str]


@dataclass(frozen=True)
class Mode:
    """Either a random form per challenge or one form for the whole level."""

    form: Optional[Form] = None

    @classmethod
    def random_form(cls) -> "Mode":
        return cls()

    @classmethod
    def set_form(cls, form: Form) -> "Mode":
        return cls(form=form)

    @property
    def is_random(self) -> bool:
        return self.form is None


class LivesKind(Enum):
    UNLIMITED = "unlimited"
    FIXED = "fixed"
    SUDDEN_DEATH = "sudden_death"


@dataclass(frozen=True)
class Lives:
    kind: LivesKind
    count: Optional[int] = None

    @classmethod
    def unlimited(cls) -> "Lives":
        return cls(LivesKind.UNLIMITED)

    @classmethod
    def fixed(cls, count: int) -> "Lives":
        if count < 1:
            raise ValueError(f"Fixed lives must be at least 1, got {count}")
        return cls(LivesKind.FIXED, count)

    @classmethod
    def sudden_death(cls) -> "Lives":
        return cls(LivesKind.SUDDEN_DEATH)

    @property
    def initial(self) -> Optional[int]:
        """Starting life count for a level, or None when lives never run out."""
        if self.kind is LivesKind.UNLIMITED:
            return None
        if self.kind is LivesKind.SUDDEN_DEATH:
            return 1
        return self.count


@dataclass(frozen=True)
class Level:
    title: str
    description: str = ""
    color_hex: Optional[int] = None
    mode: Mode = field(default_factory=Mode.random_form)
    lives: Lives = field(default_factory=lambda: Lives.fixed(3))
    # At least two challenges per level.
    challenges: List[Challenge] = field(default_factory=list)


@dataclass(frozen=True)
class Course:
    data_source: str
    levels: List[Level]
    name: Optional[str] = None
    announcement_title: Optional[str] = None
    announcement: Optional[str] = None


@dataclass(frozen=True)
class Prompt:
    typing: bool
    header: Optional[str]
    title: str
    footer: Optional[str]


@dataclass(frozen=True)
class Response:
    choice: Choice
    correct: bool


@dataclass(frozen=True)
class Message:
    content: Union[Prompt, Response]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class Status:
    """``attempts`` is None while the question is open."""

    attempts: Optional[int] = None

    @classmethod
    def question_asked(cls) -> "Status":
        return cls()

    @classmethod
    def question_answered_correctly(cls, attempts: int) -> "Status":
        return cls(attempts=attempts)

    @property
    def complete(self) -> bool:
        return self.attempts is not None


@dataclass
class Conversation:
    """Live state for the challenge currently being answered."""

    challenge: Challenge
    correct_form: Form
    choices: List[Choice]
    selected_choice: Optional[Choice] = None
    strikethrough_choices: List[Choice] = field(default_factory=list)
    status: Status = field(default_factory=Status.question_asked)
    messages: List[Message] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def correct_choice(self) -> Choice:
        return next(choice for choice in self.choices if choice.form is self.correct_form)


@dataclass(frozen=True)
class Answer:
    challenge: Challenge
    correct_form: Form
    choice: Choice
    attempts: int
    wrong_choices: List[Choice] = field(default_factory=list)

    @property
    def first_try(self) -> bool:
        return self.attempts == 1


class Outcome(Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class GameSummary:
    outcome: Outcome
    accuracy: Optional[float]
    answers: List[Answer]

    @property
    def completed(self) -> bool:
        return self.outcome is Outcome.COMPLETED
