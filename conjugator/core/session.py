from __future__ import annotations

import logging
import random
from typing import List, Optional

from conjugator.core.choices import build_round
from conjugator.core.errors import SessionStateError
from conjugator.core.models import (
    Answer,
    Challenge,
    Choice,
    Conversation,
    GameSummary,
    Level,
    Message,
    Outcome,
    Prompt,
    Response,
    Status,
)

logger = logging.getLogger(__name__)

PROMPT_FOOTER = "Seleccione una opción."


class QuizSession:
    """Steps through a level's challenges one conversation at a time.

    Scoring rules:
      * A challenge's attempt count is the number of *distinct* wrong choices
        plus the final correct one. Re-submitting a struck-through choice adds
        a transcript entry but is not a new attempt.
      * Lives are shared across the whole level and charged once per distinct
        wrong choice. Running out ends the level as failed right away.
      * Accuracy is the share of challenges answered correctly on the first try.
    """

    def __init__(self, level: Level, rng: Optional[random.Random] = None) -> None:
        """Start a session on the first challenge of ``level``."""
        if not level.challenges:
            raise ValueError(f"Level '{level.title}' has no challenges")
        self._level = level
        self._rng = rng
        self._index = 0
        self._lives_remaining = level.lives.initial
        self._answers: List[Answer] = []
        self._history: List[Conversation] = []
        self._outcome = Outcome.IN_PROGRESS
        self._summary: Optional[GameSummary] = None
        self._conversation = self._start_conversation(level.challenges[0])

    @property
    def level(self) -> Level:
        return self._level

    @property
    def conversation(self) -> Conversation:
        """The conversation for the current (or last played) challenge."""
        return self._conversation

    @property
    def index(self) -> int:
        """Index of the current challenge (0-based)."""
        return self._index

    @property
    def total_challenges(self) -> int:
        return len(self._level.challenges)

    @property
    def lives_remaining(self) -> Optional[int]:
        """Lives left for the level; None when the level has unlimited lives."""
        return self._lives_remaining

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def summary(self) -> Optional[GameSummary]:
        """Final summary, available once the level has ended."""
        return self._summary

    @property
    def answers(self) -> List[Answer]:
        return list(self._answers)

    @property
    def messages(self) -> List[Message]:
        """Transcript of every conversation played so far, oldest first."""
        messages: List[Message] = []
        for conversation in self._history:
            messages.extend(conversation.messages)
        messages.extend(self._conversation.messages)
        return messages

    def is_finished(self) -> bool:
        return self._outcome is not Outcome.IN_PROGRESS

    def submit(self, choice: Choice) -> bool:
        """Answer the current question with ``choice``; return whether it was correct."""
        conversation = self._conversation
        if not any(candidate is choice for candidate in conversation.choices):
            raise ValueError(f"Choice '{choice.text}' does not belong to the current challenge")

        if conversation.status.complete:
            if choice is conversation.selected_choice:
                return True
            raise SessionStateError("The current challenge is already answered")
        if self.is_finished():
            raise SessionStateError(f"The level has already ended ({self._outcome.value})")

        correct = choice.form is conversation.correct_form
        conversation.messages.append(Message(Response(choice=choice, correct=correct)))

        if correct:
            attempts = len(conversation.strikethrough_choices) + 1
            conversation.selected_choice = choice
            conversation.status = Status.question_answered_correctly(attempts)
            self._answers.append(
                Answer(
                    challenge=conversation.challenge,
                    correct_form=conversation.correct_form,
                    choice=choice,
                    attempts=attempts,
                    wrong_choices=list(conversation.strikethrough_choices),
                )
            )
            logger.debug("'%s' answered after %d attempt(s)", conversation.challenge.verb, attempts)
            return True

        if any(struck is choice for struck in conversation.strikethrough_choices):
            return False
        conversation.strikethrough_choices.append(choice)
        self._charge_life()
        return False

    def advance(self) -> Optional[Conversation]:
        """Move on to the next challenge.

        Returns the new conversation, or None once the level is over (the
        summary is then available).
        """
        if self.is_finished():
            raise SessionStateError(f"The level has already ended ({self._outcome.value})")
        if not self._conversation.status.complete:
            raise SessionStateError("The current challenge has not been answered yet")

        if self._index + 1 >= self.total_challenges:
            self._finish(Outcome.COMPLETED)
            return None

        # Build first so a malformed challenge leaves the session untouched.
        conversation = self._start_conversation(self._level.challenges[self._index + 1])
        self._index += 1
        self._history.append(self._conversation)
        self._conversation = conversation
        return conversation

    def accuracy(self) -> float:
        """Share of the level's challenges answered correctly on the first try."""
        first_try = sum(1 for answer in self._answers if answer.first_try)
        return first_try / self.total_challenges

    def _start_conversation(self, challenge: Challenge) -> Conversation:
        choices, correct_form = build_round(self._level, challenge, self._rng)
        conversation = Conversation(challenge=challenge, correct_form=correct_form, choices=choices)
        conversation.messages.append(
            Message(
                Prompt(
                    typing=False,
                    header=challenge.verb,
                    title=correct_form.title,
                    footer=PROMPT_FOOTER,
                )
            )
        )
        return conversation

    def _charge_life(self) -> None:
        if self._lives_remaining is None:
            return
        self._lives_remaining = max(self._lives_remaining - 1, 0)
        if self._lives_remaining == 0:
            self._finish(Outcome.FAILED)

    def _finish(self, outcome: Outcome) -> None:
        self._outcome = outcome
        accuracy = self.accuracy() if outcome is Outcome.COMPLETED else None
        self._summary = GameSummary(outcome=outcome, accuracy=accuracy, answers=list(self._answers))
        logger.info(
            "Level '%s' ended: %s (accuracy=%s)",
            self._level.title,
            outcome.value,
            "n/a" if accuracy is None else f"{accuracy:.2f}",
        )
