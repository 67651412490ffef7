from __future__ import annotations

from conjugator.core.models import Challenge, Form


class DataError(Exception):
    """Course content that cannot be turned into a playable round."""


class MalformedChallengeError(DataError):
    def __init__(self, challenge: Challenge) -> None:
        self.challenge = challenge
        super().__init__(
            f"Challenge '{challenge.verb}' has {len(challenge.verb_forms)} forms; expected 5 or 6"
        )


class FormNotInChallengeError(DataError):
    def __init__(self, form: Form, challenge: Challenge) -> None:
        self.form = form
        self.challenge = challenge
        super().__init__(f"Challenge '{challenge.verb}' has no '{form.value}' form")


class SessionStateError(Exception):
    """Raised when a session call is not allowed in the current state."""
