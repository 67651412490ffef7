"""Turn a challenge into the multiple-choice set for one round."""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from conjugator.core.errors import FormNotInChallengeError, MalformedChallengeError
from conjugator.core.models import Challenge, Choice, Form, Level, Mode

SIX_FORMS: Tuple[Form, ...] = tuple(Form)
FIVE_FORMS: Tuple[Form, ...] = tuple(form for form in Form if form is not Form.VOSOTROS)

_FORMS_BY_COUNT = {
    len(SIX_FORMS): SIX_FORMS,
    len(FIVE_FORMS): FIVE_FORMS,
}


def get_choices(challenge: Challenge) -> List[Choice]:
    """Return one fresh choice per grammatical person, in canonical order.

    Five-form challenges are the conjugations without ``vosotros``. Any other
    length raises :class:`MalformedChallengeError`.
    """
    forms = _FORMS_BY_COUNT.get(len(challenge.verb_forms))
    if forms is None:
        raise MalformedChallengeError(challenge)
    return [Choice(form=form, text=text) for form, text in zip(forms, challenge.verb_forms)]


def pick_correct_form(
    mode: Mode,
    challenge: Challenge,
    choices: List[Choice],
    rng: Optional[random.Random] = None,
) -> Form:
    """Pick the form the user has to find among ``choices``."""
    available = [choice.form for choice in choices]
    if mode.is_random:
        return (rng or random).choice(available)
    if mode.form not in available:
        raise FormNotInChallengeError(mode.form, challenge)
    return mode.form


def build_round(
    level: Level,
    challenge: Challenge,
    rng: Optional[random.Random] = None,
) -> Tuple[List[Choice], Form]:
    choices = get_choices(challenge)
    return choices, pick_correct_form(level.mode, challenge, choices, rng)
