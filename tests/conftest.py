from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence

import pytest

from conjugator.core.models import Challenge, Form, Level, Lives, Mode


class ScriptedRng:
    """Stands in for random.Random; ``choice`` returns scripted forms in order."""

    def __init__(self, forms: Iterable[Form]) -> None:
        self._forms = list(forms)
        self.calls: List[Sequence[Form]] = []

    def choice(self, seq: Sequence[Form]) -> Form:
        self.calls.append(list(seq))
        form = self._forms.pop(0)
        assert form in seq
        return form


@pytest.fixture()
def comer() -> Challenge:
    return Challenge(verb="comer", verb_forms=["como", "comes", "come", "comemos", "coméis", "comen"])


@pytest.fixture()
def beber() -> Challenge:
    return Challenge(verb="beber", verb_forms=["bebo", "bebes", "bebe", "bebemos", "bebéis", "beben"])


@pytest.fixture()
def hablar() -> Challenge:
    """Five forms, no vosotros."""
    return Challenge(verb="hablar", verb_forms=["hablo", "hablas", "habla", "hablamos", "hablan"])


@pytest.fixture()
def make_level(comer: Challenge, beber: Challenge) -> Callable[..., Level]:
    def _make(
        challenges: Optional[Sequence[Challenge]] = None,
        lives: Optional[Lives] = None,
        mode: Optional[Mode] = None,
    ) -> Level:
        return Level(
            title="Nivel de prueba",
            description="comer y beber",
            mode=mode or Mode.random_form(),
            lives=lives or Lives.unlimited(),
            challenges=list(challenges) if challenges is not None else [comer, beber],
        )

    return _make


@pytest.fixture()
def scripted_rng() -> Callable[..., ScriptedRng]:
    def _make(*forms: Form) -> ScriptedRng:
        return ScriptedRng(forms)

    return _make


@pytest.fixture()
def rng(scripted_rng: Callable[..., ScriptedRng]) -> ScriptedRng:
    """Picks yo for the first challenge and tu for the second."""
    return scripted_rng(Form.YO, Form.TU)


@pytest.fixture()
def level(make_level: Callable[..., Level]) -> Level:
    """comer then beber, unlimited lives, random form."""
    return make_level()
