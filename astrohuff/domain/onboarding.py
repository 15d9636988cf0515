"""Assistant d'onboarding en plusieurs étapes (machine à états linéaire).

Étapes: `name` -> `birth-date-time` -> `birth-place` -> `gender`. "Continuer" n'avance que si la
validation de l'étape courante passe; sinon des erreurs par champ sont posées et l'utilisateur reste
sur l'étape. "Précédent" recule sans validation. La dernière étape valide déclenche la soumission:
le profil est créé ou mis à jour avec `onboardingCompleted=True`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog
from pydantic import BaseModel

from astrohuff.app.metrics import ONBOARDING_TRANSITIONS
from astrohuff.domain.errors import PersistenceError, PlacesAPIError
from astrohuff.domain.profiles import ProfileService

log = structlog.get_logger(__name__)

GENDERS = ("male", "female", "other")
EDITABLE_FIELDS = ("name", "birthDate", "birthTime", "gender")
DASHBOARD_PATH = "/dashboard"

NAME_ERROR = "Please enter your name (at least 2 characters)"
DATE_ERROR = "Please select your birth date"
TIME_ERROR = "Please enter your birth time"
PLACE_ERROR = "Please select a valid birth place from the suggestions"
PLACE_SELECTION_ERROR = "Please select a place from the suggestions"
GEOCODE_ERROR = "Failed to get location details. Please try again."
GENDER_ERROR = "Please select your gender"


class OnboardingValues(BaseModel):
    name: str = ""
    birthDate: str = ""
    birthTime: str = ""
    birthPlace: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    gender: str = ""


def _validate_name(v: OnboardingValues) -> dict[str, str]:
    return {} if len(v.name.strip()) >= 2 else {"name": NAME_ERROR}


def _validate_birth(v: OnboardingValues) -> dict[str, str]:
    if not v.birthDate:
        return {"birthDate": DATE_ERROR}
    if not v.birthTime:
        return {"birthTime": TIME_ERROR}
    return {}


def _validate_place(v: OnboardingValues) -> dict[str, str]:
    ok = len(v.birthPlace.strip()) >= 2 and v.latitude != 0 and v.longitude != 0
    return {} if ok else {"birthPlace": PLACE_ERROR}


def _validate_gender(v: OnboardingValues) -> dict[str, str]:
    return {} if v.gender in GENDERS else {"gender": GENDER_ERROR}


@dataclass(frozen=True)
class Step:
    id: str
    title: str
    description: str
    fields: tuple[str, ...]
    validate: Callable[[OnboardingValues], dict[str, str]]


STEPS: tuple[Step, ...] = (
    Step(
        "name",
        "What's your name?",
        "Enter your full name as you'd like to be addressed",
        ("name",),
        _validate_name,
    ),
    Step(
        "birth-date-time",
        "When were you born?",
        "Your birth date and time are crucial for accurate readings",
        ("birthDate", "birthTime"),
        _validate_birth,
    ),
    Step(
        "birth-place",
        "Where were you born?",
        "Your birth place helps us calculate your exact natal chart",
        ("birthPlace",),
        _validate_place,
    ),
    Step(
        "gender",
        "What's your gender?",
        "This helps us provide more personalized readings",
        ("gender",),
        _validate_gender,
    ),
)


@dataclass
class OnboardingWizard:
    """État de l'assistant pour un utilisateur."""

    user_id: str
    profiles: ProfileService
    places: object
    step_index: int = 0
    values: OnboardingValues = field(default_factory=OnboardingValues)
    errors: dict[str, str] = field(default_factory=dict)
    search_error: str | None = None
    selected_place: str | None = None
    submitting: bool = False
    submit_failed: bool = False
    redirect: str | None = None

    @property
    def step(self) -> Step:
        return STEPS[self.step_index]

    @property
    def is_last(self) -> bool:
        return self.step_index == len(STEPS) - 1

    def update(self, data: dict) -> None:
        """Fusionne les champs saisis (le lieu ne passe que par `type_place`/`select_place`)."""
        changes = {k: v for k, v in data.items() if k in EDITABLE_FIELDS and v is not None}
        if changes:
            self.values = self.values.model_copy(update=changes)

    def next(self, data: dict | None = None) -> bool:
        """Valide l'étape courante puis avance (ou soumet sur la dernière étape).

        Retourne True si l'étape a été franchie (ou la soumission réussie).
        """
        if data:
            self.update(data)
        step = self.step
        errors = step.validate(self.values)
        if errors:
            self.errors = errors
            ONBOARDING_TRANSITIONS.labels(step=step.id, result="invalid").inc()
            return False
        if "birthPlace" in step.fields and not self.selected_place:
            self.search_error = PLACE_SELECTION_ERROR
            ONBOARDING_TRANSITIONS.labels(step=step.id, result="invalid").inc()
            return False
        self.errors = {}
        if not self.is_last:
            self.step_index += 1
            ONBOARDING_TRANSITIONS.labels(step=step.id, result="advanced").inc()
            return True
        return self.submit()

    def previous(self) -> None:
        if self.step_index > 0:
            self.step_index -= 1
        self.errors = {}

    def type_place(self, text: str) -> None:
        """Saisie libre du lieu: invalide la sélection et les coordonnées."""
        self.values = self.values.model_copy(update={"birthPlace": text})
        if text != self.selected_place:
            self.selected_place = None
            self.values = self.values.model_copy(update={"latitude": 0.0, "longitude": 0.0})
            self.errors.pop("birthPlace", None)
            self.search_error = None

    async def select_place(self, description: str) -> bool:
        """Géocode la suggestion choisie; un échec pose une erreur locale sans perdre la saisie."""
        try:
            lat, lng = await self.places.geocode(description)
        except PlacesAPIError:
            self.search_error = GEOCODE_ERROR
            return False
        self.values = self.values.model_copy(
            update={"birthPlace": description, "latitude": lat, "longitude": lng}
        )
        self.selected_place = description
        self.search_error = None
        return True

    def submit(self) -> bool:
        """Persiste le profil; en cas d'échec, reste sur la dernière étape (pas de retry)."""
        self.submitting = True
        try:
            self.profiles.complete_onboarding(self.user_id, self.values.model_dump())
        except PersistenceError:
            log.error("onboarding_submit_failed", user_id=self.user_id)
            self.submit_failed = True
            ONBOARDING_TRANSITIONS.labels(step=self.step.id, result="submit_failed").inc()
            return False
        finally:
            self.submitting = False
        self.submit_failed = False
        self.redirect = DASHBOARD_PATH
        ONBOARDING_TRANSITIONS.labels(step=self.step.id, result="completed").inc()
        return True

    def snapshot(self) -> dict:
        step = self.step
        return {
            "step": step.id,
            "step_index": self.step_index,
            "title": step.title,
            "description": step.description,
            "fields": list(step.fields),
            "values": self.values.model_dump(),
            "errors": dict(self.errors),
            "search_error": self.search_error,
            "selected_place": self.selected_place,
            "submit_failed": self.submit_failed,
            "redirect": self.redirect,
        }


class OnboardingStore:
    """Assistants en cours, par utilisateur (mémoire du processus)."""

    def __init__(self, profiles: ProfileService, places) -> None:
        self.profiles = profiles
        self.places = places
        self._wizards: dict[str, OnboardingWizard] = {}

    def get(self, user_id: str) -> OnboardingWizard:
        wizard = self._wizards.get(user_id)
        if wizard is None:
            wizard = OnboardingWizard(user_id=user_id, profiles=self.profiles, places=self.places)
            self._wizards[user_id] = wizard
        return wizard

    def discard(self, user_id: str) -> None:
        self._wizards.pop(user_id, None)
