"""
Entités du domaine métier.

Ce module définit les modèles de données principaux utilisés dans l'application astrologique:
positions planétaires (telles que renvoyées par le fournisseur), profil utilisateur, instantané de
naissance de l'aperçu IA et messages de conversation.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ChartType = Literal["birth", "navamsa"]
Gender = Literal["male", "female", "other"]
Role = Literal["user", "assistant"]


def is_retrograde(value) -> bool:
    """Normalise le drapeau `isRetro` (chaîne `"true"`/`"false"` du fournisseur ou booléen)."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


class PlanetData(BaseModel):
    """Position d'un corps céleste, reprise telle quelle de la réponse du fournisseur."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    fullDegree: float
    normDegree: float
    isRetro: bool = False
    current_sign: int = Field(..., ge=1, le=12)
    speed: float | None = None
    nakshatra: str | None = None
    nakshatraLord: str | None = None
    nakshatraPada: int | None = None
    signLord: str | None = None

    @field_validator("isRetro", mode="before")
    @classmethod
    def _parse_retro(cls, value):
        return is_retrograde(value)


class User(BaseModel):
    """Identité authentifiée (sans profil)."""

    id: str
    email: str
    display_name: str | None = None


class UserProfile(BaseModel):
    """Profil utilisateur créé à la fin de l'onboarding."""

    id: str
    name: str = ""
    birthDate: str = ""
    birthTime: str = ""
    birthPlace: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    gender: Gender = "other"
    onboardingCompleted: bool = False
    createdAt: str
    updatedAt: str


class BirthInfo(BaseModel):
    """Instantané des données de naissance saisi dans l'aperçu IA."""

    name: str
    birthDate: str
    birthTime: str
    birthPlace: str
    latitude: float
    longitude: float


class ChatMessage(BaseModel):
    """Message de la conversation (rôle + contenu brut + rendu HTML)."""

    role: Role
    content: str
    html: str = ""


class PlacePrediction(BaseModel):
    """Suggestion d'autocomplétion de lieu."""

    place_id: str
    description: str
