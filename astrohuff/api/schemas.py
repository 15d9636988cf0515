# Schémas Pydantic exposés par l'API (requêtes et réponses).

from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field

from astrohuff.domain.entities import ChartType


class SignupPayload(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    display_name: str | None = None


class LoginPayload(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    onboarding_completed: bool


class ProfileUpdate(BaseModel):
    """Mise à jour du nom d'affichage (page profil)."""

    display_name: str


class OnboardingInput(BaseModel):
    """Champs saisis à l'étape courante (seuls les champs non nuls sont fusionnés)."""

    name: str | None = None
    birthDate: str | None = None
    birthTime: str | None = None
    gender: Literal["male", "female", "other"] | None = None


class PlaceText(BaseModel):
    text: str


class PlaceSelection(BaseModel):
    description: str


class RenderRequest(BaseModel):
    """Rendu local d'un diagramme à partir d'un mapping planètes -> données."""

    planets: dict[str, Any]
    chart_type: ChartType = "birth"


class RenderResponse(BaseModel):
    chart_type: ChartType
    svg: str
    tooltips: dict[str, dict]


class AskPayload(BaseModel):
    question: str


class BirthInfoPayload(BaseModel):
    name: str = Field(..., min_length=2)
    birthDate: str
    birthTime: str
    birthPlace: str
    latitude: float
    longitude: float
