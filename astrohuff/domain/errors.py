"""Taxonomie des erreurs métier.

- Erreurs de validation (récupérables, bloquent l'avancée d'une étape ou d'un formulaire).
- Erreurs d'API externes (réseau / statut non-2xx), converties en message générique.
- Erreurs de persistance (écriture du profil), journalisées sans retry.
"""

from __future__ import annotations


class ValidationFailed(Exception):
    """Erreur de validation portant les messages par champ."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class ExternalAPIError(Exception):
    """Échec d'un appel à un service tiers (réseau ou statut non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class AstrologyAPIError(ExternalAPIError):
    """Échec d'un appel au fournisseur de données astrologiques."""


class PlacesAPIError(ExternalAPIError):
    """Échec d'un appel au service de géocodage / autocomplétion."""


class LLMError(ExternalAPIError):
    """Échec du backend de génération de texte."""


class PersistenceError(Exception):
    """Échec d'écriture dans le dépôt de profils."""


class HouseOutOfRange(ValueError):
    """Maison calculée hors de 1..12: défaut de données à signaler."""

    def __init__(self, planet: str, house: int) -> None:
        self.planet = planet
        self.house = house
        super().__init__(f"house {house} out of range for {planet}")


class AuthError(Exception):
    """Échec d'authentification; `code` est renvoyé tel quel au client."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(code)
