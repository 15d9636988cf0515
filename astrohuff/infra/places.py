"""Client de géocodage / autocomplétion de lieux (Google Places).

- `autocomplete`: suggestions de villes pour une saisie libre; toute erreur se dégrade en liste vide.
- `geocode`: coordonnées d'une suggestion choisie; les erreurs remontent (`PlacesAPIError`) afin
  que l'appelant affiche un message local à l'étape.
"""

from __future__ import annotations

import httpx
import structlog

from astrohuff.app.metrics import PLACES_API_CALLS
from astrohuff.domain.entities import PlacePrediction
from astrohuff.domain.errors import PlacesAPIError

log = structlog.get_logger(__name__)


class PlacesClient:
    """Client asynchrone des APIs Places Autocomplete et Geocoding."""

    def __init__(
        self,
        api_key: str | None,
        autocomplete_url: str,
        geocode_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or ""
        self.autocomplete_url = autocomplete_url
        self.geocode_url = geocode_url
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def autocomplete(self, text: str | None) -> list[PlacePrediction]:
        """Retourne les suggestions (place_id, description) pour `text`, ou `[]`."""
        if not text:
            return []
        params = {"input": text, "types": "(cities)", "key": self.api_key}
        try:
            async with self._client() as client:
                resp = await client.get(self.autocomplete_url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            PLACES_API_CALLS.labels(operation="autocomplete", outcome="error").inc()
            log.error("places_autocomplete_error", error=type(exc).__name__)
            return []

        status = data.get("status")
        if status == "OK" and isinstance(data.get("predictions"), list):
            PLACES_API_CALLS.labels(operation="autocomplete", outcome="ok").inc()
            return [
                PlacePrediction(place_id=p["place_id"], description=p["description"])
                for p in data["predictions"]
                if p.get("place_id") and p.get("description")
            ]
        if status == "ZERO_RESULTS":
            PLACES_API_CALLS.labels(operation="autocomplete", outcome="empty").inc()
            return []
        PLACES_API_CALLS.labels(operation="autocomplete", outcome="provider_error").inc()
        log.error("places_autocomplete_status", status=status, message=data.get("error_message"))
        return []

    async def geocode(self, address: str) -> tuple[float, float]:
        """Retourne `(lat, lng)` du premier résultat pour `address`."""
        params = {"address": address, "key": self.api_key}
        try:
            async with self._client() as client:
                resp = await client.get(self.geocode_url, params=params)
            resp.raise_for_status()
            data = resp.json()
            location = data["results"][0]["geometry"]["location"]
            lat, lng = float(location["lat"]), float(location["lng"])
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as exc:
            PLACES_API_CALLS.labels(operation="geocode", outcome="error").inc()
            log.error("places_geocode_error", error=type(exc).__name__)
            raise PlacesAPIError("geocoding failed") from exc
        PLACES_API_CALLS.labels(operation="geocode", outcome="ok").inc()
        return lat, lng
