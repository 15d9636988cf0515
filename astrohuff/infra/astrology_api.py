"""Client du fournisseur de données astrologiques (positions planétaires + SVG).

Trois endpoints sont utilisés pour une carte de naissance:
- `/planets`: positions planétaires
- `/horoscope-chart-svg-code`: carte Rasi (D1) en SVG
- `/navamsa-chart-svg-code`: carte Navamsa (D9) en SVG

Les deux SVG du fournisseur servent de repli visuel au rendu local.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from astrohuff.app.metrics import ASTRO_API_CALLS
from astrohuff.core.http_constants import HTTP_SUCCESS_MAX, HTTP_SUCCESS_MIN
from astrohuff.domain.chart_layout import filter_planets
from astrohuff.domain.errors import AstrologyAPIError

log = structlog.get_logger(__name__)

PLANETS_PATH = "/planets"
RASI_SVG_PATH = "/horoscope-chart-svg-code"
NAVAMSA_SVG_PATH = "/navamsa-chart-svg-code"

TIMEZONE_RE = re.compile(r"^([+-])(0[0-9]|1[0-2]):([0-5][0-9])$")


def parse_timezone(offset: str) -> float:
    """Convertit un décalage signé `±HH:MM` en heures décimales (`+05:30` -> 5.5).

    Le signe s'applique à l'ensemble du décalage (`-03:30` -> -3.5).
    """
    m = TIMEZONE_RE.match((offset or "").strip())
    if not m:
        raise ValueError(f"invalid timezone offset: {offset!r}")
    sign, hours, minutes = m.groups()
    value = int(hours) + int(minutes) / 60
    return -value if sign == "-" else value


@dataclass(frozen=True)
class ChartRequest:
    """Paramètres envoyés au fournisseur pour une carte de naissance."""

    year: int
    month: int
    date: int
    hours: int
    minutes: int
    latitude: float
    longitude: float
    timezone: float
    seconds: int = 0
    observation_point: str = "topocentric"
    ayanamsha: str = "lahiri"

    def payload(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "date": self.date,
            "hours": self.hours,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timezone": self.timezone,
            "settings": {
                "observation_point": self.observation_point,
                "ayanamsha": self.ayanamsha,
            },
        }


def build_request(
    date: str,
    time: str,
    latitude: float,
    longitude: float,
    timezone: str,
    observation_point: str = "topocentric",
    ayanamsha: str = "lahiri",
) -> ChartRequest:
    """Construit une `ChartRequest` à partir des champs du formulaire (date, heure, tz)."""
    year, month, day = (int(part) for part in date.split("-"))
    hours, minutes = (int(part) for part in time.split(":"))
    return ChartRequest(
        year=year,
        month=month,
        date=day,
        hours=hours,
        minutes=minutes,
        latitude=float(latitude),
        longitude=float(longitude),
        timezone=parse_timezone(timezone),
        observation_point=observation_point,
        ayanamsha=ayanamsha,
    )


@dataclass(frozen=True)
class BirthChartData:
    """Réponses brutes des trois appels (planètes + deux SVG)."""

    planets: dict[str, Any]
    rasi_svg: dict[str, Any]
    navamsa_svg: dict[str, Any]


def planet_map(response: dict[str, Any]) -> dict[str, Any]:
    """Extrait le mapping `nom -> données` de la réponse `/planets`.

    Le fournisseur renvoie `output = [mapping indexé, mapping par nom]`; on préfère le second et
    on écarte les clés sentinelles.
    """
    if not isinstance(response, dict):
        raise AstrologyAPIError("malformed planets response")
    output = response.get("output")
    if isinstance(output, list) and output:
        raw = output[1] if len(output) > 1 else output[0]
    elif isinstance(output, dict):
        raw = output
    else:
        raise AstrologyAPIError("malformed planets response")
    if not isinstance(raw, dict):
        raise AstrologyAPIError("malformed planets response")
    return {k: v for k, v in filter_planets(raw).items() if isinstance(v, dict)}


class AstrologyAPIClient:
    """Client asynchrone (httpx) du fournisseur, authentifié par `x-api-key`."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        language: str = "en",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.language = language
        self._headers = {"Content-Type": "application/json", "x-api-key": api_key or ""}
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _post(self, client: httpx.AsyncClient, path: str, body: dict) -> dict[str, Any]:
        endpoint = path.strip("/")
        try:
            resp = await client.post(path, json=body)
        except httpx.HTTPError as exc:
            ASTRO_API_CALLS.labels(endpoint=endpoint, outcome="network_error").inc()
            log.error("astro_api_network_error", endpoint=endpoint, error=type(exc).__name__)
            raise AstrologyAPIError(f"network error on {endpoint}") from exc
        if not HTTP_SUCCESS_MIN <= resp.status_code < HTTP_SUCCESS_MAX:
            ASTRO_API_CALLS.labels(endpoint=endpoint, outcome="http_error").inc()
            log.error("astro_api_http_error", endpoint=endpoint, status=resp.status_code)
            raise AstrologyAPIError(f"{endpoint} responded {resp.status_code}", resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            ASTRO_API_CALLS.labels(endpoint=endpoint, outcome="bad_payload").inc()
            raise AstrologyAPIError(f"invalid JSON from {endpoint}") from exc
        if not isinstance(data, dict):
            ASTRO_API_CALLS.labels(endpoint=endpoint, outcome="bad_payload").inc()
            log.error("astro_api_bad_payload", endpoint=endpoint, payload_type=type(data).__name__)
            raise AstrologyAPIError(f"bad_payload from {endpoint}")
        ASTRO_API_CALLS.labels(endpoint=endpoint, outcome="ok").inc()
        return data

    async def planets(self, req: ChartRequest) -> dict[str, Any]:
        async with self._client() as client:
            return await self._post(client, PLANETS_PATH, req.payload())

    async def rasi_svg(self, req: ChartRequest) -> dict[str, Any]:
        async with self._client() as client:
            return await self._post(
                client, RASI_SVG_PATH, {**req.payload(), "language": self.language}
            )

    async def navamsa_svg(self, req: ChartRequest) -> dict[str, Any]:
        async with self._client() as client:
            return await self._post(
                client, NAVAMSA_SVG_PATH, {**req.payload(), "language": self.language}
            )

    async def fetch_birth_chart(self, req: ChartRequest) -> BirthChartData:
        """Émet les trois appels en parallèle et les attend conjointement.

        Un échec sur l'un quelconque des appels fait échouer l'ensemble (`AstrologyAPIError`); les
        appels encore en vol sont annulés avant la fermeture du client.
        """
        body = req.payload()
        svg_body = {**body, "language": self.language}
        async with self._client() as client:
            tasks = [
                asyncio.ensure_future(self._post(client, PLANETS_PATH, body)),
                asyncio.ensure_future(self._post(client, RASI_SVG_PATH, svg_body)),
                asyncio.ensure_future(self._post(client, NAVAMSA_SVG_PATH, svg_body)),
            ]
            try:
                planets, rasi, navamsa = await asyncio.gather(*tasks)
            except AstrologyAPIError:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        return BirthChartData(planets=planets, rasi_svg=rasi, navamsa_svg=navamsa)
