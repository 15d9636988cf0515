"""Service de la page « Birth Chart Analysis ».

- Valide le formulaire (nom, date, heure, latitude, longitude, fuseau `±HH:MM`).
- Interroge le fournisseur (positions + deux SVG) en parallèle.
- Produit le tableau des positions et les cartes Rasi/Navamsa rendues localement.

Tout échec externe se traduit par un message générique unique et aucune carte n'est rendue.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from astrohuff.app.metrics import CHARTS_RENDERED
from astrohuff.domain.chart_layout import SIGN_NAMES, build_scene, coerce_planets
from astrohuff.domain.entities import ChartType
from astrohuff.domain.errors import AstrologyAPIError, HouseOutOfRange
from astrohuff.domain.tooltips import TooltipLayer
from astrohuff.infra.astrology_api import TIMEZONE_RE, build_request, planet_map
from astrohuff.infra.svg_renderer import render_svg

log = structlog.get_logger(__name__)

GENERIC_ERROR = "Something went wrong"

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^\d{2}:\d{2}$")
LATITUDE_RE = re.compile(r"^-?(?:90|[1-8]?[0-9](?:\.[0-9]{1,6})?)$")
LONGITUDE_RE = re.compile(r"^-?(?:180|1[0-7][0-9](?:\.[0-9]{1,6})?|[1-9]?[0-9](?:\.[0-9]{1,6})?)$")


class ChartUnavailable(Exception):
    """La carte ne peut pas être affichée; `message` est sûr pour l'utilisateur."""

    def __init__(self, message: str = GENERIC_ERROR) -> None:
        self.message = message
        super().__init__(message)


class BirthChartForm(BaseModel):
    """Champs bruts du formulaire (chaînes, comme saisies)."""

    name: str = ""
    date: str = ""
    time: str = ""
    latitude: str = ""
    longitude: str = ""
    timezone: str = ""


def validate_form(form: BirthChartForm) -> dict[str, str]:
    """Retourne les erreurs par champ (vide si le formulaire est valide)."""
    errors: dict[str, str] = {}
    if len(form.name) < 2:
        errors["name"] = "Name must be at least 2 characters"
    if not DATE_RE.match(form.date):
        errors["date"] = "Please enter a valid date"
    if not TIME_RE.match(form.time):
        errors["time"] = "Please enter a valid time (HH:MM)"
    if not LATITUDE_RE.match(form.latitude):
        errors["latitude"] = "Please enter a valid latitude between -90 and 90"
    if not LONGITUDE_RE.match(form.longitude):
        errors["longitude"] = "Please enter a valid longitude between -180 and 180"
    if not TIMEZONE_RE.match(form.timezone):
        errors["timezone"] = "Please enter a valid timezone offset (e.g. +05:30 or -08:00)"
    return errors


@dataclass(frozen=True)
class RenderedChart:
    chart_type: ChartType
    svg: str
    tooltips: dict[str, dict]


def render_chart(mapping: dict[str, Any], chart_type: ChartType) -> RenderedChart:
    """Construit la scène puis le SVG; lève `HouseOutOfRange` sur un degré invalide."""
    scene = build_scene(mapping, chart_type)
    CHARTS_RENDERED.labels(chart_type=chart_type).inc()
    return RenderedChart(
        chart_type=chart_type,
        svg=render_svg(scene),
        tooltips=TooltipLayer(scene).as_dict(),
    )


def planet_rows(mapping: dict[str, Any]) -> list[dict[str, Any]]:
    """Lignes du tableau « Planetary Positions »."""
    return [
        {
            "name": name,
            "sign": SIGN_NAMES[p.current_sign - 1],
            "normDegree": round(p.normDegree, 2),
            "fullDegree": round(p.fullDegree, 2),
            "retrograde": p.isRetro,
        }
        for name, p in coerce_planets(mapping).items()
    ]


def provider_svg(response: Any) -> str:
    """Extrait le SVG (`output`) d'une réponse du fournisseur."""
    if not isinstance(response, dict):
        raise AstrologyAPIError("malformed svg response")
    output = response.get("output", "")
    if not isinstance(output, str):
        raise AstrologyAPIError("malformed svg response")
    return output


class BirthChartService:
    """Orchestration des appels fournisseur et du rendu local."""

    def __init__(self, astro_client, observation_point: str = "topocentric", ayanamsha: str = "lahiri"):
        self.astro = astro_client
        self.observation_point = observation_point
        self.ayanamsha = ayanamsha

    async def generate(self, form: BirthChartForm) -> dict[str, Any]:
        req = build_request(
            date=form.date,
            time=form.time,
            latitude=float(form.latitude),
            longitude=float(form.longitude),
            timezone=form.timezone,
            observation_point=self.observation_point,
            ayanamsha=self.ayanamsha,
        )
        try:
            data = await self.astro.fetch_birth_chart(req)
            planets = planet_map(data.planets)
            charts = {t: render_chart(planets, t) for t in ("birth", "navamsa")}
            rows = planet_rows(planets)
            svgs = {
                "rasi": provider_svg(data.rasi_svg),
                "navamsa": provider_svg(data.navamsa_svg),
            }
        except (AstrologyAPIError, ValidationError) as exc:
            log.error("birth_chart_fetch_failed", error=str(exc))
            raise ChartUnavailable() from exc
        except HouseOutOfRange as exc:
            log.error("birth_chart_layout_defect", planet=exc.planet, house=exc.house)
            raise ChartUnavailable() from exc
        return {
            "name": form.name,
            "request": req.payload(),
            "planets": rows,
            "provider_svg": svgs,
            "charts": {
                t: {"svg": c.svg, "tooltips": c.tooltips} for t, c in charts.items()
            },
        }
