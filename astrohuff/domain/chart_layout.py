"""Mise en page du diagramme védique carré (Rasi / Navamsa).

Fonctions pures: à partir d'un mapping `nom -> PlanetData` et d'un type de carte, calcule la maison
de chaque planète, sa position dans la cellule de la grille, et produit une scène déclarative (liste
de commandes `Rect`/`Line`/`Text`/`Circle`) accompagnée des zones de survol par planète.

Le rendu (SVG) et l'interaction (infobulles) consomment cette scène sans la modifier.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from astrohuff.domain.entities import ChartType, PlanetData
from astrohuff.domain.errors import HouseOutOfRange

SIZE = 400
BOX = SIZE / 3
MAX_PER_ROW = 3
PLANET_RADIUS = 12
NAVAMSA_SPAN = 30 / 9

STROKE = "#444"
DEFAULT_FILL = "#fff"
SIGN_FILL = "#666"
PLANET_BG = "#1a1a1a"
RETRO_FILL = "#ff4444"
RETRO_GLYPH = "℞"

SENTINEL_KEYS = frozenset({"debug", "13"})

ZODIAC_GLYPHS = ("♈", "♉", "♊", "♋", "♌", "♍", "♎", "♏", "♐", "♑", "♒", "♓")
SIGN_NAMES = (
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
)

PLANET_GLYPHS = {
    "Sun": "☉",
    "Moon": "☽",
    "Mars": "♂",
    "Mercury": "☿",
    "Jupiter": "♃",
    "Venus": "♀",
    "Saturn": "♄",
    "Rahu": "☊",
    "Ketu": "☋",
}

PLANET_COLORS = {
    "Sun": "#FFA500",
    "Moon": "#FFFFFF",
    "Mars": "#FF4444",
    "Mercury": "#00FF00",
    "Jupiter": "#FFFF00",
    "Venus": "#FFC0CB",
    "Saturn": "#4444FF",
    "Rahu": "#800080",
    "Ketu": "#800080",
}

# (maison, ligne, colonne): parcours fixe des 12 maisons, identique pour Rasi et Navamsa
HOUSE_CELLS: tuple[tuple[int, int, int], ...] = (
    (1, 0, 0),
    (2, 1, 0),
    (3, 2, 0),
    (4, 2, 1),
    (5, 2, 2),
    (6, 1, 2),
    (7, 0, 2),
    (8, 0, 1),
    (9, 0, 0),
    (10, 1, 0),
    (11, 2, 0),
    (12, 2, 1),
)
_CELL_BY_HOUSE = {house: (row, col) for house, row, col in HOUSE_CELLS}


# ---- Commandes de dessin ----


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: str = "none"
    stroke: str = STROKE
    stroke_width: float = 3


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = STROKE
    stroke_width: float = 2


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    font_size: int
    fill: str = DEFAULT_FILL
    font_weight: str | None = None
    baseline: str | None = None
    planet: str | None = None


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: str = PLANET_BG
    stroke: str = STROKE
    stroke_width: float = 2
    planet: str | None = None


DrawCommand = Rect | Line | Text | Circle


@dataclass(frozen=True)
class PlanetPlacement:
    """Position calculée d'une planète; `index_in_house` est son rang dans la cellule."""

    name: str
    house: int
    index_in_house: int
    row_index: int
    col_index: int
    x: float
    y: float
    retrograde: bool
    color: str
    glyph: str


@dataclass(frozen=True)
class HitRegion:
    """Zone de survol d'une planète (coordonnées du diagramme)."""

    planet: str
    x: float
    y: float
    radius: float
    title: str
    lines: tuple[str, ...]

    def contains(self, x: float, y: float) -> bool:
        return math.hypot(x - self.x, y - self.y) <= self.radius


@dataclass(frozen=True)
class ChartScene:
    """Scène complète: commandes de dessin + zones de survol."""

    chart_type: ChartType
    size: int
    commands: tuple[DrawCommand, ...]
    regions: tuple[HitRegion, ...]
    placements: tuple[PlanetPlacement, ...] = field(default=())


# ---- Maisons ----


def house_for(name: str, planet: PlanetData, chart_type: ChartType) -> int:
    """Calcule la maison (1..12) d'une planète selon le type de carte.

    - birth: `floor(fullDegree / 30) + 1`
    - navamsa: `floor((fullDegree mod 30) / (30/9)) + 1`

    Lève `HouseOutOfRange` si le résultat sort de 1..12 (degré invalide côté fournisseur).
    """
    degree = planet.fullDegree
    if not math.isfinite(degree):
        raise HouseOutOfRange(name, 0)
    if chart_type == "navamsa":
        house = math.floor((degree % 30) / NAVAMSA_SPAN) + 1
    else:
        house = math.floor(degree / 30) + 1
    if not 0 <= degree < 360 or not 1 <= house <= 12:
        raise HouseOutOfRange(name, house)
    return house


def filter_planets(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Écarte les clés sentinelles (`debug`, `13`) en conservant l'ordre."""
    return {name: data for name, data in mapping.items() if name not in SENTINEL_KEYS}


def coerce_planets(mapping: Mapping[str, Any]) -> dict[str, PlanetData]:
    """Filtre les clés sentinelles et valide chaque entrée."""
    planets: dict[str, PlanetData] = {}
    for name, data in filter_planets(mapping).items():
        planets[name] = data if isinstance(data, PlanetData) else PlanetData.model_validate(data)
    return planets


# ---- Disposition ----


def layout_planets(
    mapping: Mapping[str, Any], chart_type: ChartType
) -> list[PlanetPlacement]:
    """Place les planètes dans leurs cellules.

    Les planètes d'une même cellule (les maisons 1/9, 2/10, 3/11 et 4/12 partagent la leur) sont
    réparties ensemble en sous-lignes d'au plus `MAX_PER_ROW`, centrées horizontalement et
    empilées verticalement, dans l'ordre d'itération de l'entrée
    (gauche à droite, puis haut en bas). Une maison sans cellule est ignorée.
    """
    planets = coerce_planets(mapping)
    by_cell: dict[tuple[int, int], list[tuple[str, int, PlanetData]]] = {}
    for name, data in planets.items():
        house = house_for(name, data, chart_type)
        cell = _CELL_BY_HOUSE.get(house)
        if cell is None:
            continue
        by_cell.setdefault(cell, []).append((name, house, data))

    spacing = min(30, BOX / (MAX_PER_ROW + 1))
    row_spacing = min(35, BOX / 4)
    placements: list[PlanetPlacement] = []
    for (row, col), members in by_cell.items():
        left, top = col * BOX, row * BOX
        base_x = left + BOX / 2
        base_y = top + BOX / 2
        total = len(members)
        rows = math.ceil(total / MAX_PER_ROW)
        for index, (name, house, data) in enumerate(members):
            row_index, col_index = divmod(index, MAX_PER_ROW)
            in_row = min(MAX_PER_ROW, total - row_index * MAX_PER_ROW)
            start_x = base_x - (in_row * spacing) / 2 + spacing / 2
            x = start_x + col_index * spacing
            y = base_y + (row_index - (rows - 1) / 2) * row_spacing
            placements.append(
                PlanetPlacement(
                    name=name,
                    house=house,
                    index_in_house=index,
                    row_index=row_index,
                    col_index=col_index,
                    x=round(x, 3),
                    y=round(y, 3),
                    retrograde=data.isRetro,
                    color=PLANET_COLORS.get(name, STROKE),
                    glyph=PLANET_GLYPHS.get(name, name),
                )
            )
    return placements


def tooltip_lines(planet: PlanetData) -> tuple[str, ...]:
    """Lignes d'infobulle: signe, degrés, nakshatra/seigneurs/pada/vitesse, mouvement."""
    lines = [
        f"Sign: {ZODIAC_GLYPHS[planet.current_sign - 1]}",
        f"Degree: {planet.normDegree:.2f}°",
        f"Full Degree: {planet.fullDegree:.2f}°",
    ]
    if planet.nakshatra:
        lines.append(f"Nakshatra: {planet.nakshatra}")
    if planet.nakshatraLord:
        lines.append(f"Lord: {planet.nakshatraLord}")
    if planet.nakshatraPada:
        lines.append(f"Pada: {planet.nakshatraPada}")
    if planet.signLord:
        lines.append(f"Sign Lord: {planet.signLord}")
    if planet.speed:
        lines.append(f"Speed: {planet.speed:.4f}")
    lines.append("Retrograde" if planet.isRetro else "Direct")
    return tuple(lines)


def _frame() -> Iterable[DrawCommand]:
    yield Rect(0, 0, SIZE, SIZE)
    yield Line(0, BOX, SIZE, BOX)
    yield Line(0, 2 * BOX, SIZE, 2 * BOX)
    yield Line(BOX, 0, BOX, SIZE)
    yield Line(2 * BOX, 0, 2 * BOX, SIZE)
    yield Line(0, 0, SIZE, SIZE)
    yield Line(SIZE, 0, 0, SIZE)


def _house_labels() -> Iterable[DrawCommand]:
    for house, row, col in HOUSE_CELLS:
        x = col * BOX + BOX / 2
        y = row * BOX + 30
        yield Text(x, y, str(house), font_size=18, font_weight="bold")
        yield Text(x, y + 35, ZODIAC_GLYPHS[(house - 1) % 12], font_size=24, fill=SIGN_FILL)


def build_scene(mapping: Mapping[str, Any], chart_type: ChartType) -> ChartScene:
    """Construit la scène complète (cadre, grille, diagonales, libellés, planètes)."""
    planets = coerce_planets(mapping)
    placements = layout_planets(planets, chart_type)
    commands: list[DrawCommand] = [*_frame(), *_house_labels()]
    regions: list[HitRegion] = []
    for p in placements:
        commands.append(Circle(p.x, p.y, PLANET_RADIUS, stroke=p.color, planet=p.name))
        fill = PLANET_COLORS.get(p.name, DEFAULT_FILL)
        commands.append(
            Text(p.x, p.y, p.glyph, font_size=16, fill=fill, baseline="middle", planet=p.name)
        )
        if p.retrograde:
            commands.append(
                Text(
                    p.x,
                    p.y + 18,
                    RETRO_GLYPH,
                    font_size=12,
                    fill=RETRO_FILL,
                    font_weight="bold",
                    planet=p.name,
                )
            )
        regions.append(
            HitRegion(
                planet=p.name,
                x=p.x,
                y=p.y,
                radius=PLANET_RADIUS,
                title=p.name,
                lines=tooltip_lines(planets[p.name]),
            )
        )
    return ChartScene(
        chart_type=chart_type,
        size=SIZE,
        commands=tuple(commands),
        regions=tuple(regions),
        placements=tuple(placements),
    )
