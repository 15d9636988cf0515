"""Tests de la mise en page du diagramme (maisons, disposition, scène)."""

from __future__ import annotations

import math
from itertools import combinations

import pytest

from astrohuff.domain.chart_layout import (
    BOX,
    HOUSE_CELLS,
    MAX_PER_ROW,
    PLANET_RADIUS,
    RETRO_GLYPH,
    STROKE,
    Circle,
    Text,
    build_scene,
    coerce_planets,
    filter_planets,
    house_for,
    layout_planets,
    tooltip_lines,
)
from astrohuff.domain.entities import PlanetData, is_retrograde
from astrohuff.domain.errors import HouseOutOfRange
from astrohuff.domain.tooltips import TooltipLayer
from tests.fakes import PLANETS, planet


def _p(full: float) -> PlanetData:
    return PlanetData.model_validate(planet(full))


@pytest.mark.parametrize(
    ("degree", "house"),
    [(0.0, 1), (29.99, 1), (30.0, 2), (45.2, 2), (200.3, 7), (359.99, 12)],
)
def test_birth_house_from_full_degree(degree, house):
    assert house_for("X", _p(degree), "birth") == house


@pytest.mark.parametrize(("degree", "house"), [(0.0, 1), (31.0, 1), (45.2, 5), (29.9, 9)])
def test_navamsa_house_from_degree_within_sign(degree, house):
    assert house_for("X", _p(degree), "navamsa") == house


@pytest.mark.parametrize("degree", [360.0, 400.0, -1.0, float("nan")])
def test_degree_outside_zodiac_raises(degree):
    data = PlanetData(fullDegree=degree, normDegree=0, current_sign=1)
    with pytest.raises(HouseOutOfRange) as exc:
        house_for("Mars", data, "birth")
    assert exc.value.planet == "Mars"


def test_every_house_has_a_cell():
    assert sorted(h for h, _, _ in HOUSE_CELLS) == list(range(1, 13))


def test_sentinel_keys_are_dropped():
    mapping = {**PLANETS, "debug": "x", "13": {"name": "ayanamsa"}}
    assert "debug" not in coerce_planets(mapping)
    names = {p.name for p in layout_planets(mapping, "birth")}
    assert names == set(PLANETS)


def test_house_with_four_planets_wraps_to_second_row():
    placements = [p for p in layout_planets(PLANETS, "birth") if p.house == 2]
    assert [p.name for p in placements] == ["Sun", "Mercury", "Jupiter", "Venus"]
    assert [(p.row_index, p.col_index) for p in placements] == [(0, 0), (0, 1), (0, 2), (1, 0)]

    sun, mercury, jupiter, venus = placements
    assert sun.x == pytest.approx(BOX / 2 - 30, abs=1e-3)
    assert mercury.x == pytest.approx(BOX / 2, abs=1e-3)
    assert jupiter.x == pytest.approx(BOX / 2 + 30, abs=1e-3)
    # ligne unique du second rang: centrée
    assert venus.x == pytest.approx(BOX / 2, abs=1e-3)
    # rangs centrés autour du centre de la cellule
    assert sun.y == pytest.approx(1.5 * BOX - BOX / 8, abs=1e-3)
    assert venus.y == pytest.approx(1.5 * BOX + BOX / 8, abs=1e-3)


def test_single_planet_sits_at_cell_center():
    (mars,) = [p for p in layout_planets(PLANETS, "birth") if p.name == "Mars"]
    assert mars.house == 7
    # maison 7 -> ligne 0, colonne 2
    assert mars.x == pytest.approx(2.5 * BOX, abs=1e-3)
    assert mars.y == pytest.approx(0.5 * BOX, abs=1e-3)


def test_houses_sharing_a_cell_share_one_row():
    # Moon (maison 4) et Rahu (maison 12) occupent la même cellule (ligne 2, colonne 1)
    moon, rahu = [p for p in layout_planets(PLANETS, "birth") if p.name in {"Moon", "Rahu"}]
    assert (moon.house, rahu.house) == (4, 12)
    assert [(moon.row_index, moon.col_index), (rahu.row_index, rahu.col_index)] == [(0, 0), (0, 1)]
    assert moon.x == pytest.approx(1.5 * BOX - 15, abs=1e-3)
    assert rahu.x == pytest.approx(1.5 * BOX + 15, abs=1e-3)
    assert moon.y == rahu.y == pytest.approx(2.5 * BOX, abs=1e-3)


def test_crowded_house_never_overlaps():
    crowded = {f"P{i}": planet(60.0 + i) for i in range(8)}
    placements = layout_planets(crowded, "birth")
    rows: dict[int, int] = {}
    for p in placements:
        rows[p.row_index] = rows.get(p.row_index, 0) + 1
    assert max(rows.values()) <= MAX_PER_ROW
    for a, b in combinations(placements, 2):
        assert math.hypot(a.x - b.x, a.y - b.y) >= 2 * PLANET_RADIUS


def test_planets_in_shared_cell_never_overlap():
    placements = layout_planets({"Sun": planet(10.0), "Moon": planet(250.0)}, "birth")
    sun, moon = placements
    assert (sun.house, moon.house) == (1, 9)
    assert math.hypot(sun.x - moon.x, sun.y - moon.y) >= 2 * PLANET_RADIUS

    layer = TooltipLayer(build_scene({"Sun": planet(10.0), "Moon": planet(250.0)}, "birth"))
    assert layer.hit_test(moon.x, moon.y) == "Moon"
    assert layer.hit_test(sun.x, sun.y) == "Sun"


def test_layout_is_deterministic():
    assert layout_planets(PLANETS, "birth") == layout_planets(dict(PLANETS), "birth")
    assert build_scene(PLANETS, "navamsa") == build_scene(PLANETS, "navamsa")


def test_unknown_planet_uses_name_and_default_color():
    (uranus,) = layout_planets({"Uranus": planet(10.0)}, "birth")
    assert uranus.glyph == "Uranus"
    assert uranus.color == STROKE


def test_tooltip_lines_include_nakshatra_and_motion():
    lines = tooltip_lines(coerce_planets(PLANETS)["Sun"])
    assert lines[0] == "Sign: ♉"
    assert "Degree: 15.20°" in lines
    assert "Full Degree: 45.20°" in lines
    assert "Nakshatra: Rohini" in lines
    assert "Pada: 2" in lines
    assert lines[-1] == "Direct"
    assert tooltip_lines(coerce_planets(PLANETS)["Mars"])[-1] == "Retrograde"


def test_scene_marks_retrograde_planets():
    scene = build_scene(PLANETS, "birth")
    retro = {c.planet for c in scene.commands if isinstance(c, Text) and c.text == RETRO_GLYPH}
    assert retro == {"Mars", "Rahu", "Ketu"}
    circles = [c for c in scene.commands if isinstance(c, Circle)]
    assert len(circles) == len(PLANETS)
    assert {r.planet for r in scene.regions} == set(PLANETS)


def test_sentinel_keys_are_dropped_in_order():
    raw = {"Sun": 1, "debug": "x", "13": {}, "Moon": 2}
    assert list(filter_planets(raw)) == ["Sun", "Moon"]


@pytest.mark.parametrize(("value", "expected"), [("true", True), ("False", False), (True, True), (0, False)])
def test_retro_flag_normalisation(value, expected):
    assert is_retrograde(value) is expected
