"""Tests du rendu SVG (svgwrite)."""

import pytest

from astrohuff.domain.chart_layout import ChartScene, build_scene
from astrohuff.infra.svg_renderer import render_svg
from tests.fakes import PLANETS


def test_svg_contains_frame_and_planet_groups():
    svg = render_svg(build_scene(PLANETS, "birth"))

    assert "<svg" in svg
    assert 'viewBox="0,0,400,400"' in svg
    assert svg.count('class="planet"') == len(PLANETS)
    assert 'data-planet="Sun"' in svg
    assert "<title>" in svg
    assert "Retrograde" in svg
    assert "℞" in svg


def test_empty_mapping_renders_grid_only():
    svg = render_svg(build_scene({}, "navamsa"))
    assert 'class="planet"' not in svg
    # 4 lignes de grille + 2 diagonales
    assert svg.count("<line") == 6


def test_unsupported_command_is_rejected():
    scene = ChartScene(chart_type="birth", size=400, commands=(object(),), regions=())
    with pytest.raises(TypeError):
        render_svg(scene)
