"""Rendu SVG d'une `ChartScene` via svgwrite.

Seul module à effet de bord du pipeline de carte: il traduit les commandes déclaratives en éléments
SVG. Les groupes planétaires portent un attribut `data-planet` et un `<title>` contenant le texte de
l'infobulle, de sorte que le diagramme reste lisible sans script.
"""

from __future__ import annotations

import svgwrite

from astrohuff.domain.chart_layout import (
    PLANET_BG,
    ChartScene,
    Circle,
    DrawCommand,
    Line,
    Rect,
    Text,
)


def _text(dwg: svgwrite.Drawing, cmd: Text):
    extra = {}
    if cmd.font_weight:
        extra["font_weight"] = cmd.font_weight
    if cmd.baseline:
        extra["dominant_baseline"] = cmd.baseline
    return dwg.text(
        cmd.text,
        insert=(cmd.x, cmd.y),
        text_anchor="middle",
        font_size=cmd.font_size,
        fill=cmd.fill,
        **extra,
    )


def _element(dwg: svgwrite.Drawing, cmd: DrawCommand):
    if isinstance(cmd, Rect):
        return dwg.rect(
            insert=(cmd.x, cmd.y),
            size=(cmd.width, cmd.height),
            fill=cmd.fill,
            stroke=cmd.stroke,
            stroke_width=cmd.stroke_width,
        )
    if isinstance(cmd, Line):
        return dwg.line(
            start=(cmd.x1, cmd.y1),
            end=(cmd.x2, cmd.y2),
            stroke=cmd.stroke,
            stroke_width=cmd.stroke_width,
        )
    if isinstance(cmd, Circle):
        return dwg.circle(
            center=(cmd.cx, cmd.cy),
            r=cmd.r,
            fill=cmd.fill,
            stroke=cmd.stroke,
            stroke_width=cmd.stroke_width,
        )
    if isinstance(cmd, Text):
        return _text(dwg, cmd)
    raise TypeError(f"unsupported draw command: {type(cmd).__name__}")


def render_svg(scene: ChartScene) -> str:
    """Produit le document SVG de la scène."""
    size = scene.size
    dwg = svgwrite.Drawing(size=("100%", "100%"), profile="full", debug=False)
    dwg.viewbox(0, 0, size, size)
    dwg.add(dwg.rect(insert=(0, 0), size=(size, size), fill=PLANET_BG))

    tooltips = {r.planet: r for r in scene.regions}
    groups: dict[str, svgwrite.container.Group] = {}
    for cmd in scene.commands:
        planet = getattr(cmd, "planet", None)
        if planet is None:
            dwg.add(_element(dwg, cmd))
            continue
        group = groups.get(planet)
        if group is None:
            group = dwg.g(class_="planet")
            group.attribs["data-planet"] = planet
            region = tooltips.get(planet)
            if region is not None:
                group.set_desc(title="\n".join((region.title, *region.lines)))
            groups[planet] = group
            dwg.add(group)
        group.add(_element(dwg, cmd))
    return dwg.tostring()
