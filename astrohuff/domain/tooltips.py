"""Couche d'interaction du diagramme: hit-testing et infobulles par planète.

Remplace la gestion manuelle d'écouteurs DOM: chaque scène produit un index de zones de survol
indexé par identifiant de planète. Reconstruire la couche pour une nouvelle scène abandonne
intégralement les zones précédentes.
"""

from __future__ import annotations

from dataclasses import dataclass

from astrohuff.domain.chart_layout import ChartScene, HitRegion

# Décalage vertical (px) pour afficher l'infobulle au-dessus du symbole
TOOLTIP_OFFSET_Y = -20


@dataclass(frozen=True)
class Tooltip:
    title: str
    content: tuple[str, ...]
    x: float
    y: float


class TooltipLayer:
    """Zones de survol d'une scène, avec l'infobulle active."""

    def __init__(self, scene: ChartScene) -> None:
        self.size = scene.size
        self._regions: dict[str, HitRegion] = {r.planet: r for r in scene.regions}
        self.active: Tooltip | None = None

    @property
    def planets(self) -> list[str]:
        return list(self._regions)

    def region(self, planet: str) -> HitRegion | None:
        return self._regions.get(planet)

    def hit_test(self, x: float, y: float) -> str | None:
        """Retourne la planète sous le point (coordonnées du diagramme), sinon None."""
        for planet, region in self._regions.items():
            if region.contains(x, y):
                return planet
        return None

    def hover(
        self,
        planet: str,
        rendered_width: float,
        origin: tuple[float, float] = (0.0, 0.0),
        container: tuple[float, float] = (0.0, 0.0),
    ) -> Tooltip | None:
        """Active l'infobulle d'une planète.

        Convertit la position du diagramme en pixels écran via `scale = rendered_width / size`,
        puis exprime le résultat relativement au conteneur (`origin` = coin haut-gauche du SVG
        rendu, `container` = coin haut-gauche du conteneur).
        """
        region = self._regions.get(planet)
        if region is None or rendered_width <= 0:
            self.active = None
            return None
        scale = rendered_width / self.size
        screen_x = region.x * scale + origin[0]
        screen_y = region.y * scale + origin[1] + TOOLTIP_OFFSET_Y
        self.active = Tooltip(
            title=region.title,
            content=region.lines,
            x=round(screen_x - container[0], 3),
            y=round(screen_y - container[1], 3),
        )
        return self.active

    def mouse_out(self) -> None:
        self.active = None

    def rebuild(self, scene: ChartScene) -> None:
        """Remplace toutes les zones par celles de la nouvelle scène."""
        self.size = scene.size
        self._regions = {r.planet: r for r in scene.regions}
        self.active = None

    def as_dict(self) -> dict[str, dict]:
        """Sérialise les zones (pour un client qui gère lui-même le survol)."""
        return {
            planet: {
                "x": r.x,
                "y": r.y,
                "radius": r.radius,
                "title": r.title,
                "lines": list(r.lines),
            }
            for planet, r in self._regions.items()
        }
