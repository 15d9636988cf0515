"""Routes liées aux cartes de naissance.

- `POST /charts/birth`: formulaire complet -> positions + SVG fournisseur + cartes rendues localement.
- `POST /charts/render`: rendu local seul à partir d'un mapping de planètes déjà connu.
"""

import structlog
from fastapi import APIRouter, Depends
from pydantic import ValidationError

from astrohuff.api.deps import require_onboarded
from astrohuff.api.errors import bad_gateway, validation_failed
from astrohuff.api.schemas import RenderRequest, RenderResponse
from astrohuff.core.container import container
from astrohuff.domain.birth_chart import (
    BirthChartForm,
    ChartUnavailable,
    render_chart,
    validate_form,
)
from astrohuff.domain.errors import HouseOutOfRange
from astrohuff.domain.session import SessionContext

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/charts", tags=["charts"])


@router.post("/birth")
async def birth_chart(form: BirthChartForm, session: SessionContext = Depends(require_onboarded)):
    errors = validate_form(form)
    if errors:
        raise validation_failed(errors)
    try:
        return await container.birth_charts.generate(form)
    except ChartUnavailable as exc:
        raise bad_gateway(exc.message) from exc


@router.post("/render", response_model=RenderResponse)
def render(p: RenderRequest):
    try:
        chart = render_chart(p.planets, p.chart_type)
    except HouseOutOfRange as exc:
        log.warning("chart_render_rejected", planet=exc.planet, house=exc.house)
        raise validation_failed({exc.planet: str(exc)}) from exc
    except ValidationError as exc:
        raise validation_failed({"planets": "invalid planet data"}) from exc
    return RenderResponse(chart_type=chart.chart_type, svg=chart.svg, tooltips=chart.tooltips)
