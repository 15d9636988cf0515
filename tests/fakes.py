"""
Fakes pour les tests unitaires.

Implémentations factices des clients externes (LLM, fournisseur astrologique, Places, Redis) au
comportement déterministe.
"""

from __future__ import annotations

from typing import Any

from astrohuff.domain.entities import PlacePrediction
from astrohuff.domain.errors import AstrologyAPIError, LLMError, PlacesAPIError
from astrohuff.infra.astrology_api import BirthChartData, ChartRequest
from astrohuff.infra.llm.base import LLM

FAKE_ANSWER = "FAKE_READING_OK"


def planet(full: float, retro: bool = False, **extra) -> dict:
    """Entrée planétaire au format du fournisseur (`isRetro` en chaîne)."""
    return {
        "fullDegree": full,
        "normDegree": full % 30,
        "isRetro": "true" if retro else "false",
        "current_sign": int(full // 30) + 1,
        **extra,
    }


PLANETS = {
    "Ascendant": planet(15.5),
    "Sun": planet(45.2, nakshatra="Rohini", nakshatraLord="Moon", nakshatraPada=2, signLord="Venus"),
    "Moon": planet(100.0),
    "Mars": planet(200.3, retro=True),
    "Mercury": planet(50.0),
    "Jupiter": planet(55.0),
    "Venus": planet(58.0),
    "Saturn": planet(300.0),
    "Rahu": planet(330.0, retro=True),
    "Ketu": planet(150.0, retro=True),
}

PLANETS_RESPONSE = {
    "statusCode": 200,
    "output": [
        {str(i): {"name": name, **data} for i, (name, data) in enumerate(PLANETS.items())},
        {**PLANETS, "debug": "observation_point=topocentric", "13": {"name": "ayanamsa"}},
    ],
}

SVG_RESPONSE = {"statusCode": 200, "output": "<svg>provider</svg>"}


class FakeLLM(LLM):
    """LLM factice: renvoie toujours la même réponse et garde les messages reçus."""

    provider = "fake"
    model = "fake"

    def __init__(self, answer: str = FAKE_ANSWER) -> None:
        self.answer = answer
        self.calls: list[list[dict[str, str]]] = []

    def generate(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        return self.answer


class FailingLLM(FakeLLM):
    """LLM factice dont chaque appel échoue."""

    def generate(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        raise LLMError("backend unavailable")


class FakeAstrologyClient:
    def __init__(
        self,
        fail: bool = False,
        planets: Any = None,
        rasi_svg: Any = None,
        navamsa_svg: Any = None,
    ) -> None:
        self.fail = fail
        self.planets_response = PLANETS_RESPONSE if planets is None else planets
        self.rasi_response = SVG_RESPONSE if rasi_svg is None else rasi_svg
        self.navamsa_response = SVG_RESPONSE if navamsa_svg is None else navamsa_svg
        self.requests: list[ChartRequest] = []

    async def fetch_birth_chart(self, req: ChartRequest) -> BirthChartData:
        self.requests.append(req)
        if self.fail:
            raise AstrologyAPIError("planets responded 500", 500)
        return BirthChartData(
            planets=self.planets_response,
            rasi_svg=self.rasi_response,
            navamsa_svg=self.navamsa_response,
        )


class FakePlacesClient:
    def __init__(self, coords: tuple[float, float] = (28.6139, 77.209), fail: bool = False) -> None:
        self.coords = coords
        self.fail = fail

    async def autocomplete(self, text: str | None) -> list[PlacePrediction]:
        if not text:
            return []
        return [PlacePrediction(place_id="p1", description="New Delhi, Delhi, India")]

    async def geocode(self, address: str) -> tuple[float, float]:
        if self.fail:
            raise PlacesAPIError("geocoding failed")
        return self.coords


class FakeRedis:
    """Sous-ensemble de l'API redis-py utilisé par les dépôts (get/set/hget/hset/pipeline)."""

    def __init__(self) -> None:
        self.kv: dict[str, str] = {}
        self.hashes: dict[str, dict[str, str]] = {}

    def get(self, key):
        return self.kv.get(key)

    def set(self, key, value):
        self.kv[key] = value
        return True

    def hget(self, name, key):
        return self.hashes.get(name, {}).get(key)

    def hset(self, name, key, value):
        self.hashes.setdefault(name, {})[key] = value
        return 1

    def pipeline(self):
        return _FakePipeline(self)


class _FakePipeline:
    def __init__(self, redis: FakeRedis) -> None:
        self.redis = redis
        self.ops: list[tuple] = []

    def set(self, key, value):
        self.ops.append(("set", key, value))
        return self

    def hset(self, name, key, value):
        self.ops.append(("hset", name, key, value))
        return self

    def execute(self):
        results = [getattr(self.redis, op)(*args) for op, *args in self.ops]
        self.ops = []
        return results
