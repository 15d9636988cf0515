"""Tests du client du fournisseur astrologique (transport httpx simulé)."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from astrohuff.domain.errors import AstrologyAPIError
from astrohuff.infra.astrology_api import (
    NAVAMSA_SVG_PATH,
    PLANETS_PATH,
    RASI_SVG_PATH,
    AstrologyAPIClient,
    build_request,
    parse_timezone,
    planet_map,
)
from tests.fakes import PLANETS, PLANETS_RESPONSE, SVG_RESPONSE

BASE_URL = "https://astro.test"


@pytest.mark.parametrize(
    ("offset", "hours"),
    [("+05:30", 5.5), ("-08:00", -8.0), ("-03:30", -3.5), ("+00:00", 0.0), ("+12:00", 12.0)],
)
def test_parse_timezone(offset, hours):
    assert parse_timezone(offset) == hours


@pytest.mark.parametrize("offset", ["05:30", "+5:30", "+13:00", "+05:60", ""])
def test_parse_timezone_rejects_malformed(offset):
    with pytest.raises(ValueError):
        parse_timezone(offset)


def test_build_request_payload():
    req = build_request("1990-05-15", "10:30", 28.6139, 77.209, "+05:30")
    payload = req.payload()
    assert (payload["year"], payload["month"], payload["date"]) == (1990, 5, 15)
    assert (payload["hours"], payload["minutes"], payload["seconds"]) == (10, 30, 0)
    assert payload["timezone"] == 5.5
    assert payload["settings"] == {"observation_point": "topocentric", "ayanamsha": "lahiri"}


def test_planet_map_prefers_named_mapping_and_drops_sentinels():
    assert planet_map(PLANETS_RESPONSE) == PLANETS
    with pytest.raises(AstrologyAPIError):
        planet_map({"output": None})
    with pytest.raises(AstrologyAPIError):
        planet_map(["unexpected"])
    with pytest.raises(AstrologyAPIError):
        planet_map({"output": [{}, ["Sun"]]})


def _client(handler) -> AstrologyAPIClient:
    return AstrologyAPIClient(
        BASE_URL, api_key="k", language="en", transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_fetch_birth_chart_issues_three_calls():
    seen: list[tuple[str, dict, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.append((request.url.path, body, request.headers["x-api-key"]))
        if request.url.path == PLANETS_PATH:
            return httpx.Response(200, json=PLANETS_RESPONSE)
        return httpx.Response(200, json=SVG_RESPONSE)

    req = build_request("1990-05-15", "10:30", 28.6, 77.2, "+05:30")
    data = await _client(handler).fetch_birth_chart(req)

    assert data.planets == PLANETS_RESPONSE
    assert data.rasi_svg == SVG_RESPONSE
    assert sorted(path for path, _, _ in seen) == sorted(
        [PLANETS_PATH, RASI_SVG_PATH, NAVAMSA_SVG_PATH]
    )
    assert all(key == "k" for _, _, key in seen)
    langs = {path: body.get("language") for path, body, _ in seen}
    assert langs[PLANETS_PATH] is None
    assert langs[RASI_SVG_PATH] == "en"


@pytest.mark.asyncio
@pytest.mark.parametrize("failing_path", [PLANETS_PATH, RASI_SVG_PATH, NAVAMSA_SVG_PATH])
async def test_any_failed_call_fails_the_whole_chart(failing_path):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == failing_path:
            return httpx.Response(500, json={"error": "boom"})
        if request.url.path == PLANETS_PATH:
            return httpx.Response(200, json=PLANETS_RESPONSE)
        return httpx.Response(200, json=SVG_RESPONSE)

    req = build_request("1990-05-15", "10:30", 28.6, 77.2, "+05:30")
    with pytest.raises(AstrologyAPIError) as exc:
        await _client(handler).fetch_birth_chart(req)
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_network_error_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    req = build_request("1990-05-15", "10:30", 28.6, 77.2, "+05:30")
    with pytest.raises(AstrologyAPIError):
        await _client(handler).planets(req)


@pytest.mark.asyncio
@pytest.mark.parametrize("odd_path", [PLANETS_PATH, RASI_SVG_PATH, NAVAMSA_SVG_PATH])
async def test_non_object_payload_is_rejected(odd_path):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == odd_path:
            return httpx.Response(200, json=["unexpected"])
        if request.url.path == PLANETS_PATH:
            return httpx.Response(200, json=PLANETS_RESPONSE)
        return httpx.Response(200, json=SVG_RESPONSE)

    req = build_request("1990-05-15", "10:30", 28.6, 77.2, "+05:30")
    with pytest.raises(AstrologyAPIError, match="bad_payload"):
        await _client(handler).fetch_birth_chart(req)


@pytest.mark.asyncio
async def test_pending_calls_are_cancelled_after_a_failure():
    cancelled: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == PLANETS_PATH:
            await asyncio.sleep(0.05)
            return httpx.Response(500, json={"error": "boom"})
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            cancelled.append(request.url.path)
            raise
        return httpx.Response(200, json=SVG_RESPONSE)

    req = build_request("1990-05-15", "10:30", 28.6, 77.2, "+05:30")
    with pytest.raises(AstrologyAPIError):
        await asyncio.wait_for(_client(handler).fetch_birth_chart(req), timeout=5)
    assert sorted(cancelled) == sorted([RASI_SVG_PATH, NAVAMSA_SVG_PATH])
