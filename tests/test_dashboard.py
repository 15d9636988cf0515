"""Tests du contenu du tableau de bord."""

from astrohuff.domain.dashboard import FEATURES, build_dashboard, feature_catalogue, welcome_line
from astrohuff.domain.entities import User, UserProfile

USER = User(id="u1", email="jane@example.com", display_name="JD")


def _profile(**kw) -> UserProfile:
    return UserProfile(id="u1", createdAt="2024-01-01", updatedAt="2024-01-01", **kw)


def test_welcome_prefers_profile_name():
    assert welcome_line(USER, _profile(name="Jane")) == "Welcome back, Jane"
    assert welcome_line(USER, None) == "Welcome back, JD"
    assert welcome_line(User(id="u2", email="x@example.com"), None) == "Welcome back"


def test_dashboard_shows_birth_details():
    data = build_dashboard(USER, _profile(name="Jane", birthTime="10:30", birthPlace="Pune"))
    assert data["birth"] == {"time": "10:30", "place": "Pune"}
    assert len(data["highlights"]) == 4


def test_feature_catalogue():
    cards = feature_catalogue()
    assert len(cards) == len(FEATURES)
    assert cards[0]["title"] == "Birth Chart Analysis"
    assert cards[0]["href"] == "/birth-chart"
