"""Contenu du tableau de bord et du catalogue de fonctionnalités (statique)."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from astrohuff.domain.entities import User, UserProfile


@dataclass(frozen=True)
class FeatureCard:
    title: str
    description: str
    icon: str
    href: str | None = None


@dataclass(frozen=True)
class Highlight:
    label: str
    value: str


FEATURES: tuple[FeatureCard, ...] = (
    FeatureCard(
        "Birth Chart Analysis",
        "Get detailed insights into your personality and life path with our advanced Kundli "
        "analysis. Understand your strengths, weaknesses, and life purpose.",
        "🌟",
        "/birth-chart",
    ),
    FeatureCard(
        "Kundli Matching",
        "Find your perfect match with our comprehensive compatibility analysis. Compare "
        "horoscopes and get detailed marriage compatibility reports.",
        "❤️",
    ),
    FeatureCard(
        "Daily Panchang",
        "Stay aligned with cosmic energies through daily astrological updates. Get muhurat "
        "timings and auspicious moments for important activities.",
        "📅",
    ),
    FeatureCard(
        "Ask AI Astrologer",
        "Get instant answers to your life questions from our AI-powered astrologer. "
        "Available 24/7 for personalized guidance.",
        "🤖",
        "/preview",
    ),
    FeatureCard(
        "Transit Predictions",
        "Track planetary movements and their impact on your life. Get personalized "
        "predictions for career, relationships, and more.",
        "🌍",
    ),
    FeatureCard(
        "Gemstone Recommendations",
        "Discover which gemstones can enhance your life based on your birth chart. Get "
        "detailed recommendations for wearing and caring for your stones.",
        "💎",
    ),
    FeatureCard(
        "Numerology Analysis",
        "Unlock the power of numbers in your life. Get insights based on your name and "
        "birth date numerology.",
        "🔢",
    ),
    FeatureCard(
        "Yearly Horoscope",
        "Plan your year ahead with detailed yearly predictions. Get month-by-month "
        "forecasts for all areas of life.",
        "📊",
    ),
    FeatureCard(
        "Remedial Solutions",
        "Get personalized remedies for planetary doshas. Learn about mantras, rituals, and "
        "practices to harmonize your energies.",
        "🕉️",
    ),
    FeatureCard(
        "Career Guidance",
        "Make informed career decisions based on your astrological chart. Discover your "
        "natural talents and ideal profession.",
        "💼",
    ),
    FeatureCard(
        "Relationship Insights",
        "Understanding your relationships through vedic astrology. Get guidance for "
        "personal and professional relationships.",
        "🤝",
    ),
    FeatureCard(
        "Health Astrology",
        "Learn about potential health concerns and preventive measures based on your "
        "birth chart. Get holistic wellness recommendations.",
        "🏥",
    ),
)

# Valeurs indicatives, pas de calcul de panchang côté serveur
HIGHLIGHTS: tuple[Highlight, ...] = (
    Highlight("Today's Panchang", "Shubh"),
    Highlight("Rahu Kaal", "10:30 - 12:00"),
    Highlight("Nakshatra", "Rohini"),
    Highlight("Yoga", "Shubha"),
)

ESSENTIAL_TOOLS = (
    "Free Kundli",
    "Kundli Matching",
    "Horoscope 2025",
    "Talk to Astrologer",
    "Festival Calendar",
    "Today's Horoscope",
)

REMEDIES = ("Gemstones Report", "Mangal Dosha", "Sade Sati Report")


def welcome_line(user: User, profile: UserProfile | None) -> str:
    """`Welcome back, <nom>`: nom du profil, sinon nom d'affichage, sinon rien."""
    name = (profile.name if profile else "") or user.display_name
    return f"Welcome back, {name}" if name else "Welcome back"


def build_dashboard(user: User, profile: UserProfile | None) -> dict:
    return {
        "welcome": welcome_line(user, profile),
        "subtitle": "Your Personal Astrological Dashboard",
        "birth": {
            "time": profile.birthTime if profile else None,
            "place": profile.birthPlace if profile else None,
        },
        "highlights": [asdict(h) for h in HIGHLIGHTS],
        "tools": list(ESSENTIAL_TOOLS),
        "remedies": list(REMEDIES),
    }


def feature_catalogue() -> list[dict]:
    return [asdict(f) for f in FEATURES]
