"""Construction des prompts de l'astrologue IA."""

from astrohuff.domain.entities import BirthInfo

SYSTEM = (
    "You are an AI astrologer grounded in vedic astrology. "
    "Be thoughtful, concise and kind; avoid fatalistic predictions."
)


def build_astrologer_prompt(info: BirthInfo, question: str) -> list[dict[str, str]]:
    """Messages (system + user) pour une question accompagnée des données de naissance."""
    user = (
        "As an AI astrologer, provide insights based on the following birth information "
        "and question:\n\n"
        "Birth Details:\n"
        f"- Name: {info.name}\n"
        f"- Date of Birth: {info.birthDate}\n"
        f"- Time of Birth: {info.birthTime}\n"
        f"- Place of Birth: {info.birthPlace} "
        f"(Latitude: {info.latitude}, Longitude: {info.longitude})\n\n"
        f"Question: {question}\n\n"
        "Please provide a thoughtful astrological analysis based on vedic astrology principles. "
        "Keep the response concise but insightful."
    )
    return [{"role": "system", "content": SYSTEM}, {"role": "user", "content": user}]
