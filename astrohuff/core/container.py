"""
Conteneur d'injection de dépendances.

Instancie les composants centraux (settings, dépôts, clients externes, services) et expose un
singleton `container` utilisé par les routes. Remplace tout état global d'authentification: la
session est résolue à chaque requête via le `SessionProvider`.
"""

from astrohuff.core.settings import get_settings
from astrohuff.domain.ai_preview import PreviewSessions
from astrohuff.domain.birth_chart import BirthChartService
from astrohuff.domain.onboarding import OnboardingStore
from astrohuff.domain.profiles import ProfileService
from astrohuff.domain.session import SessionProvider
from astrohuff.infra.astrology_api import AstrologyAPIClient
from astrohuff.infra.llm.base import LLM
from astrohuff.infra.llm.gemini_client import GeminiLLM
from astrohuff.infra.llm.openai_client import OpenAILLM
from astrohuff.infra.local_store import InMemoryLocalStore, RedisLocalStore
from astrohuff.infra.places import PlacesClient
from astrohuff.infra.repositories import (
    InMemoryProfileRepo,
    InMemoryUserRepo,
    RedisProfileRepo,
    RedisUserRepo,
)


def build_llm(settings) -> LLM:
    """Sélectionne le client génératif selon `LLM_PROVIDER`."""
    if settings.LLM_PROVIDER == "openai":
        return OpenAILLM(api_key=settings.OPENAI_API_KEY, model=settings.OPENAI_MODEL)
    return GeminiLLM(api_key=settings.GEMINI_API_KEY, model=settings.GEMINI_MODEL)


class Container:
    def __init__(self):
        self.settings = s = get_settings()
        if s.REDIS_URL:
            try:
                self.profile_repo = RedisProfileRepo(s.REDIS_URL)
                self.user_repo = RedisUserRepo(s.REDIS_URL)
                self.local_store = RedisLocalStore(s.REDIS_URL)
                self.storage_backend = "redis"
            except Exception as err:
                if s.REQUIRE_REDIS:
                    raise RuntimeError("Redis required but unavailable") from err
                self._use_memory("memory-fallback")
        else:
            if s.REQUIRE_REDIS:
                raise RuntimeError("Redis required but REDIS_URL not set")
            self._use_memory("memory")

        self.astro = AstrologyAPIClient(
            base_url=s.ASTRO_API_URL,
            api_key=s.ASTRO_API_KEY,
            language=s.ASTRO_LANGUAGE,
            timeout=s.HTTP_TIMEOUT_SECONDS,
        )
        self.places = PlacesClient(
            api_key=s.GOOGLE_MAPS_API_KEY,
            autocomplete_url=s.PLACES_API_URL,
            geocode_url=s.GEOCODE_API_URL,
            timeout=s.HTTP_TIMEOUT_SECONDS,
        )
        self.llm = build_llm(s)
        self._build_services()

    def _use_memory(self, backend: str) -> None:
        self.profile_repo = InMemoryProfileRepo()
        self.user_repo = InMemoryUserRepo()
        self.local_store = InMemoryLocalStore()
        self.storage_backend = backend

    def _build_services(self) -> None:
        s = self.settings
        self.profiles = ProfileService(self.profile_repo)
        self.sessions = SessionProvider(
            self.user_repo,
            self.profiles,
            secret=s.JWT_SECRET,
            alg=s.JWT_ALG,
            expires_min=s.JWT_EXPIRES_MIN,
        )
        self.onboarding = OnboardingStore(self.profiles, self.places)
        self.preview = PreviewSessions(self.local_store, self.llm, limit=s.FREE_QUESTION_LIMIT)
        self.birth_charts = BirthChartService(
            self.astro,
            observation_point=s.ASTRO_OBSERVATION_POINT,
            ayanamsha=s.ASTRO_AYANAMSHA,
        )

    def reset(self) -> None:
        """Repart de dépôts mémoire vides (tests)."""
        self._use_memory("memory")
        self._build_services()


container = Container()
