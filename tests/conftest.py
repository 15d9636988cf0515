"""Configuration de test pour pytest.

Ajoute la racine du projet au sys.path et remet le conteneur dans un état mémoire vierge avant
chaque test (dépôts, aperçus IA, assistants d'onboarding).
"""

import os
import sys

import pytest

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture(autouse=True)
def reset_container(monkeypatch):
    """Conteneur en mémoire, sans limitation de débit gênante pour les tests."""
    monkeypatch.setenv("RATE_LIMIT_QPS", "1000")
    from astrohuff.core.container import container

    container.reset()
    yield container
    container.reset()
