# controller/controller_dependencies.py
from functools import lru_cache
from repository.preference_repository import PreferenceRepository
from service.api_client import PaperTrailClient
from service.session_service import SessionService


@lru_cache(maxsize=1)
def get_session_service() -> SessionService:
    """One session per process: the coordinator must outlive single requests."""
    _client = PaperTrailClient()
    _prefs = PreferenceRepository()
    return SessionService(_client, _prefs)
