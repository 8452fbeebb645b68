# service/credential_service.py
import logging
from typing import Optional
from repository.preference_repository import API_KEY, PreferenceRepository
from util.enums import ErrorMessage
from util.errors import ValidationError

log = logging.getLogger(__name__)


class CredentialStore:
    """
    Process-wide API key holder.

    The key lives in memory. With remember=True it is mirrored into the
    preference store, otherwise any saved copy is removed. Nothing is loaded
    until init() is called.
    """

    def __init__(self, preferences: PreferenceRepository) -> None:
        self._prefs = preferences
        self._api_key: Optional[str] = None
        self._remember = False

    async def init(self) -> None:
        saved = await self._prefs.get(API_KEY)
        self._api_key = saved
        self._remember = saved is not None
        if saved:
            log.info("Loaded remembered API key")

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def remember_on_device(self) -> bool:
        return self._remember

    def require(self) -> str:
        if not self._api_key:
            raise ValidationError(ErrorMessage.MISSING_API_KEY.value.message)
        return self._api_key

    async def set(self, key: str, remember: bool) -> None:
        trimmed = (key or "").strip()
        if not trimmed:
            raise ValidationError(ErrorMessage.MISSING_API_KEY.value.message)
        if remember:
            await self._prefs.set(API_KEY, trimmed)
        else:
            await self._prefs.delete(API_KEY)
        self._api_key = trimmed
        self._remember = remember

    async def clear(self) -> None:
        await self._prefs.delete(API_KEY)
        self._api_key = None
        self._remember = False
