# repository/preference_repository.py
from typing import Final, Optional
from redis.asyncio import Redis
from config.cache import get_redis
from repository.namespaces import PREFERENCES

KEY_PREFIX: Final[str] = PREFERENCES

API_KEY: Final[str] = "api_key"
JOB_ID: Final[str] = "job_id"


class PreferenceRepository:
    """
    Small persistent key-value store for client state that must survive a
    restart: the remembered API key and the last tracked job id.
    """

    @staticmethod
    async def _client() -> Redis:
        return await get_redis()

    @staticmethod
    def _key(name: str) -> str:
        return f"{KEY_PREFIX}:{name}"

    async def get(self, name: str) -> Optional[str]:
        r = await self._client()
        v = await r.get(self._key(name))
        if v is None:
            return None
        s = v.decode("utf-8") if isinstance(v, (bytes, bytearray)) else str(v)
        return s or None

    async def set(self, name: str, value: str) -> None:
        r = await self._client()
        await r.set(self._key(name), value)

    async def delete(self, name: str) -> int:
        r = await self._client()
        return int(await r.delete(self._key(name)))
