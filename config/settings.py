# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field, field_validator
from pydantic_settings import BaseSettings
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(Environment.DEV.value, validation_alias="APP_ENV")
    LOG_LEVEL: str = Field("INFO", validation_alias="LOG_LEVEL")
    REDIS_URL: str = Field("redis://localhost:6379/0", validation_alias="REDIS_URL")

    # PaperTrail backend
    API_BASE_URL: str = Field("http://127.0.0.1:8000", validation_alias="API_BASE_URL")
    API_VERSION: str = Field("/api/v1", validation_alias="API_VERSION")
    HTTP_TIMEOUT_SECONDS: float = Field(60.0, validation_alias="HTTP_TIMEOUT_SECONDS")
    CONNECT_TIMEOUT_SECONDS: float = Field(
        5.0, validation_alias="CONNECT_TIMEOUT_SECONDS"
    )

    # Local session API
    ALLOWED_ORIGIN: str = Field(
        "http://localhost:5173", validation_alias="ALLOWED_ORIGIN"
    )
    LOCAL_HOST: str = Field("127.0.0.1", validation_alias="LOCAL_HOST")
    LOCAL_PORT: int = Field(8100, validation_alias="LOCAL_PORT")

    @field_validator("API_BASE_URL")
    @classmethod
    def _http_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("must start with http:// or https://")
        return v.rstrip("/")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
