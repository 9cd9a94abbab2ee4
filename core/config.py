"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for Robinson happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. session_secret -> SESSION_SECRET). Type coercion and validation are
      built in.

Startup policy:
  PORT and SESSION_SECRET have no defaults. A missing or invalid value raises
  pydantic.ValidationError on first get_settings() call, which happens before
  uvicorn binds a socket (asgi import or main.py serve). The process exits.

  SESSION_SECRET shorter than 32 chars is rejected outright. The session
  cookie is an HMAC-signed payload -- a short key weakens the signature.

Layer rule: core/ is the kernel. This module may not import from api/, web/,
or auth/.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'auth' / 'robinson_auth.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    port and session_secret are required. Everything else has a default so a
    bare `PORT=3000 SESSION_SECRET=...` environment is a complete config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    port: int = Field(gt=0, lt=65536)
    debug: bool = False

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    session_secret: str
    secure_cookies: bool = False
    session_max_age: int = Field(default=8 * 3600, gt=0)  # 8 hours

    # ------------------------------------------------------------------
    # Credential store
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL
    # bcrypt cost factor for newly hashed passwords. Existing hashes carry
    # their own cost in the hash string.
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("session_secret")
    @classmethod
    def validate_session_secret(cls, value: str) -> str:
        """Reject empty or short secrets. Both are a hard startup failure."""
        if not value:
            raise ValueError("SESSION_SECRET is required. Set it in your environment or .env file.")
        if len(value) < 32:
            raise ValueError("SESSION_SECRET must be at least 32 characters.")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
