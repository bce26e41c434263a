from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SAMESITE_VALUES = {"lax", "strict", "none"}
SESSION_BACKENDS = {"memory", "redis"}
SESSION_ACTIONS_RESET_MODES = {"eager", "accumulate"}


class Settings(BaseSettings):
    app_name: str = "useractions"
    env: str = "development"
    log_level: str = "INFO"

    counter_cookie_name: str = "UserActions"
    counter_cookie_max_age_days: int = 730
    cookie_path: str = "/"
    cookie_samesite: str = "lax"
    cookie_secure: bool = False

    session_cookie_name: str = "session_id"
    session_idle_timeout_seconds: int = 300
    session_backend: str = "memory"
    redis_url: str = "redis://redis:6379/0"

    # eager: sessionActions/* are cleared when a new session starts.
    # accumulate: they are never cleared and grow like the totals.
    session_actions_reset: str = "eager"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", extra="ignore")

    @model_validator(mode="after")
    def validate_tracking_settings(self) -> "Settings":
        if self.cookie_samesite.lower() not in SAMESITE_VALUES:
            raise ValueError("COOKIE_SAMESITE must be one of lax, strict, none")
        if self.session_backend.lower() not in SESSION_BACKENDS:
            raise ValueError("SESSION_BACKEND must be one of memory, redis")
        if self.session_actions_reset.lower() not in SESSION_ACTIONS_RESET_MODES:
            raise ValueError("SESSION_ACTIONS_RESET must be one of eager, accumulate")
        if self.session_idle_timeout_seconds < 1:
            raise ValueError("SESSION_IDLE_TIMEOUT_SECONDS must be >= 1")
        if self.counter_cookie_max_age_days < 1:
            raise ValueError("COUNTER_COOKIE_MAX_AGE_DAYS must be >= 1")
        return self

    @property
    def counter_cookie_max_age(self) -> int:
        return self.counter_cookie_max_age_days * 24 * 60 * 60

    @property
    def reset_session_actions(self) -> bool:
        return self.session_actions_reset.lower() == "eager"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
