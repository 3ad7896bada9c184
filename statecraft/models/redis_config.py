from typing import Optional

from pydantic import RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="")

    redis_url: RedisDsn = "redis://localhost:6379/0"
    save_key_prefix: str = "statecraft:save"
    scoreboard_key: str = "statecraft:scoreboard"
    save_ttl_seconds: Optional[int] = None


REDIS_SETTINGS = RedisSettings()
