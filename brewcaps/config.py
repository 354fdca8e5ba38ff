from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict, BaseSettings


class Settings(BaseSettings):
    delay_scale: float = Field(1.0, ge=0.0, validation_alias="SIMULATED_DELAY_SCALE")
    capability_timeout: Optional[float] = Field(None, gt=0.0, validation_alias="CAPABILITY_TIMEOUT")

    log_ring_size: int = Field(200, gt=0, validation_alias="LOG_RING_SIZE")

    # Extra bundle definitions (*.json) registered on top of the packaged ones
    bundles_path: Optional[str] = Field(None, validation_alias="BUNDLES_PATH")
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True, extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
