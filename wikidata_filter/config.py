import multiprocessing
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    batch_size: int = Field(default=100, ge=1)
    progress_interval: int = Field(default=100_000, ge=1)
    compress_level: int = Field(default=9, ge=1, le=9)
    threads_per_cpu: int = Field(default=1, ge=1)

    output_dir: Path = Path(".")
    data_dir: Optional[Path] = None

    log_level: str = "INFO"

    sparql_endpoint: str = "https://query.wikidata.org/sparql"
    user_agent: str = "wikidata-filter/1.0 (https://github.com/turbolent/wikidata-filter)"

    model_config = SettingsConfigDict(
        env_prefix="WIKIDATA_FILTER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("log_level", mode="before")
    def _upper_level(cls, value):  # noqa: N805
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def default_threads(self) -> int:
        return multiprocessing.cpu_count() * self.threads_per_cpu


@lru_cache()
def get_settings() -> Settings:
    return Settings()
