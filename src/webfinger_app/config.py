"""Application configuration via environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEBFINGER_")

    # Server
    host: str = "127.0.0.1"
    port: int = 8787
    log_level: str = "INFO"

    # Directory of whitelisted domains and users (JSON file)
    config_path: Path = Path("config/config.json")
    reload: bool = False

    # Hostnames allowed to query any whitelisted domain (development access)
    dev_hosts: list[str] = ["localhost"]

    @model_validator(mode="after")
    def _check_port(self) -> Self:
        if not 0 < self.port < 65536:
            raise ValueError(f"WEBFINGER_PORT must be between 1 and 65535, got {self.port}")
        return self
