"""Application settings loaded from environment variables (+ optional .env)."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "PMS"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


class AppConfig(BaseModel):
    """Settings shared by the mock server and the task board client."""
    host: str = Field(default="127.0.0.1", description="Bind address of the local server")
    port: int = Field(default=3001, ge=0, le=65535, description="Bind port of the local server (0 picks a free port)")
    base_url: str = Field(default="http://127.0.0.1:3001", description="Data source root URL")
    http_timeout_seconds: float = Field(default=10.0, gt=0, description="Client request timeout")
    page_size: int = Field(default=10, ge=1, description="Default page size for table and grid")

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "AppConfig":
        """Build settings from PMS_* environment variables."""
        if load_env_file:
            load_dotenv(override=False)

        values = {}
        env_map = {
            "host": _k("HOST"),
            "port": _k("PORT"),
            "base_url": _k("BASE_URL"),
            "http_timeout_seconds": _k("HTTP_TIMEOUT_SECONDS"),
            "page_size": _k("PAGE_SIZE"),
        }
        for field_name, env_name in env_map.items():
            raw = os.environ.get(env_name)
            if raw is not None and raw.strip() != "":
                values[field_name] = raw.strip()
        return cls(**values)
