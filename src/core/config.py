"""
Runtime Configuration

All settings come from environment variables so the CLI, the API server
and tests can be configured without files.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Environment-derived settings."""
    log_level: str = "INFO"
    key_storage_path: Path = Path(".keys")
    api_key: str = "dev-key-change-in-production"
    host: str = "127.0.0.1"
    port: int = 8000
    strict_input: bool = False
    cors_origins: tuple = ("*",)

    @property
    def allow_literal_input(self) -> bool:
        return not self.strict_input

    @classmethod
    def from_env(cls) -> "Settings":
        origins: List[str] = [
            o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()
        ]
        return cls(
            log_level=os.environ.get("TEXTSEAL_LOG_LEVEL", "INFO").upper(),
            key_storage_path=Path(os.environ.get("KEY_STORAGE_PATH", ".keys")),
            api_key=os.environ.get("API_KEY", "dev-key-change-in-production"),
            host=os.environ.get("HOST", "127.0.0.1"),
            port=int(os.environ.get("PORT", 8000)),
            strict_input=os.environ.get("TEXTSEAL_STRICT_INPUT", "").lower() in _TRUTHY,
            cors_origins=tuple(origins) or ("*",),
        )
