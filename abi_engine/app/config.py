"""Config file."""
import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # PROJECT
    project_name: str = Field("abi-engine", alias="PROJECT_NAME")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # CODEC
    keccak_backend: str = Field("eth_utils", alias="KECCAK_BACKEND")
    check_event_signature: bool = Field(True, alias="CHECK_EVENT_SIGNATURE")

    # ABI DOCUMENTS
    abi_dir: Path | None = Field(None, alias="ABI_DIR")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    def resolve_abi_path(self, path: str | Path) -> Path:
        p = Path(path)
        if p.is_absolute() or self.abi_dir is None:
            return p
        return self.abi_dir / p

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


settings: Settings = Settings()
