"""Typed runner settings with dotenv support and startup validation."""

from typing import Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runner settings cannot be loaded or validated."""


class RunnerSettings(BaseSettings):
    """Settings for scan job submission and the local execution engine.

    Environment variable names map directly to field names in uppercase.
    Example: `scan_local_max_workers` reads from `SCAN_LOCAL_MAX_WORKERS`.

    Attributes:
        scan_local_executor: Worker pool kind used by the local engine (`thread` or `process`).
        scan_local_max_workers: Maximum number of concurrently running worker tasks.
        scan_local_poll_interval_seconds: Cancellation poll interval while waiting for tasks.
        scan_local_start_method: Optional process pool start method (`fork`, `spawn`, `forkserver`).
        scan_engine_properties: Cluster/runtime settings seeded into every engine configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    scan_local_executor: Literal["thread", "process"] = Field(default="process")
    scan_local_max_workers: int = Field(default=4, ge=1)
    scan_local_poll_interval_seconds: float = Field(default=0.5, gt=0)
    scan_local_start_method: Optional[Literal["fork", "spawn", "forkserver"]] = Field(default=None)
    scan_engine_properties: dict[str, str] = Field(default_factory=dict)

    @field_validator("scan_local_executor", "scan_local_start_method", mode="before")
    @classmethod
    def _normalize_pool_choices(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @field_validator("scan_engine_properties")
    @classmethod
    def _validate_engine_property_keys(cls, value: dict[str, str]) -> dict[str, str]:
        normalized_properties: dict[str, str] = {}
        for key, property_value in value.items():
            stripped_key = key.strip()
            if not stripped_key:
                raise ValueError("scan_engine_properties keys must not be blank")
            normalized_properties[stripped_key] = property_value
        return normalized_properties


def config_load_settings() -> RunnerSettings:
    """Load and validate runner settings from environment and dotenv.

    Returns:
        RunnerSettings: Validated runner settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return RunnerSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Runner configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
