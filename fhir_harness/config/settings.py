"""
Harness settings using pydantic-settings.

Environment variables are prefixed with FHIR_HARNESS_, except for the two
variables the sample scripts themselves read (GCLOUD_PROJECT and
GOOGLE_APPLICATION_CREDENTIALS), which are read under their own names.
"""

import sys
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fhir_harness.config.defaults import (
    CREDENTIALS_ENV_VAR,
    DEFAULTS,
    PROJECT_ENV_VAR,
)
from fhir_harness.errors import MissingConfigurationError
from fhir_harness.validation import validate_resource_type

# Load .env into os.environ so the sample subprocesses inherit it too
load_dotenv()


class Settings(BaseSettings):
    """Harness settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FHIR_HARNESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Required by every sample; checked by check_preconditions()
    project_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(PROJECT_ENV_VAR, "FHIR_HARNESS_PROJECT_ID"),
    )
    credentials_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices(CREDENTIALS_ENV_VAR, "FHIR_HARNESS_CREDENTIALS_PATH"),
    )

    # Fixed run configuration
    cloud_region: str = DEFAULTS.CLOUD_REGION
    fhir_version: str = DEFAULTS.FHIR_VERSION
    resource_type: str = DEFAULTS.RESOURCE_TYPE
    bundle_file: str = DEFAULTS.BUNDLE_FILE

    # Where the sample programs live and how to run them
    samples_dir: Path = Path(".")
    datasets_dir: Path | None = None  # Defaults to the "datasets" sibling of samples_dir
    interpreter: str = Field(default_factory=lambda: sys.executable)
    command_timeout: float | None = None  # Seconds; None waits forever

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @model_validator(mode="after")
    def default_datasets_dir(self) -> "Settings":
        """Look for the dataset samples next to the FHIR samples unless told otherwise."""
        if self.datasets_dir is None:
            self.datasets_dir = self.samples_dir.absolute().parent / "datasets"
        return self

    @field_validator("resource_type")
    @classmethod
    def check_resource_type(cls, value: str) -> str:
        return validate_resource_type(value)

    def check_preconditions(self) -> None:
        """
        Verify the environment every sample relies on is present.

        Raises:
            MissingConfigurationError: If the project or credentials are unset
        """
        if not self.project_id:
            raise MissingConfigurationError(
                PROJECT_ENV_VAR,
                f"Must set {PROJECT_ENV_VAR} environment variable!",
            )
        if not self.credentials_path:
            raise MissingConfigurationError(
                CREDENTIALS_ENV_VAR,
                f"Must set {CREDENTIALS_ENV_VAR} environment variable!",
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings() -> None:
    """Clear the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
