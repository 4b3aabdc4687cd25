"""
Configuration system using Pydantic for type-safe settings management.

Settings come from environment variables (``FLOWCHECK_`` prefix, ``__`` for
nested sections) and optionally from a YAML file. The two variables the CI
workflow already exports, ``GH_TOKEN`` and ``RUN_LIVE_TRIGGER_TEST``, are
read under their plain names as well.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flowcheck.exceptions import ConfigurationError


class RepositoryConfig(BaseModel):
    """Repository whose workflows are exercised by the live scenarios."""

    owner: str = Field(default="david-iaggbs", description="Repository owner/organization")
    name: str = Field(
        default="sandbox-swe-dparra--solution-architect",
        description="Repository name",
    )

    @property
    def slug(self) -> str:
        """Get the ``owner/name`` form expected by ``gh --repo``."""
        return f"{self.owner}/{self.name}"


class GhConfig(BaseModel):
    """How the ``gh`` executable is invoked."""

    executable: str = Field(default="gh", description="Name or path of the gh executable")
    token: SecretStr | None = Field(default=None, description="Token exported to gh as GH_TOKEN")
    command_timeout: float = Field(default=60.0, gt=0, description="Seconds before a gh command is killed")


class PollingConfig(BaseModel):
    """Timeouts and intervals for the bounded waits, in seconds."""

    run_start_timeout: float = Field(default=60.0, gt=0, description="Wait for a triggered run to appear")
    run_start_interval: float = Field(default=5.0, gt=0, description="Delay between run list fetches")
    run_completion_timeout: float = Field(default=300.0, gt=0, description="Wait for a run to complete")
    run_completion_interval: float = Field(default=10.0, gt=0, description="Delay between run view fetches")
    comment_settle_delay: float = Field(default=10.0, ge=0, description="Pause before reading posted comments")
    intake_settle_delay: float = Field(default=15.0, ge=0, description="Pause before looking for the intake issue")


class FlowcheckSettings(BaseSettings):
    """Main flowcheck settings.

    Every component receives the values it needs from here at construction;
    nothing reads repository identifiers from module globals.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOWCHECK_",
        env_nested_delimiter="__",
        case_sensitive=False,
        populate_by_name=True,
    )

    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    organization: str = Field(default="david-iaggbs", description="Organization owning the initiative projects")
    gh: GhConfig = Field(default_factory=GhConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    gh_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("GH_TOKEN", "FLOWCHECK_GH_TOKEN", "gh_token"),
        description="Authentication token for gh (plain GH_TOKEN is honoured)",
    )
    run_live_trigger_test: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "RUN_LIVE_TRIGGER_TEST",
            "FLOWCHECK_RUN_LIVE_TRIGGER_TEST",
            "run_live_trigger_test",
        ),
        description="Run the state-mutating live scenarios",
    )
    target_root: Path = Field(default=Path("."), description="Repository root holding .github/workflows")
    test_title_prefix: str = Field(default="[TEST]", description="Title prefix marking suite-created issues")
    cleanup_comment: str = Field(
        default="Closed by automated test cleanup.",
        description="Comment posted when closing a test issue",
    )

    @field_validator("run_live_trigger_test", mode="before")
    @classmethod
    def parse_live_flag(cls, v: object) -> object:
        """Treat only the string "true" (any case) as enabling live runs.

        Empty, "1", "yes" and any other string disable them.
        """
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return v

    @property
    def token(self) -> SecretStr | None:
        """Get the effective gh token (top-level GH_TOKEN wins over gh.token)."""
        return self.gh_token or self.gh.token

    @property
    def live_enabled(self) -> bool:
        """Check if live scenarios may run (flag set and token available)."""
        token = self.token
        return self.run_live_trigger_test and token is not None and bool(token.get_secret_value())

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> FlowcheckSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} syntax for environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            FlowcheckSettings instance

        Raises:
            ConfigurationError: If config file is invalid or missing required fields
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            yaml_content = config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except Exception as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))


def load_settings(config_path: str | Path | None = None) -> FlowcheckSettings:
    """Load settings from a YAML file if given, otherwise from the environment.

    Raises:
        ConfigurationError: If the settings cannot be loaded or validated
    """
    if config_path is not None:
        return FlowcheckSettings.from_yaml(config_path)
    try:
        return FlowcheckSettings()
    except Exception as e:
        raise ConfigurationError(f"Failed to validate configuration: {e}") from e
