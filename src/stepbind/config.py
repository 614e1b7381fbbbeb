from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from stepbind.constants import (
    DEFAULT_REPORT_INDENT,
    DEFAULT_TEXT_ENCODING,
    PROJECT_CONFIG_FILENAME,
)
from stepbind.exceptions import ConfigError
from stepbind.logging import get_logger

__all__ = [
    "StepbindConfig",
    "InvocationConfig",
    "ReportConfig",
    "load_config",
    "get_user_config_path",
]

logger = get_logger(__name__)


class InvocationConfig(BaseModel):
    """Settings for step invocation.

    Attributes:
        capture_exceptions: Report an unexpected exception raised by a handler
            as a failed step. When False the exception propagates to the
            caller. AssertionError is always reported as a failed step.
        text_encoding: Encoding used when a text argument is delivered to a
            byte-sequence parameter.
    """

    capture_exceptions: bool = True
    text_encoding: str = DEFAULT_TEXT_ENCODING

    @field_validator("text_encoding")
    @classmethod
    def check_encoding_known(cls, v: str) -> str:
        """Reject encodings the codec registry does not know."""
        try:
            "".encode(v)
        except LookupError as e:
            raise ValueError(f"unknown text encoding: {v}") from e
        return v


class ReportConfig(BaseModel):
    """Settings for the cucumber JSON report.

    Attributes:
        indent: Spaces per indentation level (0 renders a single line).
    """

    indent: int = Field(default=DEFAULT_REPORT_INDENT, ge=0, le=8)


def _read_yaml(yaml_file: Path) -> dict[str, Any]:
    try:
        with open(yaml_file) as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            message=f"Invalid YAML in {yaml_file}: {e}",
            field=None,
            value=None,
        ) from e
    if loaded is None:
        logger.warning(f"Config file {yaml_file} is empty, using defaults.")
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(
            message=f"Config file {yaml_file} must contain a mapping",
            value=type(loaded).__name__,
        )
    return loaded


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source backed by one optional YAML file.

    A missing file contributes nothing; a present file must hold a mapping.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            self._config_data = _read_yaml(yaml_file)

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config_data


class StepbindConfig(BaseSettings):
    """Root configuration object containing all stepbind settings."""

    model_config = SettingsConfigDict(
        env_prefix="STEPBIND_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    invocation: InvocationConfig = Field(default_factory=InvocationConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Environment variables (STEPBIND_*)
        2. Explicit config file passed to load_config() (init settings)
        3. Project YAML config (./stepbind.yaml)
        4. User YAML config (~/.config/stepbind/config.yaml)
        """
        return (
            env_settings,
            init_settings,
            YamlConfigSource(settings_cls, Path.cwd() / PROJECT_CONFIG_FILENAME),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/stepbind/config.yaml
    """
    return Path.home() / ".config" / "stepbind" / "config.yaml"


def load_config(config_path: Path | None = None) -> StepbindConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional explicit config file. It overrides the user and
            project files but not environment variables.

    Returns:
        StepbindConfig instance with merged configuration.

    Raises:
        ConfigError: If the explicit file is missing or configuration is invalid.
    """
    explicit: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(
                message=f"Config file not found: {config_path}",
                value=str(config_path),
            )
        explicit = _read_yaml(config_path)
    elif not (Path.cwd() / PROJECT_CONFIG_FILENAME).exists():
        logger.debug("No project configuration found, using defaults.")

    try:
        return StepbindConfig(**explicit)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
