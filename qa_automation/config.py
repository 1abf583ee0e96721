"""Configuration management for qa-automation."""

import json
from enum import Enum
from pathlib import Path
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

logger = structlog.get_logger()

CONFIG_FILENAME = "qa-automation.config.json"


class NamingStrategy(str, Enum):
    """Strategies for deriving test identifiers."""
    COMPONENT_ACTION = "component-action"  # {component}-{action}-{tag}
    HIERARCHICAL = "hierarchical"  # {outer}-{inner}-{element}
    DESCRIPTIVE = "descriptive"  # {label}-{tag}


class ScriptLanguage(str, Enum):
    """Languages the script generator can emit."""
    TYPESCRIPT = "typescript"
    PYTHON = "python"


def _check_http_url(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.startswith(("http://", "https://")):
        raise ValueError(f"base URL must be an http(s) URL, got {value!r}")
    return value


class ProjectConfig(BaseSettings):
    """Project settings loaded from environment variables and the config file."""

    model_config = SettingsConfigDict(
        env_prefix="QA_AUTOMATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    project_root: Path = Field(default_factory=Path.cwd, description="Root of the target application")
    source_dir: str = Field("src", description="Source directory relative to the project root")
    test_output_dir: str = Field("tests/e2e", description="Where generated tests are written")
    backup_dir: str = Field(".qa-backup", description="Backup root relative to the project root")

    # Insertion
    naming_strategy: NamingStrategy = Field(
        NamingStrategy.COMPONENT_ACTION,
        description="How test identifiers are derived",
    )
    testid_attribute: str = Field("data-testid", description="Attribute name used for identifiers")
    backup_before_modify: bool = Field(True, description="Copy files to the backup root before writing")

    # Generation
    base_url: str = Field("http://localhost:5173", description="Same-origin URLs are shortened to paths")
    test_language: ScriptLanguage = Field(ScriptLanguage.TYPESCRIPT, description="Generated script language")

    # Logging
    log_level: str = Field("INFO", description="Log level")
    json_logs: bool = Field(False, description="Render logs as JSON")

    @field_validator("base_url")
    @classmethod
    def check_base_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_http_url(value)

    @property
    def backup_root(self) -> Path:
        """Absolute directory that mirrors backed-up files."""
        return self.project_root / self.backup_dir


class PlaywrightFileConfig(BaseModel):
    """`playwright` block of the JSON config file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base_url: Optional[str] = Field(None, alias="baseURL")

    @field_validator("base_url")
    @classmethod
    def check_base_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_http_url(value)


class NamingStrategyFileConfig(BaseModel):
    """`namingStrategy` block of the JSON config file."""

    type: NamingStrategy


class ConfigFile(BaseModel):
    """Schema of qa-automation.config.json (camelCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    project_root: Optional[str] = None
    source_dir: Optional[str] = None
    test_output_dir: Optional[str] = None
    backup_dir: Optional[str] = None
    naming_strategy: Optional[NamingStrategyFileConfig] = None
    testid_attribute: Optional[str] = None
    backup_before_modify: Optional[bool] = None
    test_language: Optional[ScriptLanguage] = None
    playwright: Optional[PlaywrightFileConfig] = None

    def to_settings(self, root: Path) -> dict:
        """Flatten into ProjectConfig keyword arguments."""
        values = self.model_dump(
            exclude={"project_root", "naming_strategy", "playwright"},
            exclude_none=True,
        )
        if self.project_root:
            values["project_root"] = (root / self.project_root).resolve()
        if self.naming_strategy:
            values["naming_strategy"] = self.naming_strategy.type
        if self.playwright and self.playwright.base_url:
            values["base_url"] = self.playwright.base_url
        return values


def read_config_file(path: Path) -> ConfigFile:
    """Read and validate a JSON config file."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return ConfigFile.model_validate(raw)
    except (OSError, ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def find_project_root(start: Optional[Path] = None) -> Path:
    """Walk up from `start` to the directory holding the config file.

    A package.json declaring workspaces (monorepo root) also qualifies.
    Falls back to `start` (default: the current directory).
    """
    start = (start or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        if (directory / CONFIG_FILENAME).exists():
            return directory
        package_json = directory / "package.json"
        if package_json.exists():
            try:
                if json.loads(package_json.read_text(encoding="utf-8")).get("workspaces"):
                    return directory
            except (OSError, ValueError, AttributeError):
                continue
    return start


def load_config(project_root: Optional[str | Path] = None, **overrides) -> ProjectConfig:
    """Build the effective configuration for a project.

    Precedence (highest first): explicit overrides, the JSON config file,
    environment variables, defaults. An invalid config file is logged and
    ignored.
    """
    root = Path(project_root).resolve() if project_root else find_project_root()
    values: dict = {"project_root": root}

    config_path = root / CONFIG_FILENAME
    if config_path.exists():
        try:
            values.update(read_config_file(config_path).to_settings(root))
        except ConfigError as e:
            logger.error("Invalid config file, using defaults", path=str(config_path), error=str(e))

    values.update({key: value for key, value in overrides.items() if value is not None})
    return ProjectConfig(**values)
