"""
Configuration management for pageclip using Pydantic.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, List, Literal, Optional, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

DEFAULT_CONTENT_SELECTORS = ["article", ".article-content", ".post-content", ".content", "main"]

# --- Nested Configuration Models ---


class FetchConfig(BaseModel):
    """Page retrieval configuration."""

    timeout: float = Field(default=30.0, gt=0, description="Per-attempt HTTP timeout in seconds.")
    max_retries: int = Field(
        default=0,
        ge=0,
        description="Extra attempts after the first one. 0 means a single network attempt.",
    )
    backoff_factor: float = Field(
        default=1.0, ge=0, description="Base delay in seconds for exponential backoff between retries."
    )
    max_redirects: int = Field(default=10, ge=0, description="Maximum redirects followed per request.")
    raise_for_status: bool = Field(default=True, description="Treat non-2xx responses as fetch failures.")
    user_agent: Optional[str] = Field(
        default=None,
        description="User-Agent header to send. None leaves the HTTP client default in place.",
    )
    allowed_schemes: List[str] = Field(default=["http", "https"], description="URL schemes accepted for fetching.")

    @field_validator("allowed_schemes")
    @classmethod
    def normalize_schemes(cls, v: List[str]) -> List[str]:
        """Lower-case schemes and refuse an empty list."""
        schemes = [scheme.strip().lower() for scheme in v if scheme.strip()]
        if not schemes:
            raise ValueError("allowed_schemes must contain at least one scheme")
        return schemes


class ExtractionSettings(BaseModel):
    """Configuration for the page content extractor."""

    parser: Literal["html.parser", "lxml", "html5lib"] = Field(
        default="html.parser", description="BeautifulSoup tree builder used to parse pages."
    )
    content_selectors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTENT_SELECTORS),
        description="CSS selectors tried in order for the main content container.",
    )
    paragraph_fallback_count: int = Field(
        default=3, ge=0, description="Number of leading <p> elements used when no container matches."
    )
    preserve_paragraph_breaks: bool = Field(
        default=True,
        description="Keep blank-line paragraph breaks while collapsing whitespace.",
    )

    @field_validator("content_selectors")
    @classmethod
    def validate_selectors(cls, v: List[str]) -> List[str]:
        """Ensure at least one content selector is configured."""
        selectors = [selector.strip() for selector in v if selector.strip()]
        if not selectors:
            raise ValueError("content_selectors must contain at least one selector")
        return selectors


class WebConfig(BaseModel):
    """Configuration for the HTTP API."""

    host: str = Field(default="127.0.0.1", description="Host for the web server.")
    port: int = Field(default=8000, description="Port for the web server.")


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )
    web: WebConfig = Field(default_factory=WebConfig)

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "pageclip"
    version: str = "0.1.0"
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="PAGECLIP_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "pageclip.yaml",
        current_dir / "pageclip.yml",
        current_dir / "config.yaml",
        current_dir / "config.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


# --- Lazy Configuration Loader ---


class LazyConfig:
    """
    A proxy for the Config object that delays loading and validation until an
    attribute is first accessed, so a bad config file cannot break imports.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        if self.__class__._config is None:
            with self.__class__._lock:
                if self.__class__._config is None:
                    self.__class__._config = self._load_config_with_fallback()
        return getattr(self.__class__._config, name)

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded configuration so the next access reloads it."""
        with cls._lock:
            cls._config = None

    def _load_config_with_fallback(self) -> Config:
        """Load configuration from file or fall back to defaults."""
        config_path = find_config_file()
        if config_path:
            try:
                log.info("Lazy loading configuration from: %s", config_path)
                return Config.from_yaml(config_path)
            except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
                log.error(
                    "Failed to load or validate configuration from '%s': %s. "
                    "Falling back to default settings. Please check your config file.",
                    config_path,
                    e,
                    exc_info=log.getEffectiveLevel() <= logging.DEBUG,
                )
        else:
            log.info("No config file found. Using default settings for lazy load.")

        try:
            return Config()
        except ValidationError as e:
            log.critical("FATAL: Default configuration is invalid: %s", e, exc_info=True)
            raise RuntimeError(f"Default configuration is invalid, cannot start: {e}") from e


# --- Global Settings Instance ---
settings: "Config" = cast("Config", LazyConfig())
