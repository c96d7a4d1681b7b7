"""Configuration models using Pydantic for validation."""
from typing import Dict, List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import os

from prom2json.errors import ConfigError


class FetchConfig(BaseModel):
    """Where and how to fetch exposition text."""
    url: Optional[str] = None
    timeout_s: float = 10.0
    verify_tls: bool = True
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Only http(s) endpoints can be scraped."""
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://, got '{v}'")
        return v


class OutputConfig(BaseModel):
    """JSON rendering options."""
    indent: Optional[int] = None
    pretty: bool = False

    def effective_indent(self) -> Optional[int]:
        if self.indent is not None:
            return self.indent
        return 2 if self.pretty else None


class APIConfig(BaseModel):
    """HTTP API configuration."""
    host: str = "0.0.0.0"
    port: int = 8082
    self_metrics_prefix: str = "prom2json_"
    # Hosts /convert may fetch besides fetch.url; empty means fetch.url only
    allowed_hosts: List[str] = Field(default_factory=list)


class GlobalConfig(BaseModel):
    """Global configuration settings."""
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Invalid log level: {v}")
        return level


class Config(BaseModel):
    """Root configuration model."""
    model_config = ConfigDict(populate_by_name=True)

    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    api: APIConfig = Field(default_factory=APIConfig)


def apply_env_overrides(raw_config: dict) -> dict:
    """Apply environment variable overrides to a raw config mapping."""
    if env_url := os.getenv('PROM2JSON_URL'):
        raw_config.setdefault('fetch', {})['url'] = env_url

    if env_log_level := os.getenv('LOG_LEVEL'):
        raw_config.setdefault('global', {})['log_level'] = env_log_level

    return raw_config


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate configuration from a YAML file.

    Without a path, defaults plus environment overrides are used.
    """
    import yaml

    raw_config = {}
    if config_path is not None:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        if not isinstance(raw_config, dict):
            raise ConfigError(f"Configuration file must contain a mapping: {config_path}")

    raw_config = apply_env_overrides(raw_config)

    try:
        return Config(**raw_config)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
