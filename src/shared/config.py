"""Configuration management for the research assistant.

Supports YAML configuration files and environment variable overrides.
Configuration is loaded once and cached for performance.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """LLM provider configuration."""
    provider: str = Field(
        default="chat_completions",
        description="LLM provider: chat_completions, openai, mock"
    )
    model: str = Field(default="mistralai/Mixtral-8x7B-Instruct-v0.1", description="Model name")
    api_key: Optional[str] = Field(default=None, description="API key")
    api_base: Optional[str] = Field(default=None, description="OpenAI-compatible base URL")
    temperature: float = Field(default=0.5, ge=0, le=2)
    max_tokens: int = Field(default=800, gt=0)
    timeout_seconds: float = Field(default=60.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore"
    )


class GatewaySettings(BaseSettings):
    """Where the orchestrator finds the backend gateways."""
    directory_url: str = Field(default="http://localhost:8101")
    catalog_url: str = Field(default="http://localhost:8102")
    timeout_seconds: float = Field(default=30.0, gt=0)
    connect_attempts: int = Field(default=3, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_",
        env_file=".env",
        extra="ignore"
    )


class BackendSettings(BaseSettings):
    """Gateway server configuration and the upstream REST API they wrap."""
    host: str = Field(default="127.0.0.1")
    directory_port: int = Field(default=8101)
    catalog_port: int = Field(default=8102)
    api_base_url: str = Field(default="https://web.sercuarc.org/api")
    timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="BACKEND_",
        env_file=".env",
        extra="ignore"
    )


class OrchestratorSettings(BaseSettings):
    """HTTP surface of the orchestrator."""
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    model_config = SettingsConfigDict(
        env_prefix="ORCHESTRATOR_",
        env_file=".env",
        extra="ignore"
    )


class Settings(BaseSettings):
    """Main application settings."""
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Component settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    gateways: GatewaySettings = Field(default_factory=GatewaySettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        extra="ignore"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file, falling back to defaults.

        Nested sections are built through their own settings class so
        values missing from the file still come from the environment.
        """
        data = load_yaml_config(path)
        sections = {
            "llm": LLMSettings,
            "gateways": GatewaySettings,
            "backend": BackendSettings,
            "orchestrator": OrchestratorSettings,
        }
        for key, section_cls in sections.items():
            if isinstance(data.get(key), dict):
                data[key] = section_cls(**data[key])
        return cls(**data)


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file."""
    path = Path(path)
    if not path.exists():
        return {}

    with open(path) as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    config_path = os.environ.get("APP_CONFIG_PATH", "config/settings.yaml")
    return Settings.from_yaml(config_path)
