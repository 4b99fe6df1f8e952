"""
Application settings with environment-based configuration.

Priority (highest to lowest):
1. Environment variables (from .env or system)
2. Environment-specific YAML config file (development.yaml, test.yaml)
3. Default YAML config file (default.yaml)
4. Pydantic defaults
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Sensitive values (Redis password) should come from environment
    variables, not from YAML files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_NAME: str = Field(
        default="LifeVault",
        description="Application name embedded in challenge preambles",
    )
    APP_VERSION: str = "0.1.0"
    ENV: str = Field(default="development", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # Backend API
    API_BASE_URL: str = Field(
        default="http://localhost:5000/api",
        description="Backend API base URL",
    )
    LOGIN_ENDPOINT: str = Field(default="/auth/wallet")
    LINK_ENDPOINT: str = Field(default="/auth/link-wallet")
    HTTP_TIMEOUT_SECONDS: float = Field(
        default=15.0,
        gt=0,
        description="Backend request timeout in seconds",
    )

    # Wallet
    WALLET_NETWORK: str = Field(
        default="mainnet",
        description="Network reported by the local keypair provider",
    )
    CONNECT_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Max seconds to wait for the provider to connect",
    )

    # Orchestration
    CONCURRENT_ATTEMPT_POLICY: str = Field(
        default="join",
        description="Second call while in flight: join or reject",
    )

    # Session persistence
    SESSION_KEY: str = Field(default="token")
    SESSION_STORAGE: str = Field(
        default="file",
        description="Credential storage backend: memory, file or redis",
    )
    SESSION_FILE: str = Field(default="~/.sceau/session.json")

    # Redis
    REDIS_HOST: str = Field(default="localhost")
    REDIS_PORT: int = Field(default=6379, ge=1, le=65535)
    REDIS_DB: int = Field(default=0, ge=0, le=15)
    REDIS_PASSWORD: Optional[str] = Field(default=None)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)
    LOG_VERBOSE: int = Field(default=1, ge=0, le=3)

    # Observability - Metrics
    METRICS_ENABLED: bool = Field(
        default=True,
        description="Record Prometheus metrics for auth attempts",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Invalid LOG_LEVEL. Must be one of: {allowed}")
        return v_upper

    @field_validator("CONCURRENT_ATTEMPT_POLICY")
    @classmethod
    def validate_attempt_policy(cls, v: str) -> str:
        """Validate concurrent attempt policy."""
        allowed = ["join", "reject"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(
                f"Invalid CONCURRENT_ATTEMPT_POLICY. Must be one of: {allowed}"
            )
        return v_lower

    @field_validator("SESSION_STORAGE")
    @classmethod
    def validate_session_storage(cls, v: str) -> str:
        """Validate credential storage backend."""
        allowed = ["memory", "file", "redis"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid SESSION_STORAGE. Must be one of: {allowed}")
        return v_lower

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL."""
        return v.rstrip("/")


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Load configuration from YAML files and environment variables.

    Priority: ENV vars > environment-specific YAML > default YAML > defaults

    Args:
        config_file: Optional YAML config filename override
        env_file: Optional .env filename (e.g., ".env.development")
        env: Optional environment name override (e.g., "development", "test")

    Returns:
        Settings instance

    Raises:
        ValidationError: If a value fails validation
    """
    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = project_root / "config"

    environment = env or os.getenv("ENV", "development")

    env_map = {
        "production": (".env.production", "production.yaml"),
        "development": (".env.development", "development.yaml"),
        "test": (".env.test", "test.yaml"),
    }

    if env_file is None:
        default_env_file, default_config_file = env_map.get(
            environment, (".env.development", "development.yaml")
        )
        env_file = default_env_file
        if config_file is None:
            config_file = default_config_file

    env_file_path = project_root / env_file
    if env_file_path.exists():
        load_dotenv(env_file_path, override=True)

    default_config_path = config_dir / "default.yaml"
    merged_config = {}

    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = loaded

    if config_file:
        env_config_path = config_dir / config_file
        if env_config_path.exists():
            with open(env_config_path, "r") as f:
                loaded = yaml.safe_load(f)
                if loaded:
                    merged_config.update(loaded)

    # Environment variables win over YAML values
    for key in list(merged_config):
        if key in os.environ:
            merged_config.pop(key)

    return Settings(**merged_config)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or initialize global settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override global settings (for testing)."""
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None
