"""
Configuration Management for VidTube
Environment-driven settings with optional YAML overrides
"""

import re
import yaml
import logging
import threading
from datetime import timedelta
from pathlib import Path
from typing import Dict, Any, Optional, Literal, List
from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_SECRET = "change-me"

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days", "": "seconds"}


def parse_duration(value: str) -> timedelta:
    """
    Parse an expiry string such as "15m", "1d" or "3600"

    Args:
        value: Integer followed by an optional unit (s, m, h, d)

    Returns:
        Matching timedelta

    Raises:
        ValueError: If the string is not a valid duration
    """
    match = _DURATION_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


# ============================================================================
# Core Configuration Classes
# ============================================================================


class AppSettings(BaseSettings):
    """Application environment"""

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=".env", extra="ignore")

    env: Literal["development", "production", "test"] = Field(
        default="development", description="Runtime environment"
    )
    name: str = Field(default="VidTube", description="Application name")

    @property
    def is_production(self) -> bool:
        return self.env == "production"


class APIConfig(BaseSettings):
    """API Server Configuration"""

    model_config = SettingsConfigDict(env_prefix="API_", env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=8000, description="API port")
    prefix: str = Field(default="/api/v1", description="API prefix")
    debug: bool = Field(default=False, description="Debug mode")
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="CORS allowed origins (comma-separated)",
    )
    max_json_body_bytes: int = Field(
        default=16 * 1024, description="Maximum accepted JSON body size"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into list"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class DatabaseConfig(BaseSettings):
    """Database Configuration"""

    model_config = SettingsConfigDict(env_prefix="DB_", env_file=".env", extra="ignore")

    url: str = Field(
        default="sqlite+aiosqlite:///./vidtube.db", description="Database URL"
    )
    echo: bool = Field(default=False, description="Echo SQL queries")
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Max overflow connections")


class AuthConfig(BaseSettings):
    """Token and cookie configuration"""

    model_config = SettingsConfigDict(env_prefix="AUTH_", env_file=".env", extra="ignore")

    access_token_secret: str = Field(
        default=DEFAULT_SECRET, description="HMAC secret for access tokens"
    )
    access_token_expiry: str = Field(default="1d", description="Access token lifetime")
    refresh_token_secret: str = Field(
        default=DEFAULT_SECRET + "-refresh",
        description="HMAC secret for refresh tokens",
    )
    refresh_token_expiry: str = Field(
        default="10d", description="Refresh token lifetime"
    )
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    cookie_secure: bool = Field(default=True, description="Mark auth cookies secure")

    @field_validator("access_token_expiry", "refresh_token_expiry")
    @classmethod
    def validate_expiry(cls, v: str) -> str:
        parse_duration(v)
        return v

    @property
    def access_token_lifetime(self) -> timedelta:
        return parse_duration(self.access_token_expiry)

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return parse_duration(self.refresh_token_expiry)


class MediaConfig(BaseSettings):
    """Media host (Cloudinary) configuration"""

    model_config = SettingsConfigDict(env_prefix="MEDIA_", env_file=".env", extra="ignore")

    cloud_name: str = Field(default="", description="Cloudinary cloud name")
    api_key: str = Field(default="", description="Cloudinary API key")
    api_secret: str = Field(default="", description="Cloudinary API secret")
    folder: str = Field(default="vidtube/uploads", description="Upload folder")
    base_url: str = Field(
        default="https://api.cloudinary.com/v1_1", description="Upload API base URL"
    )
    timeout_seconds: float = Field(default=60.0, description="Request timeout")
    upload_dir: str = Field(
        default="./public/temp", description="Local staging directory for uploads"
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


class LoggingConfig(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    file_path: Optional[str] = Field(
        default="./logs/vidtube.log", description="Log file path"
    )


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config:
    """
    Main Application Configuration
    Aggregates all configuration modules with unified access
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize application configuration

        Args:
            config_path: Optional YAML config file path
        """
        self.config_path = config_path or "configs/app.yaml"
        self.yaml_config = self._load_yaml_config()

        self.app = AppSettings()
        self.api = APIConfig()
        self.database = DatabaseConfig()
        self.auth = AuthConfig()
        self.media = MediaConfig()
        self.logging = LoggingConfig()

    def _load_yaml_config(self) -> Dict[str, Any]:
        """Load YAML configuration file"""
        config_file = Path(self.config_path)

        if not config_file.exists():
            logger.debug(f"Config file not found: {config_file}, using defaults")
            return {}

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config: {e}")
            return {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key"""
        value = self.yaml_config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration summary (no secrets)"""
        return {
            "app": {"env": self.app.env, "name": self.app.name},
            "api": {
                "host": self.api.host,
                "port": self.api.port,
                "prefix": self.api.prefix,
                "debug": self.api.debug,
            },
            "database": {"url": self.database.url.split("/")[-1]},
            "auth": {
                "access_token_expiry": self.auth.access_token_expiry,
                "refresh_token_expiry": self.auth.refresh_token_expiry,
                "cookie_secure": self.auth.cookie_secure,
            },
            "media": {
                "configured": self.media.is_configured,
                "folder": self.media.folder,
            },
        }


# ============================================================================
# Global Configuration Instance (Singleton)
# ============================================================================

_config: Optional[Config] = None
_config_lock = threading.Lock()


@lru_cache()
def get_config(config_path: Optional[str] = None) -> Config:
    """
    Get or create global configuration instance (Thread-safe singleton)

    Args:
        config_path: Optional path to config file

    Returns:
        Config instance
    """
    global _config

    if _config is None:
        with _config_lock:
            if _config is None:
                _config = Config(config_path)
                logger.info("✅ Configuration initialized")

    return _config


def reload_config(config_path: Optional[str] = None) -> Config:
    """Force reload configuration"""
    global _config

    with _config_lock:
        get_config.cache_clear()
        _config = Config(config_path)
        logger.info("🔄 Configuration reloaded")

    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)"""
    global _config

    with _config_lock:
        get_config.cache_clear()
        _config = None


# ============================================================================
# Configuration Validation
# ============================================================================


def validate_config(config: Optional[Config] = None) -> Dict[str, Any]:
    """
    Validate configuration

    Args:
        config: Config instance (uses global if None)

    Returns:
        Validation result with errors and warnings
    """
    if config is None:
        config = get_config()

    errors = []
    warnings = []

    if not config.database.url:
        errors.append("Database URL not configured")

    if config.auth.access_token_secret == config.auth.refresh_token_secret:
        errors.append("Access and refresh token secrets must differ")

    if config.auth.access_token_lifetime >= config.auth.refresh_token_lifetime:
        warnings.append("Access token lifetime is not shorter than refresh lifetime")

    if config.auth.access_token_secret.startswith(DEFAULT_SECRET):
        if config.app.is_production:
            errors.append("AUTH_ACCESS_TOKEN_SECRET must be set in production")
        else:
            warnings.append("Using default access token secret")

    if config.auth.refresh_token_secret.startswith(DEFAULT_SECRET):
        if config.app.is_production:
            errors.append("AUTH_REFRESH_TOKEN_SECRET must be set in production")
        else:
            warnings.append("Using default refresh token secret")

    if not config.media.is_configured:
        warnings.append("Media host credentials not set - uploads will fail")

    if config.logging.file_path:
        log_path = Path(config.logging.file_path)
        if not log_path.parent.exists():
            try:
                log_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Cannot create log directory: {e}")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def setup_logging(config: Optional[Config] = None) -> None:
    """
    Setup logging based on configuration

    Args:
        config: Config instance (uses global if None)
    """
    import logging.handlers

    if config is None:
        config = get_config()

    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(config.logging.format))
    root_logger.addHandler(console_handler)

    if config.logging.file_path:
        log_path = Path(config.logging.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(config.logging.format))
        root_logger.addHandler(file_handler)

    logger.info(f"📝 Logging configured: level={config.logging.level}")
