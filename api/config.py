"""
Well Pump Estimator API Configuration
Environment variable loading with validation and safe defaults
"""
import os
from dotenv import load_dotenv

from api.security_config import JWT_AUDIENCE

# Load environment variables
load_dotenv()


class ConfigError(Exception):
    """Configuration validation error"""
    pass


class Config:
    """Application configuration with environment variable validation"""

    # Database configuration
    DATABASE_URL: str = "sqlite:///./data/pump_estimator.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_ECHO: bool = False
    DB_AUTO_CREATE: bool = True

    # Application configuration
    APP_ENV: str = "development"
    APP_PORT: int = 8000
    APP_DEBUG: bool = True
    APP_LOG_LEVEL: str = "INFO"

    # Auth configuration
    JWT_SECRET: str = ""
    JWT_AUD: str = JWT_AUDIENCE

    # Rate limiting
    RATE_LIMIT_DEFAULT: str = "100/minute"

    LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    def __init__(self):
        """Initialize and validate configuration"""
        self._load_optional_env_vars()
        self._validate_config()

    @staticmethod
    def _env_bool(name: str, default: bool) -> bool:
        return os.getenv(name, str(default)).lower() in ("true", "1", "yes")

    def _load_optional_env_vars(self) -> None:
        """Load optional environment variables with defaults"""
        self.DATABASE_URL = os.getenv("DATABASE_URL", self.DATABASE_URL)
        self.DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", str(self.DB_POOL_SIZE)))
        self.DB_MAX_OVERFLOW = int(
            os.getenv("DB_MAX_OVERFLOW", str(self.DB_MAX_OVERFLOW))
        )
        self.DB_POOL_TIMEOUT = int(
            os.getenv("DB_POOL_TIMEOUT", str(self.DB_POOL_TIMEOUT))
        )
        self.DB_ECHO = self._env_bool("DB_ECHO", self.DB_ECHO)
        self.DB_AUTO_CREATE = self._env_bool("DB_AUTO_CREATE", self.DB_AUTO_CREATE)

        self.APP_ENV = os.getenv("APP_ENV", self.APP_ENV)
        self.APP_PORT = int(os.getenv("APP_PORT", str(self.APP_PORT)))
        self.APP_DEBUG = self._env_bool("APP_DEBUG", self.APP_DEBUG)
        self.APP_LOG_LEVEL = os.getenv("APP_LOG_LEVEL", self.APP_LOG_LEVEL).upper()

        self.JWT_SECRET = os.getenv("JWT_SECRET", self.JWT_SECRET)
        self.JWT_AUD = os.getenv("JWT_AUD", self.JWT_AUD)

        self.RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", self.RATE_LIMIT_DEFAULT)

    def _validate_config(self) -> None:
        """Validate configuration values"""
        if not self.DATABASE_URL.startswith(("sqlite", "postgres")):
            raise ConfigError(
                "Invalid DATABASE_URL: must start with sqlite://, postgres:// or postgresql://"
            )

        # Validate pool sizes
        if self.DB_POOL_SIZE < 1:
            raise ConfigError("DB_POOL_SIZE must be at least 1")

        if self.DB_MAX_OVERFLOW < 0:
            raise ConfigError("DB_MAX_OVERFLOW must be non-negative")

        if self.APP_LOG_LEVEL not in self.LOG_LEVELS:
            raise ConfigError(
                f"Invalid APP_LOG_LEVEL: must be one of {', '.join(self.LOG_LEVELS)}"
            )

        if self.is_production() and not self.JWT_SECRET:
            raise ConfigError("JWT_SECRET is required in production")

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.APP_ENV.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.APP_ENV.lower() == "development"


# Global configuration instance
config = Config()
