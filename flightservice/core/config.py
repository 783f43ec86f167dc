"""
Configuration settings for the Acme Air Flight Service
"""

import hashlib
import logging
from typing import List, Optional, Dict, Any
from enum import Enum
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    """Supported environment types"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with validation"""

    # API Configuration
    API_TITLE: str = Field(default="Acme Air Flight Service", description="API title")
    API_VERSION: str = Field(default="1.0.0", description="API version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=9080, ge=1, le=65535, description="API port")

    # CORS Configuration (stored as string, parsed to list)
    CORS_ORIGINS_STR: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)",
        alias="CORS_ORIGINS"
    )

    # Logging Configuration
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level"
    )

    # Environment Configuration
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )

    # Request Signing Configuration
    SECURE_SERVICE_CALLS: bool = Field(
        default=True,
        description="Verify acmeair-* signature headers on signed endpoints"
    )
    SIGNATURE_SECRET: str = Field(
        default="",
        description="Shared secret for request signatures"
    )
    SIGNATURE_DIGEST: str = Field(
        default="sha256",
        description="hashlib algorithm used for body hashes and HMAC signatures"
    )
    SIGNATURE_MAX_SKEW_SECONDS: int = Field(
        default=300,
        ge=1,
        le=86400,
        description="Maximum allowed difference between acmeair-date and server time"
    )

    # Flight Data Configuration
    FLIGHT_DATA_FILE: Optional[str] = Field(
        default=None,
        description="Optional JSON file used to load the in-memory flight data"
    )

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Get CORS origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(',') if origin.strip()]

    @field_validator('SIGNATURE_DIGEST')
    @classmethod
    def validate_signature_digest(cls, v: str) -> str:
        """Validate that the digest is available on every platform"""
        normalized = v.strip().lower()
        if normalized not in hashlib.algorithms_guaranteed:
            raise ValueError(
                f"SIGNATURE_DIGEST must be one of {sorted(hashlib.algorithms_guaranteed)}"
            )
        if normalized.startswith("shake_"):
            raise ValueError("SIGNATURE_DIGEST must be a fixed-length digest")
        return normalized

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def validate_log_level(cls, v) -> str:
        """Validate and normalize log level"""
        if isinstance(v, str):
            return v.upper()
        return v

    @model_validator(mode='after')
    def validate_environment_specific_settings(self) -> 'Settings':
        """Validate environment-specific configuration"""
        if self.ENVIRONMENT == Environment.PRODUCTION:
            if any('localhost' in origin for origin in self.CORS_ORIGINS):
                logging.warning(
                    "Production environment detected with localhost CORS origins. "
                    "Consider updating CORS_ORIGINS for production."
                )

            if not self.SECURE_SERVICE_CALLS:
                logging.warning(
                    "SECURE_SERVICE_CALLS is disabled in production environment. "
                    "Signed endpoints will accept unsigned requests."
                )

        return self

    def get_environment_config(self) -> Dict[str, Any]:
        """Get environment-specific configuration"""
        if self.ENVIRONMENT == Environment.PRODUCTION:
            return {
                'log_level': LogLevel.INFO.value,
                'enable_docs': False,
            }

        return {
            'log_level': self.LOG_LEVEL,
            'enable_docs': True,
        }

    def validate_required_settings(self) -> None:
        """Validate that all required settings are present and valid"""
        errors = []

        if self.SECURE_SERVICE_CALLS and not self.SIGNATURE_SECRET:
            errors.append("SIGNATURE_SECRET is required when SECURE_SERVICE_CALLS is enabled")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def get_signature_config(self) -> Dict[str, Any]:
        """Get request signing configuration"""
        return {
            'enabled': self.SECURE_SERVICE_CALLS,
            'digest': self.SIGNATURE_DIGEST,
            'max_skew_seconds': self.SIGNATURE_MAX_SKEW_SECONDS,
        }

    def mask_sensitive_data(self) -> Dict[str, Any]:
        """Get configuration with sensitive data masked for logging"""
        config = self.model_dump()

        if config.get('SIGNATURE_SECRET'):
            config['SIGNATURE_SECRET'] = "***"

        return config

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "validate_assignment": True,
        "use_enum_values": True,
        "env_parse_none_str": "None",
        "populate_by_name": True,
        "extra": "ignore",
    }


def get_settings() -> Settings:
    """Get validated settings instance"""
    settings = Settings()
    settings.validate_required_settings()
    return settings


# Global settings instance - will be initialized when first accessed
settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Get or create global settings instance"""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
