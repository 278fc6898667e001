"""
Configuration management for the member search and statistics service.

This module provides centralized configuration management supporting:
- Environment variables and .env files
- Field visibility and role configuration
- Backend table names and verification service settings
"""

from functools import lru_cache
from typing import List, Optional, Tuple
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Main application settings with defaults suitable for local development.
    """

    # Environment Detection
    ENVIRONMENT: str = Field(
        default="local",
        description="Environment (local/development/production)"
    )
    DEBUG: bool = Field(
        default=False,
        description="Debug mode"
    )

    # Core Application Settings
    APP_NAME: str = Field(
        default="Member Search API",
        description="Application name"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # Security
    SECRET_KEY: Optional[str] = Field(
        default=None,
        description="JWT verification secret; tokens are rejected when unset"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT algorithm"
    )
    JWT_ROLES_CLAIM: str = Field(
        default="roles",
        description="Claim holding the caller's role names"
    )
    JWT_HANDLE_CLAIM: str = Field(
        default="handle",
        description="Claim holding the caller's member handle"
    )
    JWT_USER_ID_CLAIM: str = Field(
        default="userId",
        description="Claim holding the caller's member user id"
    )

    # Server Configuration
    HOST: str = Field(
        default="0.0.0.0",
        description="Server host"
    )
    PORT: int = Field(
        default=8000,
        description="Server port"
    )

    # CORS Configuration
    CORS_ORIGINS: str = Field(
        default="*",
        description="Comma-separated CORS origins"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    LOG_FORMAT: str = Field(
        default="console",
        description="Log format (json/console)"
    )

    # Search
    SEARCH_MAX_SIZE: int = Field(
        default=10000,
        ge=1,
        description="Maximum candidate window fetched from the profile index per search"
    )
    AUTOCOMPLETE_MAX_SIZE: int = Field(
        default=500,
        ge=1,
        description="Maximum number of suggestions requested from the profile index"
    )

    # Field visibility
    MEMBER_SECURE_FIELDS: str = Field(
        default="firstName,lastName,email,addresses,createdBy,updatedBy",
        description="Fields hidden from callers that are neither admin nor M2M"
    )
    COMMUNICATION_SECURE_FIELDS: str = Field(
        default="email",
        description="Fields hidden from callers without an autocomplete role"
    )

    # Roles
    ADMIN_ROLES: str = Field(
        default="administrator,admin",
        description="Comma-separated administrator role names"
    )
    AUTOCOMPLETE_ROLES: str = Field(
        default="copilot,administrator,admin,Connect Copilot,Connect Manager,Connect Admin,Connect Account Manager",
        description="Comma-separated roles allowed to see communication fields"
    )
    SEARCH_BY_EMAIL_ROLES: str = Field(
        default="administrator,admin,tgadmin,Connect Manager,Connect Admin",
        description="Comma-separated roles allowed to search members by email"
    )

    # Rating colors as "limit:color" pairs; ratings below a limit take its color
    RATING_COLOR_THRESHOLDS: str = Field(
        default="900:#9D9FA0,1200:#69C329,1500:#616BD5,2200:#FCD617",
        description="Ascending rating limits and their colors"
    )
    RATING_COLOR_TOP: str = Field(
        default="#EF3A3A",
        description="Color for ratings at or above the last limit"
    )

    # Verification service
    VERIFICATION_API_URL: Optional[str] = Field(
        default=None,
        description="Base URL of the member verification service (local stub when unset)"
    )
    VERIFICATION_API_TOKEN: Optional[str] = Field(
        default=None,
        description="Bearer token sent to the verification service"
    )
    VERIFICATION_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Verification request timeout"
    )
    VERIFICATION_MAX_CONCURRENCY: int = Field(
        default=10,
        ge=1,
        description="Maximum concurrent verification lookups per request"
    )

    # Key-value store tables
    MEMBER_STATS_TABLE: str = Field(default="MemberStats")
    MEMBER_STATS_PRIVATE_TABLE: str = Field(default="MemberStatsPrivate")
    MEMBER_HISTORY_STATS_TABLE: str = Field(default="MemberHistoryStats")
    MEMBER_HISTORY_STATS_PRIVATE_TABLE: str = Field(default="MemberHistoryStatsPrivate")
    MEMBER_DISTRIBUTION_STATS_TABLE: str = Field(default="MemberDistributionStats")
    MEMBER_ENTERED_SKILLS_TABLE: str = Field(default="MemberEnteredSkills")
    MEMBER_AGGREGATED_SKILLS_TABLE: str = Field(default="MemberAggregatedSkills")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate and normalize environment name."""
        v = v.lower()
        if v not in ('local', 'development', 'staging', 'production'):
            logger.warning(f"Unknown environment: {v}, defaulting to 'local'")
            return 'local'
        return v

    @field_validator('RATING_COLOR_THRESHOLDS')
    @classmethod
    def validate_rating_thresholds(cls, v: str) -> str:
        """Reject unparsable or unordered thresholds at startup."""
        limits = []
        for pair in _split_csv(v):
            limit, sep, color = pair.partition(":")
            if not sep or not color.strip():
                raise ValueError(f"Invalid rating color threshold: {pair}")
            limits.append(float(limit))
        if limits != sorted(limits):
            raise ValueError("RATING_COLOR_THRESHOLDS limits must be ascending")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == 'production'

    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == 'local'

    def get_cors_origins(self) -> List[str]:
        """Get CORS origins as a list."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    def get_member_secure_fields(self) -> List[str]:
        return _split_csv(self.MEMBER_SECURE_FIELDS)

    def get_communication_secure_fields(self) -> List[str]:
        return _split_csv(self.COMMUNICATION_SECURE_FIELDS)

    def get_admin_roles(self) -> List[str]:
        return _split_csv(self.ADMIN_ROLES)

    def get_autocomplete_roles(self) -> List[str]:
        return _split_csv(self.AUTOCOMPLETE_ROLES)

    def get_search_by_email_roles(self) -> List[str]:
        return _split_csv(self.SEARCH_BY_EMAIL_ROLES)

    def get_rating_color_thresholds(self) -> List[Tuple[float, str]]:
        """Get rating color thresholds as ascending (limit, color) pairs."""
        thresholds = []
        for pair in _split_csv(self.RATING_COLOR_THRESHOLDS):
            limit, _, color = pair.partition(":")
            thresholds.append((float(limit), color.strip()))
        return thresholds

    def is_verification_configured(self) -> bool:
        """Check if a remote verification service is configured."""
        return bool(self.VERIFICATION_API_URL)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings.

    Loads settings from environment variables and the .env file and returns a
    validated, cached Settings instance.
    """
    settings = Settings()

    logger.info(
        "Settings loaded",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        verification_configured=settings.is_verification_configured(),
        jwt_configured=bool(settings.SECRET_KEY),
    )

    return settings
