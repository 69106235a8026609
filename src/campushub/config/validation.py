"""Configuration validation for startup checks.

Validates that required configuration is present and consistent before the
application starts accepting requests.

Usage:
    from campushub.config.validation import validate_or_raise

    # During startup
    validate_or_raise()
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from campushub.config.settings import Settings, get_settings
from campushub.utils.exceptions import ConfigurationError

logger = structlog.get_logger("campushub.config")


class ValidationSeverity(str, Enum):
    """Severity of configuration validation issues."""

    ERROR = "error"  # Must be fixed, app cannot start
    WARNING = "warning"  # Should be fixed, app can start but may have issues


@dataclass
class ValidationResult:
    """Result of a configuration validation check."""

    field: str
    severity: ValidationSeverity
    message: str
    suggestion: str | None = None

    def __str__(self) -> str:
        prefix = "ERROR" if self.severity == ValidationSeverity.ERROR else "WARNING"
        result = f"[{prefix}] {self.field}: {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result


def validate_configuration(settings: Settings | None = None) -> list[ValidationResult]:
    """Validate application configuration.

    Args:
        settings: Settings to validate (default: global settings)

    Returns:
        List of validation results (empty if all checks pass)
    """
    if settings is None:
        settings = get_settings()

    results: list[ValidationResult] = []
    results.extend(_validate_database(settings))
    results.extend(_validate_api(settings))
    results.extend(_validate_search(settings))
    results.extend(_validate_environment(settings))
    return results


def validate_or_raise(settings: Settings | None = None) -> None:
    """Validate configuration and raise if errors found.

    Args:
        settings: Settings to validate

    Raises:
        ConfigurationError: If any validation errors are found
    """
    results = validate_configuration(settings)
    errors = [r for r in results if r.severity == ValidationSeverity.ERROR]

    if errors:
        error_messages = "\n".join(str(e) for e in errors)
        raise ConfigurationError(f"Configuration validation failed:\n{error_messages}")

    for warning in (r for r in results if r.severity == ValidationSeverity.WARNING):
        logger.warning("configuration_warning", field=warning.field, detail=warning.message)


# =============================================================================
# Validators
# =============================================================================


def _validate_database(settings: Settings) -> list[ValidationResult]:
    """Validate database configuration."""
    results: list[ValidationResult] = []

    if not settings.DATABASE_URL:
        results.append(
            ValidationResult(
                field="DATABASE_URL",
                severity=ValidationSeverity.ERROR,
                message="Database URL is not configured",
                suggestion="Set DATABASE_URL environment variable",
            )
        )
    elif not settings.DATABASE_URL.startswith(("postgresql", "sqlite")):
        results.append(
            ValidationResult(
                field="DATABASE_URL",
                severity=ValidationSeverity.WARNING,
                message=f"Unexpected database type in URL: {settings.DATABASE_URL[:20]}...",
                suggestion="CampusHub search expects PostgreSQL (SQLite only for tests)",
            )
        )
    elif not settings.is_postgres and settings.ENVIRONMENT in ("staging", "production"):
        results.append(
            ValidationResult(
                field="DATABASE_URL",
                severity=ValidationSeverity.ERROR,
                message="Full-text search requires PostgreSQL outside development",
                suggestion="Point DATABASE_URL at a postgresql+asyncpg:// database",
            )
        )

    if settings.DATABASE_POOL_SIZE < 1:
        results.append(
            ValidationResult(
                field="DATABASE_POOL_SIZE",
                severity=ValidationSeverity.ERROR,
                message=f"Pool size must be positive, got {settings.DATABASE_POOL_SIZE}",
            )
        )
    elif settings.DATABASE_POOL_SIZE > 100:
        results.append(
            ValidationResult(
                field="DATABASE_POOL_SIZE",
                severity=ValidationSeverity.WARNING,
                message=f"Pool size {settings.DATABASE_POOL_SIZE} may be excessive",
                suggestion="Consider reducing to prevent database connection exhaustion",
            )
        )

    return results


def _validate_api(settings: Settings) -> list[ValidationResult]:
    """Validate API configuration."""
    results: list[ValidationResult] = []

    if not (1 <= settings.API_PORT <= 65535):
        results.append(
            ValidationResult(
                field="API_PORT",
                severity=ValidationSeverity.ERROR,
                message=f"Invalid port number: {settings.API_PORT}",
                suggestion="Use a port between 1 and 65535",
            )
        )

    if settings.ENVIRONMENT == "production" and "*" in settings.CORS_ORIGINS:
        results.append(
            ValidationResult(
                field="CORS_ORIGINS",
                severity=ValidationSeverity.ERROR,
                message="Wildcard CORS origin not allowed in production",
                suggestion="Specify exact allowed origins",
            )
        )

    return results


def _validate_search(settings: Settings) -> list[ValidationResult]:
    """Validate search configuration."""
    results: list[ValidationResult] = []
    search = settings.search

    if search.headline_min_words >= search.headline_max_words:
        results.append(
            ValidationResult(
                field="search.headline_min_words",
                severity=ValidationSeverity.ERROR,
                message=(
                    f"Headline MinWords ({search.headline_min_words}) must be below "
                    f"MaxWords ({search.headline_max_words})"
                ),
                suggestion="ts_headline rejects MinWords >= MaxWords",
            )
        )

    return results


def _validate_environment(settings: Settings) -> list[ValidationResult]:
    """Validate environment-specific settings."""
    results: list[ValidationResult] = []

    if settings.ENVIRONMENT == "production" and settings.DEBUG:
        results.append(
            ValidationResult(
                field="DEBUG",
                severity=ValidationSeverity.ERROR,
                message="Debug mode must be disabled in production",
                suggestion="Set DEBUG=false for production",
            )
        )

    if settings.ENVIRONMENT == "production" and settings.log_level == "DEBUG":
        results.append(
            ValidationResult(
                field="log_level",
                severity=ValidationSeverity.WARNING,
                message="DEBUG log level in production logs every search query",
                suggestion="Use INFO or WARNING for production",
            )
        )

    return results


def get_configuration_summary(settings: Settings | None = None) -> dict[str, Any]:
    """Get a summary of current configuration (safe for logging).

    Excludes the connection string, which may carry credentials.
    """
    if settings is None:
        settings = get_settings()

    return {
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG,
        "log_level": settings.log_level,
        "api_host": settings.API_HOST,
        "api_port": settings.API_PORT,
        "database_backend": "postgresql" if settings.is_postgres else "other",
        "database_schema": settings.DATABASE_SCHEMA,
        "database_pool_size": settings.DATABASE_POOL_SIZE,
        "search_result_limit": settings.search.result_limit,
        "search_vocabulary_size": settings.search.vocabulary_size,
        "search_text_config": settings.search.text_search_config,
    }
