"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with a local SQLite file and production‑safe error
reporting.  Override them via environment variables in deployment.
"""

import os
from dataclasses import dataclass, field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Feature Admin API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))

    # ``development`` enables detailed error responses (message and
    # traceback) from the global exception handler.
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "production"))
    debug: bool = field(default_factory=lambda: _env_flag("DEBUG"))
    enable_detailed_errors: bool = field(default_factory=lambda: _env_flag("DETAILED_ERRORS"))

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))

    # Path or connection string for the SQLite database.  Relative paths
    # are resolved against the project root by the ``db`` module.
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "feature_admin.db"))

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def detailed_errors(self) -> bool:
        """Whether error responses may include exception text and tracebacks."""
        return self.enable_detailed_errors or self.debug or self.is_development


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings


def reload_settings() -> Settings:
    """Re-read the environment into the shared settings instance.

    The instance is updated in place so modules holding a reference to
    ``settings`` observe the new values.
    """
    fresh = Settings()
    for name in fresh.__dataclass_fields__:
        setattr(settings, name, getattr(fresh, name))
    return settings
