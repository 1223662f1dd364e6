# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for probes and database connection
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for database probes.
These can be overridden via environment variables or registration arguments.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote


@dataclass(frozen=True)
class ProbeDefaults:
    """
    Defaults applied when a probe is registered without overrides.
    """
    name: str = "postgres"
    health_query: str = "SELECT 1;"
    timeout_seconds: float = 5.0
    failure_status: str = "unhealthy"

    # Reported to the server as application_name for conninfo probes
    application_name: str = "health-probe"

    @classmethod
    def from_env(cls) -> "ProbeDefaults":
        """Create from environment variables."""
        return cls(
            name=os.getenv("PROBE_NAME", "postgres"),
            health_query=os.getenv("PROBE_HEALTH_QUERY", "SELECT 1;"),
            timeout_seconds=float(os.getenv("PROBE_TIMEOUT_SECONDS", 5.0)),
            failure_status=os.getenv("PROBE_FAILURE_STATUS", "unhealthy").lower(),
            application_name=os.getenv("PROBE_APPLICATION_NAME", "health-probe"),
        )


@dataclass(frozen=True)
class DatabaseDefaults:
    """
    Connection settings for the database being probed.

    DATABASE_URL wins over the individual POSTGRES_* components.
    """
    url: Optional[str] = None
    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    user: str = "postgres"
    password: str = field(default="", repr=False)
    sslmode: str = "prefer"

    def conninfo(self) -> str:
        """Build the PostgreSQL connection string."""
        if self.url:
            return self.url

        credentials = quote(self.user, safe="")
        if self.password:
            credentials += ":" + quote(self.password, safe="")

        return (
            f"postgresql://{credentials}@{self.host}:{self.port}/{self.database}"
            f"?sslmode={self.sslmode}"
        )

    @classmethod
    def from_env(cls) -> "DatabaseDefaults":
        """Create from environment variables."""
        return cls(
            url=os.getenv("DATABASE_URL") or None,
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", 5432)),
            database=os.getenv("POSTGRES_DB", "postgres"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            sslmode=os.getenv("POSTGRES_SSLMODE", "prefer"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    probe: ProbeDefaults = field(default_factory=ProbeDefaults)
    database: DatabaseDefaults = field(default_factory=DatabaseDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            probe=ProbeDefaults.from_env(),
            database=DatabaseDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ProbeDefaults",
    "DatabaseDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
