# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Infrastructure - Database health probe plugin
# PURPOSE: Check that a PostgreSQL server is reachable
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Module

Probe plugin that checks database reachability by opening a connection and
running a trivial query. Results are consumed by an external aggregator.

Architecture:
- HealthCheckPlugin: Base class for health checks
- HealthCheckRegistry: Registration and lookup by name, category, tag
- DatabaseProbe: Connect, run a command, release, report
- add_database_probe(): Registration helper

Usage:
    from health import add_database_probe

    probe = add_database_probe(conninfo="postgresql://app@db:5432/app")
    result = await probe.check()
    print(result.to_dict())
"""

from health.core import (
    HealthStatus,
    HealthCheckResult,
    HealthCheckPlugin,
    HealthCheckCategory,
    HealthCheckError,
)
from health.registry import (
    HealthCheckRegistry,
    register_check,
    get_registry,
)
from health.command import ProbeCommand, command_text, DEFAULT_HEALTH_QUERY
from health.connection import (
    ConnectionUnavailableError,
    ProbeConnection,
    conninfo_source,
)
from health.checks.database import DatabaseProbe, DatabaseProbeConfig
from health.builder import add_database_probe

__all__ = [
    # Core types
    "HealthStatus",
    "HealthCheckResult",
    "HealthCheckPlugin",
    "HealthCheckCategory",
    "HealthCheckError",
    # Registry
    "HealthCheckRegistry",
    "register_check",
    "get_registry",
    # Database probe
    "ProbeCommand",
    "command_text",
    "DEFAULT_HEALTH_QUERY",
    "ConnectionUnavailableError",
    "ProbeConnection",
    "conninfo_source",
    "DatabaseProbe",
    "DatabaseProbeConfig",
    "add_database_probe",
]
