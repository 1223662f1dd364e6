# ============================================================================
# DATABASE PROBE REGISTRATION
# ============================================================================
# STATUS: Infrastructure - Registration helpers for database probes
# PURPOSE: Build a DatabaseProbe from keyword options and register it
# CREATED: 19 OCT 2026
# ============================================================================
"""
Database Probe Registration

Usage:
    # Connection string, default query (SELECT 1;)
    add_database_probe(conninfo="postgresql://app@db:5432/app")

    # Connection string resolved per check, custom query
    add_database_probe(
        conninfo=lambda: vault.read("db/dsn"),
        health_query="SELECT 1 FROM pg_database LIMIT 1",
        name="orders-db",
        failure_status="degraded",
        tags=["db", "ready"],
        timeout=timedelta(seconds=3),
    )

    # Factory (sync or async) returning a connection or a pool
    add_database_probe(connection_factory=lambda: pool)
"""

import logging
from datetime import timedelta
from typing import Any, Callable, Iterable, Optional, Union

from core.config import get_defaults
from health.command import CommandConfigurator, command_text
from health.connection import ConninfoConnection, conninfo_source
from health.core import HealthStatus
from health.checks.database import DatabaseProbe, DatabaseProbeConfig
from health.registry import HealthCheckRegistry, get_registry

logger = logging.getLogger(__name__)


def add_database_probe(
    registry: Optional[HealthCheckRegistry] = None,
    *,
    conninfo: Union[str, Callable[[], str], None] = None,
    connection_factory: Optional[Callable[[], Any]] = None,
    health_query: Optional[str] = None,
    configure_command: Optional[CommandConfigurator] = None,
    configure_connection: Optional[Callable[[ConninfoConnection], None]] = None,
    name: Optional[str] = None,
    failure_status: Union[HealthStatus, str, None] = None,
    tags: Optional[Iterable[str]] = None,
    timeout: Union[float, timedelta, None] = None,
) -> DatabaseProbe:
    """
    Register a PostgreSQL health probe.

    Args:
        registry: Target registry (global registry if None)
        conninfo: Connection string, or callable returning one per check
        connection_factory: Sync or async callable returning a connection,
            a pool or a ProbeConnection
        health_query: Query to run. Defaults to SELECT 1;
        configure_command: Callable that configures the ProbeCommand
            (instead of health_query)
        configure_connection: Called with the unopened connection before it
            is opened (conninfo only)
        name: Probe name. Defaults to 'postgres'
        failure_status: Status reported on failure. Defaults to unhealthy
        tags: Labels used to filter sets of checks
        timeout: Time budget for a check, in seconds or as a timedelta

    Returns:
        The registered probe

    Raises:
        ValueError: If the connection source or options are inconsistent
    """
    if (conninfo is None) == (connection_factory is None):
        raise ValueError("Exactly one of conninfo or connection_factory is required")

    if health_query is not None and configure_command is not None:
        raise ValueError("Pass either health_query or configure_command, not both")

    if configure_connection is not None and conninfo is None:
        raise ValueError("configure_connection requires conninfo")

    if connection_factory is not None and not callable(connection_factory):
        raise ValueError("connection_factory must be callable")

    defaults = get_defaults().probe

    if conninfo is not None:
        source = conninfo_source(
            conninfo,
            configure_connection=configure_connection,
            application_name=defaults.application_name,
        )
    else:
        source = connection_factory

    if configure_command is None:
        configure_command = command_text(
            health_query if health_query is not None else defaults.health_query
        )

    config = DatabaseProbeConfig(
        connection_source=source,
        configure_command=configure_command,
        name=name or defaults.name,
        failure_status=failure_status or defaults.failure_status,
        tags=frozenset() if tags is None else tags,
        timeout_seconds=timeout if timeout is not None else defaults.timeout_seconds,
    )

    probe = DatabaseProbe(config)
    if registry is None:
        registry = get_registry()
    registry.register(probe)

    logger.info(
        f"Registered database probe {probe.name} "
        f"(failure_status={probe.failure_status.value}, timeout={probe.timeout_seconds}s)"
    )
    return probe


__all__ = [
    "add_database_probe",
]
