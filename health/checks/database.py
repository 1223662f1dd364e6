# ============================================================================
# DATABASE HEALTH PROBE
# ============================================================================
# STATUS: Infrastructure - PostgreSQL reachability probe
# PURPOSE: Open a connection, run a trivial query, report status
# CREATED: 19 OCT 2026
# ============================================================================
"""
Database Health Probe

DatabaseProbe checks that a PostgreSQL server answers a query:

1. Get a connection from the configured source (sync or async callable)
2. Open it if it is not open yet
3. Build a command from a cursor and apply the configured configurator
4. Execute it and discard the scalar result
5. Release the connection, whatever happened

Any error along the way, including the probe's own timeout and task
cancellation, becomes a result with the configured failure status.
check() never raises.

Usage:
    probe = DatabaseProbe(DatabaseProbeConfig(
        connection_source=conninfo_source("postgresql://app@db/app"),
        failure_status="degraded",
    ))
    result = await probe.check()
"""

import asyncio
import inspect
import logging
import time
import uuid
from datetime import timedelta
from typing import Any, Callable, FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.config import get_defaults
from core.logging import log_context
from health.core import (
    HealthCheckPlugin,
    HealthCheckResult,
    HealthCheckCategory,
    HealthStatus,
)
from health.command import (
    DEFAULT_HEALTH_QUERY,
    CommandConfigurator,
    ProbeCommand,
    command_text,
)
from health.connection import (
    ConnectionUnavailableError,
    ProbeConnection,
    as_probe_connection,
)

logger = logging.getLogger(__name__)


class DatabaseProbeConfig(BaseModel):
    """
    Immutable settings for one database probe.

    connection_source is called once per check and may return a
    ProbeConnection, a conninfo string, a psycopg AsyncConnection, an
    AsyncConnectionPool, an awaitable of any of these, or None.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    connection_source: Callable[[], Any] = Field(
        ...,
        description="Zero-argument callable producing the connection for a check",
    )
    configure_command: CommandConfigurator = Field(
        default=command_text(DEFAULT_HEALTH_QUERY),
        description="Sets text/params on the command before it runs",
    )
    name: str = Field(
        default="postgres",
        min_length=1,
        max_length=128,
        description="Name the probe is registered under",
    )
    failure_status: HealthStatus = Field(
        default=HealthStatus.UNHEALTHY,
        description="Status reported when the check fails",
    )
    tags: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Labels used to filter sets of checks",
    )
    timeout_seconds: float = Field(
        default_factory=lambda: get_defaults().probe.timeout_seconds,
        gt=0,
        description="Time budget for a whole check",
    )

    @field_validator("failure_status")
    @classmethod
    def validate_failure_status(cls, v: HealthStatus) -> HealthStatus:
        if v == HealthStatus.HEALTHY:
            raise ValueError("failure_status cannot be 'healthy'")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def handle_string_input(cls, v):
        """Allow single string as shorthand for single-item set."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("timeout_seconds", mode="before")
    @classmethod
    def handle_timedelta(cls, v):
        if isinstance(v, timedelta):
            return v.total_seconds()
        return v


class DatabaseProbe(HealthCheckPlugin):
    """
    PostgreSQL reachability probe.

    Holds no state between checks, so one instance can run concurrently.
    """

    category = HealthCheckCategory.DATABASE

    def __init__(self, config: DatabaseProbeConfig):
        self.config = config
        self.name = config.name
        self.failure_status = config.failure_status
        self.tags = config.tags
        self.timeout_seconds = config.timeout_seconds

    async def check(self) -> HealthCheckResult:
        check_id = uuid.uuid4().hex[:8]
        start_time = time.monotonic()

        with log_context(probe=self.name, check_id=check_id, operation="check"):
            try:
                await asyncio.wait_for(self._probe(), timeout=self.timeout_seconds)
            except asyncio.TimeoutError as e:
                # A TimeoutError raised by the source or driver keeps its own message
                if time.monotonic() - start_time >= self.timeout_seconds:
                    message = f"Timeout after {self.timeout_seconds}s"
                else:
                    message = None
                result = HealthCheckResult.from_exception(
                    e,
                    status=self.failure_status,
                    message=message,
                )
            except asyncio.CancelledError as e:
                task = asyncio.current_task()
                if task is not None and hasattr(task, "uncancel"):
                    task.uncancel()
                result = HealthCheckResult.from_exception(
                    e,
                    status=self.failure_status,
                    message="Check cancelled",
                )
            except Exception as e:
                result = HealthCheckResult.from_exception(e, status=self.failure_status)
            else:
                result = HealthCheckResult.healthy()

            result.duration_ms = (time.monotonic() - start_time) * 1000

            if result.is_healthy:
                logger.debug(
                    f"Health check {self.name}: {result.status.value} "
                    f"({result.duration_ms:.1f}ms)"
                )
            else:
                logger.warning(
                    f"Health check {self.name} failed: {result.message}",
                    extra={"extra": {
                        "status": result.status.value,
                        "exception_type": result.details.get("exception_type"),
                        "duration_ms": round(result.duration_ms, 2),
                    }},
                )

            return result

    async def _probe(self) -> None:
        connection = await self._acquire()
        if connection is None:
            raise ConnectionUnavailableError("Database connection cannot be None")

        try:
            if not connection.is_open:
                await connection.open()

            async with connection.cursor() as cursor:
                command = ProbeCommand(cursor=cursor)
                self.config.configure_command(command)
                # Value ignored: answering at all is healthy
                await command.execute_scalar()
        except BaseException:
            await self._release_after_error(connection)
            raise

        await connection.release()

    async def _acquire(self) -> ProbeConnection:
        source = self.config.connection_source()
        if inspect.isawaitable(source):
            source = await source
        try:
            return as_probe_connection(source)
        except TypeError:
            await self._close_unsupported(source)
            raise

    async def _close_unsupported(self, source: Any) -> None:
        # e.g. a sync psycopg.Connection handed back by the factory
        close = getattr(source, "close", None)
        if not callable(close):
            return
        try:
            closed = close()
            if inspect.isawaitable(closed):
                await closed
        except Exception as e:
            logger.warning(
                f"Failed to close unsupported {type(source).__name__} for {self.name}: {e}"
            )

    async def _release_after_error(self, connection: ProbeConnection) -> None:
        # The original error is what gets reported
        try:
            await connection.release()
        except Exception as e:
            logger.warning(f"Failed to release connection for {self.name}: {e}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DatabaseProbeConfig",
    "DatabaseProbe",
]
