# ============================================================================
# PROBE CONNECTIONS
# ============================================================================
# STATUS: Infrastructure - Connection handles for database probes
# PURPOSE: Normalise connection sources into one open/cursor/release handle
# CREATED: 19 OCT 2026
# ============================================================================
"""
Probe Connections

A probe may be given a connection in several shapes. Each is wrapped in a
ProbeConnection so the probe can treat them the same way:

- str                  -> ConninfoConnection (new connection per check)
- psycopg.AsyncConnection -> ExistingConnection (closed after the check)
- AsyncConnectionPool  -> PooledConnection (borrowed, returned to the pool)

Usage:
    connection = as_probe_connection("postgresql://app@db:5432/app")
    if not connection.is_open:
        await connection.open()
    try:
        async with connection.cursor() as cur:
            await cur.execute("SELECT 1")
    finally:
        await connection.release()
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Union

import psycopg
from psycopg import AsyncConnection, AsyncCursor
from psycopg.conninfo import conninfo_to_dict, make_conninfo
from psycopg_pool import AsyncConnectionPool

from health.core import HealthCheckError

logger = logging.getLogger(__name__)


class ConnectionUnavailableError(HealthCheckError):
    """Raised when a connection source yields no usable connection."""
    pass


def mask_conninfo(conninfo: str) -> str:
    """Return conninfo with the password replaced, safe for logs."""
    try:
        params = conninfo_to_dict(conninfo)
    except psycopg.ProgrammingError:
        return "<invalid conninfo>"

    if "password" in params:
        params["password"] = "***"
    return make_conninfo(**params)


class ProbeConnection(ABC):
    """Connection handle used by a single probe invocation."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True if the handle is ready for cursor()."""

    @abstractmethod
    async def open(self) -> None:
        """Open the connection. Cancellable."""

    @abstractmethod
    def cursor(self) -> AsyncCursor:
        """Create a cursor on the open connection."""

    @abstractmethod
    async def release(self) -> None:
        """Give the connection back. Safe to call when not open."""


class ConninfoConnection(ProbeConnection):
    """
    Connection built from a conninfo string.

    Created unopened. connect_kwargs may be changed until open() is called,
    which is what before-open configurers use.
    """

    def __init__(self, conninfo: str, **connect_kwargs):
        self.conninfo = conninfo
        self.connect_kwargs: Dict[str, Any] = {"autocommit": True, **connect_kwargs}
        self._conn: Optional[AsyncConnection] = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None and not self._conn.closed

    async def open(self) -> None:
        if self.is_open:
            return
        logger.debug(f"Opening probe connection: {mask_conninfo(self.conninfo)}")
        self._conn = await AsyncConnection.connect(self.conninfo, **self.connect_kwargs)

    def cursor(self) -> AsyncCursor:
        if self._conn is None:
            raise ConnectionUnavailableError("Connection is not open")
        return self._conn.cursor()

    async def release(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None


class ExistingConnection(ProbeConnection):
    """Wraps a connection handed over by a factory. Closed on release."""

    def __init__(self, connection: AsyncConnection):
        self._conn = connection

    @property
    def is_open(self) -> bool:
        return not self._conn.closed

    async def open(self) -> None:
        if self.is_open:
            return
        # psycopg connections cannot be reopened once closed
        raise ConnectionUnavailableError(
            "Connection returned by the factory is closed"
        )

    def cursor(self) -> AsyncCursor:
        return self._conn.cursor()

    async def release(self) -> None:
        await self._conn.close()


class PooledConnection(ProbeConnection):
    """
    Borrows a connection from a psycopg_pool pool.

    open() opens the pool first if needed. release() rolls back the check's
    transaction and returns the connection; the pool itself stays open.
    """

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool
        self._conn: Optional[AsyncConnection] = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def open(self) -> None:
        if self.is_open:
            return
        if self.pool.closed:
            logger.info(f"Opening connection pool {self.pool.name}")
            await self.pool.open(wait=True)
        self._conn = await self.pool.getconn()

    def cursor(self) -> AsyncCursor:
        if self._conn is None:
            raise ConnectionUnavailableError("No connection borrowed from pool")
        return self._conn.cursor()

    async def release(self) -> None:
        if self._conn is not None:
            conn, self._conn = self._conn, None
            try:
                # Pool connections are not autocommit; hand them back idle
                await conn.rollback()
            finally:
                await self.pool.putconn(conn)


def conninfo_source(
    conninfo: Union[str, Callable[[], str]],
    configure_connection: Optional[Callable[[ConninfoConnection], None]] = None,
    application_name: Optional[str] = None,
) -> Callable[[], ConninfoConnection]:
    """
    Build a connection source that opens a new connection per check.

    Args:
        conninfo: Connection string, or a callable returning one (called
            on every check)
        configure_connection: Called with the unopened connection so it can
            adjust connect_kwargs before open()
        application_name: Sent to the server unless conninfo sets its own
    """
    if conninfo is None:
        raise ValueError("conninfo must not be None")

    def source() -> ConninfoConnection:
        dsn = conninfo() if callable(conninfo) else conninfo
        connection = ConninfoConnection(dsn)
        if application_name and "application_name" not in conninfo_to_dict(dsn):
            connection.connect_kwargs["application_name"] = application_name
        if configure_connection is not None:
            configure_connection(connection)
        return connection

    return source


def as_probe_connection(source: Any) -> Optional[ProbeConnection]:
    """
    Convert whatever a connection source produced into a ProbeConnection.

    Returns None for None so the caller can report it.

    Raises:
        TypeError: If the object is not a supported connection shape
    """
    if source is None or isinstance(source, ProbeConnection):
        return source
    if isinstance(source, str):
        return ConninfoConnection(source)
    if isinstance(source, AsyncConnection):
        return ExistingConnection(source)
    if isinstance(source, AsyncConnectionPool):
        return PooledConnection(source)
    raise TypeError(
        f"Unsupported connection type: {type(source).__name__}"
    )


__all__ = [
    "ConnectionUnavailableError",
    "ProbeConnection",
    "ConninfoConnection",
    "ExistingConnection",
    "PooledConnection",
    "conninfo_source",
    "as_probe_connection",
    "mask_conninfo",
]
