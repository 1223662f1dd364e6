# ============================================================================
# PROBE CONNECTION TESTS
# ============================================================================
# STATUS: Tests - Connection handles and sources
# PURPOSE: Verify conninfo, existing-connection and pool handling
# CREATED: 19 OCT 2026
# ============================================================================
"""
Probe Connection Tests

Unit tests with psycopg objects replaced by spec'd mocks:
- as_probe_connection() dispatch
- ConninfoConnection open/release and before-open configuration
- ExistingConnection closed-connection handling
- PooledConnection borrow/rollback/return
- conninfo_source() and mask_conninfo()

Run with:
    pytest tests/test_connection.py -v
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import psycopg
from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from health.connection import (
    ConnectionUnavailableError,
    ConninfoConnection,
    ExistingConnection,
    PooledConnection,
    as_probe_connection,
    conninfo_source,
    mask_conninfo,
)

from fakes import FakeConnection


# ============================================================================
# HELPERS
# ============================================================================

def _mock_connection(closed=False):
    conn = MagicMock(spec=AsyncConnection)
    conn.closed = closed
    conn.close = AsyncMock()
    conn.rollback = AsyncMock()
    return conn


def _mock_pool(closed=False, conn=None):
    pool = MagicMock(spec=AsyncConnectionPool)
    pool.name = "probe-pool"
    pool.closed = closed
    pool.open = AsyncMock()
    pool.getconn = AsyncMock(return_value=conn or _mock_connection())
    pool.putconn = AsyncMock()
    return pool


# ============================================================================
# DISPATCH
# ============================================================================

class TestAsProbeConnection:
    """Conversion of source results into ProbeConnection handles."""

    def test_none(self):
        assert as_probe_connection(None) is None

    def test_probe_connection_passthrough(self):
        conn = FakeConnection()
        assert as_probe_connection(conn) is conn

    def test_string(self):
        handle = as_probe_connection("host=db dbname=app")
        assert isinstance(handle, ConninfoConnection)
        assert handle.conninfo == "host=db dbname=app"
        assert not handle.is_open

    def test_async_connection(self):
        assert isinstance(as_probe_connection(_mock_connection()), ExistingConnection)

    def test_pool(self):
        assert isinstance(as_probe_connection(_mock_pool()), PooledConnection)

    def test_unsupported(self):
        with pytest.raises(TypeError, match="Unsupported connection type: int"):
            as_probe_connection(42)


# ============================================================================
# CONNINFO CONNECTION
# ============================================================================

class TestConninfoConnection:
    """New connection per check, built from a conninfo string."""

    def test_open_uses_connect_kwargs(self):
        raw = _mock_connection()
        handle = ConninfoConnection("host=db dbname=app", connect_timeout=3)
        handle.connect_kwargs["application_name"] = "probe"

        with patch.object(AsyncConnection, "connect", new=AsyncMock(return_value=raw)) as connect:
            asyncio.run(handle.open())

        connect.assert_awaited_once_with(
            "host=db dbname=app",
            autocommit=True,
            connect_timeout=3,
            application_name="probe",
        )
        assert handle.is_open

    def test_release_closes(self):
        raw = _mock_connection()
        handle = ConninfoConnection("host=db")

        async def scenario():
            with patch.object(AsyncConnection, "connect", new=AsyncMock(return_value=raw)):
                await handle.open()
            await handle.release()

        asyncio.run(scenario())

        raw.close.assert_awaited_once()
        assert not handle.is_open

    def test_release_without_open(self):
        handle = ConninfoConnection("host=db")
        asyncio.run(handle.release())
        assert not handle.is_open

    def test_cursor_requires_open(self):
        with pytest.raises(ConnectionUnavailableError):
            ConninfoConnection("host=db").cursor()


# ============================================================================
# EXISTING CONNECTION
# ============================================================================

class TestExistingConnection:
    """Connection objects handed over by a factory."""

    def test_open_connection(self):
        raw = _mock_connection(closed=False)
        handle = ExistingConnection(raw)

        assert handle.is_open
        asyncio.run(handle.open())
        asyncio.run(handle.release())
        raw.close.assert_awaited_once()

    def test_closed_connection_cannot_open(self):
        handle = ExistingConnection(_mock_connection(closed=True))

        assert not handle.is_open
        with pytest.raises(ConnectionUnavailableError):
            asyncio.run(handle.open())


# ============================================================================
# POOLED CONNECTION
# ============================================================================

class TestPooledConnection:
    """Connections borrowed from a psycopg_pool pool."""

    def test_borrow_and_return(self):
        raw = _mock_connection()
        pool = _mock_pool(conn=raw)
        handle = PooledConnection(pool)

        async def scenario():
            await handle.open()
            assert handle.is_open
            await handle.release()

        asyncio.run(scenario())

        pool.open.assert_not_awaited()
        pool.getconn.assert_awaited_once()
        pool.putconn.assert_awaited_once_with(raw)
        raw.close.assert_not_awaited()
        assert not handle.is_open

    def test_rolls_back_before_return(self):
        calls = []
        raw = _mock_connection()
        raw.rollback = AsyncMock(side_effect=lambda: calls.append("rollback"))
        pool = _mock_pool(conn=raw)
        pool.putconn = AsyncMock(side_effect=lambda conn: calls.append("putconn"))
        handle = PooledConnection(pool)

        async def scenario():
            await handle.open()
            await handle.release()

        asyncio.run(scenario())

        assert calls == ["rollback", "putconn"]

    def test_returned_when_rollback_fails(self):
        raw = _mock_connection()
        raw.rollback = AsyncMock(side_effect=psycopg.OperationalError("server closed"))
        pool = _mock_pool(conn=raw)
        handle = PooledConnection(pool)

        async def scenario():
            await handle.open()
            await handle.release()

        with pytest.raises(psycopg.OperationalError):
            asyncio.run(scenario())

        pool.putconn.assert_awaited_once_with(raw)
        assert not handle.is_open

    def test_opens_closed_pool(self):
        pool = _mock_pool(closed=True)
        asyncio.run(PooledConnection(pool).open())
        pool.open.assert_awaited_once_with(wait=True)

    def test_release_without_borrow(self):
        pool = _mock_pool()
        asyncio.run(PooledConnection(pool).release())
        pool.putconn.assert_not_awaited()


# ============================================================================
# CONNINFO SOURCE
# ============================================================================

class TestConninfoSource:
    """Per-check connection factory built from a conninfo string."""

    def test_new_connection_per_call(self):
        source = conninfo_source("host=db dbname=app")
        first, second = source(), source()

        assert isinstance(first, ConninfoConnection)
        assert first is not second

    def test_application_name_added(self):
        conn = conninfo_source("host=db", application_name="health-probe")()
        assert conn.connect_kwargs["application_name"] == "health-probe"

    def test_application_name_not_overridden(self):
        conn = conninfo_source(
            "host=db application_name=orders",
            application_name="health-probe",
        )()
        assert "application_name" not in conn.connect_kwargs

    def test_configure_connection_runs_before_open(self):
        def configure(conn: ConninfoConnection) -> None:
            assert not conn.is_open
            conn.connect_kwargs["connect_timeout"] = 2

        conn = conninfo_source("host=db", configure_connection=configure)()
        assert conn.connect_kwargs["connect_timeout"] == 2

    def test_callable_conninfo_evaluated_per_call(self):
        hosts = iter(["host=a", "host=b"])
        source = conninfo_source(lambda: next(hosts))

        assert source().conninfo == "host=a"
        assert source().conninfo == "host=b"

    def test_none_rejected(self):
        with pytest.raises(ValueError):
            conninfo_source(None)


# ============================================================================
# MASKING
# ============================================================================

class TestMaskConninfo:

    def test_password_masked(self):
        masked = mask_conninfo("postgresql://app:s3cret@db:5432/app")
        assert "s3cret" not in masked
        assert "***" in masked
        assert "db" in masked

    def test_without_password(self):
        masked = mask_conninfo("host=db dbname=app")
        assert "***" not in masked
        assert "dbname=app" in masked
