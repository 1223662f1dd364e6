# ============================================================================
# TEST FAKES
# ============================================================================
# STATUS: Tests - In-memory stand-ins for psycopg connections
# PURPOSE: Drive DatabaseProbe without a database server
# CREATED: 19 OCT 2026
# ============================================================================
"""
In-memory connection and cursor used by the probe tests.

FakeConnection records what happened to it (opened, released, statements
executed) so tests can assert on the probe's behaviour.
"""

import asyncio
from typing import Any, List, Optional, Tuple

from health.connection import ProbeConnection


class FakeCursor:
    """Async cursor returning a fixed row."""

    def __init__(self, row: Any = (1,), execute_error: Exception = None, has_result: bool = True):
        self.row = row
        self.execute_error = execute_error
        self.has_result = has_result
        self.executed: List[Tuple[str, Any, Optional[bool]]] = []
        self.description = None
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    async def execute(self, query, params=None, *, prepare=None):
        self.executed.append((query, params, prepare))
        if self.execute_error is not None:
            raise self.execute_error
        self.description = [("?column?",)] if self.has_result else None

    async def fetchone(self):
        return self.row


class FakeConnection(ProbeConnection):
    """ProbeConnection that never touches the network."""

    def __init__(
        self,
        cursor: FakeCursor = None,
        already_open: bool = False,
        open_error: Exception = None,
        open_delay: float = 0.0,
        release_error: Exception = None,
    ):
        self._cursor = cursor or FakeCursor()
        self._open = already_open
        self.open_error = open_error
        self.open_delay = open_delay
        self.release_error = release_error
        self.open_calls = 0
        self.release_calls = 0
        self.open_started = asyncio.Event()

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def executed(self):
        return self._cursor.executed

    @property
    def cursor_closed(self) -> bool:
        return self._cursor.closed

    async def open(self) -> None:
        self.open_calls += 1
        self.open_started.set()
        if self.open_delay:
            await asyncio.sleep(self.open_delay)
        if self.open_error is not None:
            raise self.open_error
        self._open = True

    def cursor(self) -> FakeCursor:
        return self._cursor

    async def release(self) -> None:
        self.release_calls += 1
        self._open = False
        if self.release_error is not None:
            raise self.release_error
