# ============================================================================
# PROBE COMMAND
# ============================================================================
# STATUS: Infrastructure - Query issued by database probes
# PURPOSE: Configurable command with scalar execution
# CREATED: 19 OCT 2026
# ============================================================================
"""
Probe Command

ProbeCommand is built from a cursor for every check. A configurator
(any callable taking the command) fills in the text and parameters before
it runs:

    def configure(command: ProbeCommand) -> None:
        command.text = "SELECT 1 FROM pg_stat_activity LIMIT 1"

The value returned by execute_scalar() is only used to assert that the
server answered.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

from psycopg import AsyncCursor

DEFAULT_HEALTH_QUERY = "SELECT 1;"

Params = Union[Sequence[Any], Mapping[str, Any]]


@dataclass
class ProbeCommand:
    """A single statement to run against an open connection."""
    cursor: AsyncCursor
    text: str = ""
    params: Optional[Params] = None
    prepare: Optional[bool] = None

    async def execute_scalar(self) -> Any:
        """
        Execute the statement and return the first column of the first row.

        Returns None when the statement produces no result set or no rows.

        Raises:
            ValueError: If no command text was configured
        """
        if not self.text or not self.text.strip():
            raise ValueError("Command text is empty")

        await self.cursor.execute(self.text, self.params, prepare=self.prepare)

        if self.cursor.description is None:
            return None

        row = await self.cursor.fetchone()
        if row is None:
            return None
        if isinstance(row, Mapping):
            return next(iter(row.values()), None)
        return row[0]


CommandConfigurator = Callable[[ProbeCommand], None]


def command_text(sql: str, params: Optional[Params] = None) -> CommandConfigurator:
    """Build a configurator that sets the command text (and params)."""
    if sql is None:
        raise ValueError("sql must not be None")

    def configure(command: ProbeCommand) -> None:
        command.text = sql
        command.params = params

    return configure


__all__ = [
    "DEFAULT_HEALTH_QUERY",
    "ProbeCommand",
    "CommandConfigurator",
    "command_text",
]
