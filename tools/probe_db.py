#!/usr/bin/env python3
# ============================================================================
# CLI DATABASE PROBE TOOL
# ============================================================================
# STATUS: Tool - Run a database probe from the shell
# PURPOSE: Check database reachability without an aggregator
# CREATED: 19 OCT 2026
# ============================================================================
"""
Run a single database probe and print the result as JSON.

Usage:
    # Connection from DATABASE_URL / POSTGRES_* env vars
    python tools/probe_db.py

    # Explicit connection string and query
    python tools/probe_db.py --conninfo postgresql://app@db:5432/app --query "SELECT 1"

    # Report degraded instead of unhealthy, JSON logs on stderr
    python tools/probe_db.py --failure-status degraded --json-logs -v

Exit codes:
    0 - healthy
    1 - degraded
    2 - unhealthy
"""

import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from __version__ import __version__
from core.config import get_defaults
from core.logging import configure_logging
from health import HealthCheckRegistry, HealthStatus, add_database_probe

EXIT_CODES = {
    HealthStatus.HEALTHY: 0,
    HealthStatus.DEGRADED: 1,
    HealthStatus.UNHEALTHY: 2,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check that a PostgreSQL server answers a query",
    )
    parser.add_argument(
        "--conninfo",
        help="Connection string (default: DATABASE_URL or POSTGRES_* env vars)",
    )
    parser.add_argument("--query", help="Query to run (default: SELECT 1;)")
    parser.add_argument("--name", help="Probe name (default: postgres)")
    parser.add_argument("--timeout", type=float, help="Timeout in seconds")
    parser.add_argument(
        "--failure-status",
        choices=[HealthStatus.DEGRADED.value, HealthStatus.UNHEALTHY.value],
        help="Status reported on failure (default: unhealthy)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Log as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run_probe(args: argparse.Namespace) -> dict:
    """Register one probe in a private registry, run it, return the report."""
    registry = HealthCheckRegistry()
    probe = add_database_probe(
        registry,
        conninfo=args.conninfo or get_defaults().database.conninfo(),
        health_query=args.query,
        name=args.name,
        failure_status=args.failure_status,
        timeout=args.timeout,
    )

    result = await probe.check()

    report = {"name": probe.name}
    report.update(result.to_dict())
    report["checked_at"] = result.checked_at.isoformat()
    return report


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(
        level="DEBUG" if args.verbose else "WARNING",
        json_output=args.json_logs,
    )

    report = asyncio.run(run_probe(args))
    print(json.dumps(report, indent=2))

    return EXIT_CODES[HealthStatus(report["status"])]


if __name__ == "__main__":
    sys.exit(main())
