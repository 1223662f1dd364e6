# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# STATUS: Infrastructure - Health check implementations
# PURPOSE: Concrete health checks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Plugins

Database Checks (priority 30):
- DatabaseProbe: PostgreSQL reachability (connect + trivial query)

Probes are created per connection with health.builder.add_database_probe().
"""

from health.checks.database import DatabaseProbe, DatabaseProbeConfig

__all__ = [
    "DatabaseProbe",
    "DatabaseProbeConfig",
]
