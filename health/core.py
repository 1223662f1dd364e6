# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Infrastructure - Base classes for health checks
# PURPOSE: Health check plugin interfaces and result types
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Core Types

Defines the plugin interface and result types for health checks.

Status Hierarchy (worst wins):
- healthy: All systems operational
- degraded: Operational with warnings (non-blocking issues)
- unhealthy: Critical failure (blocks operations)
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone


class HealthStatus(str, Enum):
    """Health check status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthCheckCategory(str, Enum):
    """Health check categories with default priorities."""
    STARTUP = "startup"           # Priority 10: Basic process checks
    INFRASTRUCTURE = "infrastructure"  # Priority 20: Storage, messaging
    DATABASE = "database"         # Priority 30: PostgreSQL
    APPLICATION = "application"   # Priority 40: Application state
    EXTERNAL = "external"         # Priority 50: Optional external services

    @property
    def default_priority(self) -> int:
        """Get default priority for category."""
        priorities = {
            HealthCheckCategory.STARTUP: 10,
            HealthCheckCategory.INFRASTRUCTURE: 20,
            HealthCheckCategory.DATABASE: 30,
            HealthCheckCategory.APPLICATION: 40,
            HealthCheckCategory.EXTERNAL: 50,
        }
        return priorities[self]


class HealthCheckError(Exception):
    """Base exception for errors raised inside health checks."""
    pass


@dataclass
class HealthCheckResult:
    """Result from a single health check."""
    status: HealthStatus
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = field(default=None, repr=False)
    duration_ms: float = 0.0
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    @classmethod
    def healthy(cls, message: str = None, **details) -> "HealthCheckResult":
        """Create healthy result."""
        return cls(status=HealthStatus.HEALTHY, message=message, details=details)

    @classmethod
    def from_exception(
        cls,
        e: BaseException,
        status: HealthStatus = HealthStatus.UNHEALTHY,
        message: Optional[str] = None,
    ) -> "HealthCheckResult":
        """
        Create a failure result from an exception.

        Args:
            e: The exception that caused the failure (kept on the result)
            status: Status to report (the check's failure status)
            message: Override message (defaults to str(e), or the type name)
        """
        return cls(
            status=status,
            message=message or str(e) or type(e).__name__,
            details={"exception_type": type(e).__name__},
            exception=e,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = {
            "status": self.status.value,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.message:
            result["message"] = self.message
        if self.details:
            result["details"] = self.details
        return result


class HealthCheckPlugin(ABC):
    """
    Base class for health check plugins.

    Subclass and implement check() to create custom health checks.
    Use @register_check decorator or manual registration.

    Attributes:
        name: Unique identifier for the check
        category: Check category (determines priority)
        priority: Execution priority (lower runs first)
        timeout_seconds: Max execution time before timeout
        failure_status: Status reported when the check fails
        tags: Labels used to filter sets of checks

    check() must never raise: failures are reported as results.
    """

    name: str = "unnamed"
    category: HealthCheckCategory = HealthCheckCategory.APPLICATION
    priority: int = 50
    timeout_seconds: float = 10.0
    failure_status: HealthStatus = HealthStatus.UNHEALTHY
    tags: FrozenSet[str] = frozenset()

    @abstractmethod
    async def check(self) -> HealthCheckResult:
        """
        Execute health check.

        Returns:
            HealthCheckResult with status and optional details
        """
        pass

    def __init_subclass__(cls, **kwargs):
        """Set default priority from category if not specified."""
        super().__init_subclass__(**kwargs)
        if cls.priority == 50 and hasattr(cls, "category"):
            cls.priority = cls.category.default_priority


__all__ = [
    "HealthStatus",
    "HealthCheckCategory",
    "HealthCheckError",
    "HealthCheckResult",
    "HealthCheckPlugin",
]
