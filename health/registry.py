# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# STATUS: Infrastructure - Health check plugin registration
# PURPOSE: Register and discover health check plugins
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Registry

Holds registered health check plugins so an external aggregator can look
them up by name, category or tag.

Usage:
    # Decorator registration
    @register_check(category="database", tags=["db"])
    class ReplicaLagCheck(HealthCheckPlugin):
        ...

    # Manual registration
    registry = get_registry()
    registry.register(ReplicaLagCheck())

    # Get checks for execution
    checks = registry.get_checks_by_tag("db")
"""

import logging
from typing import Dict, Iterable, List, Optional, Type

from health.core import (
    HealthCheckPlugin,
    HealthCheckCategory,
)

logger = logging.getLogger(__name__)


class HealthCheckRegistry:
    """
    Registry for health check plugins.

    Maintains a collection of health checks keyed by name.
    Supports both class-based and instance registration.
    """

    def __init__(self):
        self._checks: Dict[str, HealthCheckPlugin] = {}

    def register(self, check: HealthCheckPlugin) -> None:
        """
        Register a health check plugin instance.

        A check registered under an existing name replaces the old one.
        """
        if check.name in self._checks:
            logger.warning(f"Overwriting health check: {check.name}")

        self._checks[check.name] = check
        logger.debug(
            f"Registered health check: {check.name} "
            f"(category={check.category.value}, priority={check.priority}, "
            f"tags={sorted(check.tags)})"
        )

    def register_class(
        self,
        check_class: Type[HealthCheckPlugin],
        **kwargs
    ) -> HealthCheckPlugin:
        """
        Instantiate and register a health check class.

        Args:
            check_class: Plugin class to instantiate
            **kwargs: Arguments passed to constructor

        Returns:
            The instantiated plugin
        """
        instance = check_class(**kwargs)
        self.register(instance)
        return instance

    def unregister(self, name: str) -> bool:
        """
        Remove a health check by name.

        Returns:
            True if check was removed
        """
        if name in self._checks:
            del self._checks[name]
            return True
        return False

    def get(self, name: str) -> Optional[HealthCheckPlugin]:
        """Get health check by name."""
        return self._checks.get(name)

    def get_all(self) -> List[HealthCheckPlugin]:
        """Get all registered checks."""
        return list(self._checks.values())

    def get_checks_by_priority(self) -> List[HealthCheckPlugin]:
        """Get all checks sorted by priority (lower first)."""
        return sorted(self._checks.values(), key=lambda c: c.priority)

    def get_checks_by_category(
        self,
        category: HealthCheckCategory
    ) -> List[HealthCheckPlugin]:
        """Get checks for a specific category."""
        return [
            c for c in self._checks.values()
            if c.category == category
        ]

    def get_checks_by_tag(self, *tags: str) -> List[HealthCheckPlugin]:
        """Get checks carrying any of the given tags."""
        wanted = set(tags)
        return [
            c for c in self._checks.values()
            if wanted & c.tags
        ]

    def clear(self) -> None:
        """Remove all registered checks."""
        self._checks.clear()

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: str) -> bool:
        return name in self._checks


# ============================================================================
# GLOBAL REGISTRY & DECORATOR
# ============================================================================

_registry: Optional[HealthCheckRegistry] = None


def get_registry() -> HealthCheckRegistry:
    """Get the global health check registry."""
    global _registry
    if _registry is None:
        _registry = HealthCheckRegistry()
    return _registry


def register_check(
    category: str = None,
    priority: int = None,
    timeout_seconds: float = None,
    tags: Iterable[str] = None,
    registry: HealthCheckRegistry = None,
):
    """
    Decorator to register a health check class.

    Args:
        category: Override category (string or HealthCheckCategory)
        priority: Override priority (lower runs first)
        timeout_seconds: Override timeout
        tags: Tags used to filter sets of checks
        registry: Target registry (global registry if None)

    Example:
        @register_check(category="database", tags=["db"])
        class ReplicaLagCheck(HealthCheckPlugin):
            name = "replica_lag"

            async def check(self) -> HealthCheckResult:
                ...
    """
    def decorator(cls: Type[HealthCheckPlugin]) -> Type[HealthCheckPlugin]:
        # Apply overrides to class
        if category is not None:
            if isinstance(category, str):
                cls.category = HealthCheckCategory(category)
            else:
                cls.category = category

        if priority is not None:
            cls.priority = priority
        elif category is not None:
            cls.priority = cls.category.default_priority

        if timeout_seconds is not None:
            cls.timeout_seconds = timeout_seconds

        if tags is not None:
            cls.tags = frozenset(tags)

        target = registry if registry is not None else get_registry()
        target.register_class(cls)

        return cls

    return decorator


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckRegistry",
    "get_registry",
    "register_check",
]
