"""Registry of batch scheduler factories."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from sparkbatch.scheduler import BatchScheduler, Factory, SchedulerError

logger = logging.getLogger(__name__)


class Registry:
    """Maps scheduler names to the factories that build them."""

    def __init__(self) -> None:
        self._factories: dict[str, Factory] = {}
        self._lock = threading.Lock()

    def get_scheduler(self, name: str, config: Any) -> BatchScheduler:
        """Build the scheduler registered under ``name`` from ``config``."""
        with self._lock:
            try:
                factory = self._factories[name]
            except KeyError:
                raise SchedulerError(f"scheduler {name} not found") from None
            return factory(config)

    def register(self, name: str, factory: Factory) -> None:
        """Register ``factory`` under ``name``; a name may be used only once."""
        with self._lock:
            if name in self._factories:
                raise SchedulerError(f"scheduler {name} is already registered")
            self._factories[name] = factory
        logger.info("Registered scheduler %s", name)

    def registered_names(self) -> list[str]:
        """Return the names of all registered schedulers."""
        with self._lock:
            return list(self._factories)


_registry: Optional[Registry] = None
_registry_lock = threading.Lock()


def get_registry() -> Registry:
    """Return the process-wide registry, creating it on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = Registry()
        return _registry