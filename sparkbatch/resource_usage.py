"""CPU and memory requests of Spark driver and executor pods."""

from __future__ import annotations

import re
from typing import Optional

from sparkbatch.memory import driver_memory_request, executor_memory_request
from sparkbatch.scheduler import SparkApplication

_QUANTITY_PATTERN = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)"
    r"(?:[KMGTPE]i|[eE][+-]?[0-9]+|[numkMGTPE])?"
)


def _validate_quantity(text: str) -> None:
    if not _QUANTITY_PATTERN.fullmatch(text):
        raise ValueError("quantities must match the regular expression of a resource quantity")


def cpu_request(cores: Optional[int], core_request: Optional[str]) -> str:
    """Return the CPU request: ``core_request`` first, then ``cores``, then one core."""
    if core_request is not None:
        try:
            _validate_quantity(core_request)
        except ValueError as err:
            raise ValueError(f"failed to parse {core_request}: {err}") from err
        return core_request
    if cores is not None:
        return str(cores)
    return "1"


def driver_pod_requests(app: SparkApplication) -> dict[str, str]:
    """Return the driver pod's ``cpu`` and ``memory`` requests."""
    driver = app.spec.driver
    return {
        "cpu": cpu_request(driver.cores, driver.core_request),
        "memory": driver_memory_request(app),
    }


def executor_pod_requests(app: SparkApplication) -> dict[str, str]:
    """Return an executor pod's ``cpu`` and ``memory`` requests."""
    executor = app.spec.executor
    return {
        "cpu": cpu_request(executor.cores, executor.core_request),
        "memory": executor_memory_request(app),
    }