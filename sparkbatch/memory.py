"""Memory requests of Spark driver and executor pods, computed the way Spark does."""

from __future__ import annotations

import re
from typing import Optional

from sparkbatch.javabytes import byte_string_as_bytes
from sparkbatch.scheduler import SparkApplication, SparkApplicationType, SparkPodSpec

DEFAULT_JVM_MEMORY_OVERHEAD_FACTOR = 0.1
DEFAULT_NON_JVM_MEMORY_OVERHEAD_FACTOR = 0.4
MIN_MEMORY_OVERHEAD = 384 * 1024 * 1024

_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def is_java_app(app_type: Optional[SparkApplicationType]) -> bool:
    """Tell whether the application runs on the JVM."""
    return app_type in (SparkApplicationType.JAVA, SparkApplicationType.SCALA)


def memory_overhead_factor(app: SparkApplication) -> float:
    """Return the overhead factor set on the app, or the default for its type."""
    text = app.spec.memory_overhead_factor
    if text is not None:
        if not _FLOAT_PATTERN.fullmatch(text):
            raise ValueError(f"failed to parse memory overhead factor as float: {text!r}")
        return float(text)
    if is_java_app(app.spec.type):
        return DEFAULT_JVM_MEMORY_OVERHEAD_FACTOR
    return DEFAULT_NON_JVM_MEMORY_OVERHEAD_FACTOR


def memory_request_bytes(pod_spec: SparkPodSpec, overhead_factor: float) -> int:
    """Return the pod's memory plus its overhead, in bytes."""
    memory = byte_string_as_bytes(pod_spec.memory) if pod_spec.memory is not None else 0
    if pod_spec.memory_overhead is not None:
        overhead = byte_string_as_bytes(pod_spec.memory_overhead)
    else:
        overhead = int(max(memory * overhead_factor, MIN_MEMORY_OVERHEAD))
    return memory + overhead


def executor_pyspark_memory_bytes(app: SparkApplication) -> int:
    """Return ``spark.executor.pyspark.memory`` in bytes for Python apps, else 0."""
    value = app.spec.spark_conf.get("spark.executor.pyspark.memory")
    if app.spec.type is not SparkApplicationType.PYTHON or value is None:
        return 0
    # Without a suffix the setting is in mebibytes.
    if _INT_PATTERN.fullmatch(value):
        value += "m"
    return byte_string_as_bytes(value)


def spark_off_heap_memory_bytes(app: SparkApplication) -> int:
    """Return the off-heap memory size in bytes when off-heap memory is enabled."""
    conf = app.spec.spark_conf
    enabled = conf.get("spark.memory.offHeap.enabled")
    if enabled is None or enabled == "false":
        return 0
    size = conf.get("spark.memory.offHeap.size")
    if size is None:
        return 0
    return byte_string_as_bytes(size)


def bytes_to_mi(num_bytes: int) -> str:
    """Format a byte count as whole mebibytes, rounding toward zero."""
    mebibytes = abs(num_bytes) // (1 << 20)
    if num_bytes < 0:
        mebibytes = -mebibytes
    return f"{mebibytes}Mi"


def driver_memory_request(app: SparkApplication) -> str:
    """Return the driver pod's memory request, in mebibytes."""
    factor = memory_overhead_factor(app)
    return bytes_to_mi(memory_request_bytes(app.spec.driver, factor))


def executor_memory_request(app: SparkApplication) -> str:
    """Return an executor pod's memory request, in mebibytes."""
    factor = memory_overhead_factor(app)
    request = memory_request_bytes(app.spec.executor, factor)
    pyspark = executor_pyspark_memory_bytes(app)
    off_heap = spark_off_heap_memory_bytes(app)
    return bytes_to_mi(request + pyspark + off_heap)