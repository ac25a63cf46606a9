import pytest

from sparkbatch.javabytes import byte_string_as_bytes
from sparkbatch.memory import (
    DEFAULT_JVM_MEMORY_OVERHEAD_FACTOR,
    DEFAULT_NON_JVM_MEMORY_OVERHEAD_FACTOR,
    MIN_MEMORY_OVERHEAD,
    bytes_to_mi,
    driver_memory_request,
    executor_memory_request,
    executor_pyspark_memory_bytes,
    is_java_app,
    memory_overhead_factor,
    memory_request_bytes,
    spark_off_heap_memory_bytes,
)
from sparkbatch.scheduler import (
    DriverSpec,
    ExecutorSpec,
    SparkApplication,
    SparkApplicationSpec,
    SparkApplicationType,
    SparkPodSpec,
)


def _python_app(spark_conf=None):
    return SparkApplication(
        spec=SparkApplicationSpec(
            type=SparkApplicationType.PYTHON,
            driver=DriverSpec(cores=1, memory="512m"),
            executor=ExecutorSpec(instances=2, cores=1, memory="512m"),
            spark_conf=dict(spark_conf or {}),
        )
    )


@pytest.mark.parametrize(
    "num_bytes, expected",
    [
        ((2 * 1024 * 1024) - 1, "1Mi"),
        (2 * 1024 * 1024, "2Mi"),
        ((1024 * 1024 * 1024) - 1, "1023Mi"),
        (1024 * 1024 * 1024, "1024Mi"),
    ],
)
def test_bytes_to_mi(num_bytes, expected):
    assert bytes_to_mi(num_bytes) == expected


def test_is_java_app():
    assert is_java_app(SparkApplicationType.JAVA)
    assert is_java_app(SparkApplicationType.SCALA)
    assert not is_java_app(SparkApplicationType.PYTHON)
    assert not is_java_app(None)


def test_overhead_factor_defaults_and_explicit():
    scala = SparkApplication(spec=SparkApplicationSpec(type=SparkApplicationType.SCALA))
    python = SparkApplication(spec=SparkApplicationSpec(type=SparkApplicationType.PYTHON))
    explicit = SparkApplication(spec=SparkApplicationSpec(memory_overhead_factor="0.3"))
    assert memory_overhead_factor(scala) == DEFAULT_JVM_MEMORY_OVERHEAD_FACTOR
    assert memory_overhead_factor(python) == DEFAULT_NON_JVM_MEMORY_OVERHEAD_FACTOR
    assert memory_overhead_factor(explicit) == 0.3


def test_overhead_factor_invalid():
    app = SparkApplication(spec=SparkApplicationSpec(memory_overhead_factor="lots"))
    with pytest.raises(ValueError, match="memory overhead factor"):
        memory_overhead_factor(app)


def test_memory_request_uses_minimum_overhead():
    spec = SparkPodSpec(memory="512m")
    assert memory_request_bytes(spec, 0.1) == byte_string_as_bytes("512m") + MIN_MEMORY_OVERHEAD


def test_memory_request_explicit_overhead_wins():
    spec = SparkPodSpec(memory="1g", memory_overhead="2g")
    assert memory_request_bytes(spec, 0.9) == byte_string_as_bytes("3g")


def test_memory_request_invalid_memory():
    with pytest.raises(ValueError):
        memory_request_bytes(SparkPodSpec(memory="lots"), 0.1)


def test_driver_memory_scala_min_overhead():
    app = SparkApplication(
        spec=SparkApplicationSpec(
            type=SparkApplicationType.SCALA,
            driver=DriverSpec(cores=1, core_limit="1200m", memory="512m"),
        )
    )
    assert driver_memory_request(app) == "896Mi"


def test_driver_memory_with_factor():
    app = SparkApplication(
        spec=SparkApplicationSpec(
            type=SparkApplicationType.PYTHON,
            memory_overhead_factor="0.3",
            driver=DriverSpec(cores=4, memory="8g", core_request="2000m"),
            executor=ExecutorSpec(instances=4, cores=8, memory="64g", memory_overhead="2g"),
        )
    )
    assert driver_memory_request(app) == "10649Mi"
    assert executor_memory_request(app) == "67584Mi"


def test_non_jvm_overhead():
    app = SparkApplication(
        spec=SparkApplicationSpec(
            type=SparkApplicationType.PYTHON,
            driver=DriverSpec(cores=1, memory="1g"),
            executor=ExecutorSpec(instances=1, cores=1, memory="1g"),
        )
    )
    assert driver_memory_request(app) == "1433Mi"
    assert executor_memory_request(app) == "1433Mi"


def test_executor_pyspark_memory():
    app = _python_app({"spark.executor.pyspark.memory": "500m"})
    assert driver_memory_request(app) == "896Mi"
    assert executor_memory_request(app) == "1396Mi"


def test_executor_off_heap_memory():
    app = _python_app({"spark.memory.offHeap.enabled": "true", "spark.memory.offHeap.size": "400m"})
    assert executor_memory_request(app) == "1296Mi"


def test_executor_off_heap_and_pyspark_memory():
    app = _python_app(
        {
            "spark.memory.offHeap.enabled": "true",
            "spark.memory.offHeap.size": "400m",
            "spark.executor.pyspark.memory": "500m",
        }
    )
    assert executor_memory_request(app) == "1796Mi"


def test_pyspark_memory_defaults_to_mebibytes():
    bare = _python_app({"spark.executor.pyspark.memory": "500"})
    assert executor_pyspark_memory_bytes(bare) == byte_string_as_bytes("500m")


def test_pyspark_memory_ignored_for_jvm_apps():
    app = _python_app({"spark.executor.pyspark.memory": "500m"})
    app.spec.type = SparkApplicationType.SCALA
    assert executor_pyspark_memory_bytes(app) == 0


def test_off_heap_disabled_or_unsized():
    disabled = _python_app({"spark.memory.offHeap.enabled": "false", "spark.memory.offHeap.size": "400m"})
    unsized = _python_app({"spark.memory.offHeap.enabled": "true"})
    absent = _python_app({"spark.memory.offHeap.size": "400m"})
    assert spark_off_heap_memory_bytes(disabled) == 0
    assert spark_off_heap_memory_bytes(unsized) == 0
    assert spark_off_heap_memory_bytes(absent) == 0


def test_off_heap_invalid_size():
    app = _python_app({"spark.memory.offHeap.enabled": "true", "spark.memory.offHeap.size": "lots"})
    with pytest.raises(ValueError):
        spark_off_heap_memory_bytes(app)