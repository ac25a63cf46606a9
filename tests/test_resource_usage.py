import pytest

from sparkbatch.resource_usage import cpu_request, driver_pod_requests, executor_pod_requests
from sparkbatch.scheduler import (
    DriverSpec,
    DynamicAllocation,
    ExecutorSpec,
    SparkApplication,
    SparkApplicationSpec,
    SparkApplicationType,
)


@pytest.mark.parametrize(
    "cores, core_request, expected",
    [
        (None, None, "1"),
        (1, None, "1"),
        (None, "1", "1"),
        (1, "500m", "500m"),
    ],
)
def test_cpu_request(cores, core_request, expected):
    assert cpu_request(cores, core_request) == expected


@pytest.mark.parametrize("text", ["", "asd", "Random 500m"])
def test_cpu_request_invalid(text):
    with pytest.raises(ValueError, match="failed to parse"):
        cpu_request(None, text)


def test_pod_requests_spark_pi():
    app = SparkApplication(
        spec=SparkApplicationSpec(
            type=SparkApplicationType.SCALA,
            driver=DriverSpec(cores=1, core_limit="1200m", memory="512m"),
            executor=ExecutorSpec(instances=2, cores=1, core_limit="1200m", memory="512m"),
        )
    )
    assert driver_pod_requests(app) == {"cpu": "1", "memory": "896Mi"}
    assert executor_pod_requests(app) == {"cpu": "1", "memory": "896Mi"}


def test_pod_requests_core_request_and_overhead():
    app = SparkApplication(
        spec=SparkApplicationSpec(
            type=SparkApplicationType.PYTHON,
            memory_overhead_factor="0.3",
            driver=DriverSpec(cores=4, memory="8g", core_request="2000m"),
            executor=ExecutorSpec(instances=4, cores=8, memory="64g", memory_overhead="2g"),
            dynamic_allocation=DynamicAllocation(enabled=True, initial_executors=8, min_executors=2),
        )
    )
    assert driver_pod_requests(app) == {"cpu": "2000m", "memory": "10649Mi"}
    assert executor_pod_requests(app) == {"cpu": "8", "memory": "67584Mi"}


def test_pod_requests_invalid_core_request():
    app = SparkApplication(spec=SparkApplicationSpec(executor=ExecutorSpec(core_request="asd")))
    with pytest.raises(ValueError):
        executor_pod_requests(app)