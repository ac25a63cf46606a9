# sparkbatch

Helpers for handing Spark applications to a Kubernetes batch scheduler.

The package models the parts of a Spark application that batch schedulers
care about and works out what each pod needs.

## Modules

- `sparkbatch.scheduler`: the application model (`SparkApplication`,
  `SparkApplicationSpec`, `DriverSpec`, `ExecutorSpec`, `SparkPodSpec`,
  `DynamicAllocation`, `BatchSchedulerConfiguration`, and the enums
  `SparkApplicationType` and `DeployMode`), the abstract `BatchScheduler`
  interface (`name`, `should_schedule`, `schedule`, `cleanup`) and
  `SchedulerError`.
- `sparkbatch.registry`: `Registry`, a thread-safe map from scheduler names to
  factories (`register`, `get_scheduler`, `registered_names`), and
  `get_registry()`, which returns one shared registry per process.
- `sparkbatch.javabytes`: `byte_string_as_bytes()` turns sizes such as `"1k"`,
  `"512m"` or `"8gb"` into bytes. A unit suffix is required; anything else
  raises `ValueError`.
- `sparkbatch.memory`: memory requests sized as Spark sizes its pods. The
  overhead factor comes from the app, or defaults to 0.1 for Java and Scala
  apps and 0.4 otherwise, with a minimum overhead of 384 MiB; an explicit
  `memory_overhead` takes precedence. Executor requests also add
  `spark.executor.pyspark.memory` (Python apps only, mebibytes when no suffix
  is given) and `spark.memory.offHeap.size` when
  `spark.memory.offHeap.enabled` is set. Results are whole mebibytes,
  rounded down, e.g. `"896Mi"`.
- `sparkbatch.resource_usage`: `cpu_request()`, `driver_pod_requests()` and
  `executor_pod_requests()`, which return `{"cpu": ..., "memory": ...}`. A
  core request wins over a core count; with neither, the request is `"1"`.
- `sparkbatch.yunikorn`: `YunikornScheduler` (made by `factory()`), which sets
  both pods' scheduler name to `yunikorn`, adds the queue label from the batch
  scheduler options, and annotates the driver with the JSON task-group
  definitions (`TaskGroup`) and both pods with their task-group names. The
  executor group is left out when the initial executor count (the largest of
  instances, minimum and initial dynamic-allocation executors) is zero.
  `merge_node_selector()` merges app-wide and pod node selectors, pod entries
  winning.

## Installation

```
pip install sparkbatch
```

## Usage

```python
from sparkbatch import yunikorn
from sparkbatch.registry import get_registry
from sparkbatch.scheduler import (
    BatchSchedulerConfiguration,
    DriverSpec,
    ExecutorSpec,
    SparkApplication,
    SparkApplicationSpec,
    SparkApplicationType,
)

registry = get_registry()
registry.register("yunikorn", yunikorn.factory)

app = SparkApplication(
    name="spark-pi",
    spec=SparkApplicationSpec(
        type=SparkApplicationType.SCALA,
        driver=DriverSpec(cores=1, memory="512m"),
        executor=ExecutorSpec(cores=1, memory="512m", instances=2),
        batch_scheduler_options=BatchSchedulerConfiguration(queue="root.default"),
    ),
)

scheduler = registry.get_scheduler("yunikorn", None)
if scheduler.should_schedule(app):
    scheduler.schedule(app)

print(app.spec.driver.annotations["yunikorn.apache.org/task-groups"])
```

Here both task groups ask for `"cpu": "1"` and `"memory": "896Mi"`
(512 MiB plus the 384 MiB minimum overhead).

## Errors

An unknown scheduler name or a name registered twice raises `SchedulerError`.
Unparsable sizes, overhead factors or CPU quantities raise `ValueError` from
the sizing functions; `YunikornScheduler.schedule` reports them as
`SchedulerError`.

## What it does not do

The package talks to no Kubernetes cluster. It only changes the
`SparkApplication` objects it is given: it does not create, update or delete
pod groups or any other cluster resources, and Yunikorn is the only scheduler
it provides. Other schedulers can be added by implementing `BatchScheduler`
and registering a factory.

## Running the tests

```
pip install -e ".[test]"
pytest
```