"""Spark application model and the interface every batch scheduler implements."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


class SchedulerError(Exception):
    """Raised when a batch scheduler cannot be found, created or applied."""


class SparkApplicationType(str, enum.Enum):
    """Language an application is written in."""

    JAVA = "Java"
    SCALA = "Scala"
    PYTHON = "Python"
    R = "R"


class DeployMode(str, enum.Enum):
    """Where the Spark driver runs."""

    CLUSTER = "cluster"
    CLIENT = "client"
    IN_CLUSTER_CLIENT = "in-cluster-client"


@dataclass
class SparkPodSpec:
    """Settings shared by driver and executor pods."""

    cores: Optional[int] = None
    core_limit: Optional[str] = None
    memory: Optional[str] = None
    memory_overhead: Optional[str] = None
    labels: Optional[dict[str, str]] = None
    annotations: Optional[dict[str, str]] = None
    node_selector: Optional[dict[str, str]] = None
    tolerations: Optional[list[dict[str, Any]]] = None
    affinity: Optional[dict[str, Any]] = None
    scheduler_name: Optional[str] = None


@dataclass
class DriverSpec(SparkPodSpec):
    """Driver pod settings."""

    core_request: Optional[str] = None


@dataclass
class ExecutorSpec(SparkPodSpec):
    """Executor pod settings."""

    instances: Optional[int] = None
    core_request: Optional[str] = None


@dataclass
class DynamicAllocation:
    """Dynamic executor allocation settings."""

    enabled: bool = False
    initial_executors: Optional[int] = None
    min_executors: Optional[int] = None
    max_executors: Optional[int] = None


@dataclass
class BatchSchedulerConfiguration:
    """Options handed to the batch scheduler."""

    queue: Optional[str] = None
    priority_class_name: Optional[str] = None
    resources: Optional[dict[str, str]] = None


@dataclass
class SparkApplicationSpec:
    """Desired state of a Spark application."""

    type: Optional[SparkApplicationType] = None
    mode: Optional[DeployMode] = None
    memory_overhead_factor: Optional[str] = None
    driver: DriverSpec = field(default_factory=DriverSpec)
    executor: ExecutorSpec = field(default_factory=ExecutorSpec)
    spark_conf: dict[str, str] = field(default_factory=dict)
    node_selector: Optional[dict[str, str]] = None
    dynamic_allocation: Optional[DynamicAllocation] = None
    batch_scheduler: Optional[str] = None
    batch_scheduler_options: Optional[BatchSchedulerConfiguration] = None


@dataclass
class SparkApplication:
    """A Spark application with its metadata and spec."""

    name: str = ""
    namespace: str = ""
    labels: Optional[dict[str, str]] = None
    annotations: Optional[dict[str, str]] = None
    spec: SparkApplicationSpec = field(default_factory=SparkApplicationSpec)


class BatchScheduler(abc.ABC):
    """A batch scheduler that prepares Spark applications for scheduling."""

    @abc.abstractmethod
    def name(self) -> str:
        """Return the scheduler's name."""

    @abc.abstractmethod
    def should_schedule(self, app: SparkApplication) -> bool:
        """Tell whether the application should go through this scheduler."""

    @abc.abstractmethod
    def schedule(self, app: SparkApplication) -> None:
        """Prepare the application for scheduling; raise on failure."""

    @abc.abstractmethod
    def cleanup(self, app: SparkApplication) -> None:
        """Release whatever scheduling created for the application."""


Factory = Callable[[Any], BatchScheduler]