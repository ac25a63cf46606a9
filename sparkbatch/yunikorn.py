"""Batch scheduler that prepares Spark applications for Yunikorn gang scheduling."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from sparkbatch.resource_usage import driver_pod_requests, executor_pod_requests
from sparkbatch.scheduler import BatchScheduler, SchedulerError, SparkApplication

SCHEDULER_NAME = "yunikorn"

# Any names work as long as the pods carry the same names as the task group definitions.
DRIVER_TASK_GROUP_NAME = "spark-driver"
EXECUTOR_TASK_GROUP_NAME = "spark-executor"

TASK_GROUP_NAME_ANNOTATION = "yunikorn.apache.org/task-group-name"
TASK_GROUPS_ANNOTATION = "yunikorn.apache.org/task-groups"
QUEUE_LABEL = "queue"

_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@dataclass
class TaskGroup:
    """A Yunikorn task group: pods that must be scheduled together."""

    name: str
    min_member: int
    min_resource: Optional[dict[str, str]] = None
    node_selector: Optional[dict[str, str]] = None
    tolerations: Optional[list[dict[str, Any]]] = None
    affinity: Optional[dict[str, Any]] = None
    labels: Optional[dict[str, str]] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the task group as Yunikorn expects it, leaving out empty fields."""
        result: dict[str, Any] = {"name": self.name, "minMember": self.min_member}
        if self.min_resource:
            result["minResource"] = dict(sorted(self.min_resource.items()))
        if self.node_selector:
            result["nodeSelector"] = dict(sorted(self.node_selector.items()))
        if self.tolerations:
            result["tolerations"] = list(self.tolerations)
        if self.affinity is not None:
            result["affinity"] = self.affinity
        if self.labels:
            result["labels"] = dict(sorted(self.labels.items()))
        return result


def _marshal_task_groups(task_groups: list[TaskGroup]) -> str:
    text = json.dumps(
        [group.to_dict() for group in task_groups],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    for char, escaped in _JSON_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def _initial_executor_number(app: SparkApplication) -> int:
    spec = app.spec
    number = spec.executor.instances or 0
    allocation = spec.dynamic_allocation
    if allocation is not None:
        if allocation.min_executors is not None:
            number = max(number, allocation.min_executors)
        if allocation.initial_executors is not None:
            number = max(number, allocation.initial_executors)
    return number


def merge_node_selector(
    app_node_selector: Optional[dict[str, str]],
    pod_node_selector: Optional[dict[str, str]],
) -> Optional[dict[str, str]]:
    """Merge app-wide and pod-specific node selectors; pod entries win.

    Returns None when the merged selector is empty.
    """
    merged = {**(app_node_selector or {}), **(pod_node_selector or {})}
    return merged or None


def _add_queue_labels(app: SparkApplication) -> None:
    options = app.spec.batch_scheduler_options
    if options is None or options.queue is None:
        return
    driver, executor = app.spec.driver, app.spec.executor
    if driver.labels is None:
        driver.labels = {}
    if executor.labels is None:
        executor.labels = {}
    driver.labels[QUEUE_LABEL] = options.queue
    executor.labels[QUEUE_LABEL] = options.queue


def _add_task_group_annotations(app: SparkApplication, task_groups: list[TaskGroup]) -> None:
    try:
        marshalled = _marshal_task_groups(task_groups)
    except (TypeError, ValueError) as err:
        raise SchedulerError(f"failed to marshal taskGroups: {err}") from err

    driver, executor = app.spec.driver, app.spec.executor
    if driver.annotations is None:
        driver.annotations = {}
    if executor.annotations is None:
        executor.annotations = {}

    driver.annotations[TASK_GROUP_NAME_ANNOTATION] = DRIVER_TASK_GROUP_NAME
    executor.annotations[TASK_GROUP_NAME_ANNOTATION] = EXECUTOR_TASK_GROUP_NAME
    # Only the originating pod needs the task group definitions.
    driver.annotations[TASK_GROUPS_ANNOTATION] = marshalled


class YunikornScheduler(BatchScheduler):
    """Marks driver and executor pods for Yunikorn gang scheduling."""

    def name(self) -> str:
        return SCHEDULER_NAME

    def should_schedule(self, app: SparkApplication) -> bool:
        # Everything Yunikorn needs travels on pod annotations.
        return True

    def schedule(self, app: SparkApplication) -> None:
        spec = app.spec
        driver, executor = spec.driver, spec.executor

        try:
            driver_resources = driver_pod_requests(app)
        except ValueError as err:
            raise SchedulerError(f"failed to calculate driver minResources: {err}") from err

        task_groups = [
            TaskGroup(
                name=DRIVER_TASK_GROUP_NAME,
                min_member=1,
                min_resource=driver_resources,
                node_selector=merge_node_selector(spec.node_selector, driver.node_selector),
                tolerations=driver.tolerations,
                affinity=driver.affinity,
                labels=driver.labels,
            )
        ]

        # A task group with no members is invalid, so leave the executors out entirely.
        initial_executors = _initial_executor_number(app)
        if initial_executors > 0:
            try:
                executor_resources = executor_pod_requests(app)
            except ValueError as err:
                raise SchedulerError(
                    f"failed to calculate executor minResources: {err}"
                ) from err
            task_groups.append(
                TaskGroup(
                    name=EXECUTOR_TASK_GROUP_NAME,
                    min_member=initial_executors,
                    min_resource=executor_resources,
                    node_selector=merge_node_selector(spec.node_selector, executor.node_selector),
                    tolerations=executor.tolerations,
                    affinity=executor.affinity,
                    labels=executor.labels,
                )
            )

        driver.scheduler_name = SCHEDULER_NAME
        executor.scheduler_name = SCHEDULER_NAME

        _add_queue_labels(app)
        try:
            _add_task_group_annotations(app, task_groups)
        except SchedulerError as err:
            raise SchedulerError(f"failed to add task group annotations: {err}") from err

    def cleanup(self, app: SparkApplication) -> None:
        # Nothing is created outside the application, so nothing needs removing.
        return None


def factory(config: Any) -> YunikornScheduler:
    """Create a Yunikorn scheduler; it needs no configuration."""
    return YunikornScheduler()