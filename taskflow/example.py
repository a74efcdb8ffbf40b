"""A sample task and a factory creating tasks by name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from taskflow.dataset import DataSet
from taskflow.graph import Task


@dataclass
class ExampleTask(Task):
    """A task that leaves the flow's data as it is."""

    name: str

    def node_name(self) -> str:
        return self.name

    def run(self, data: DataSet) -> None:
        """Check that ``data`` is a DataSet; raise TypeError otherwise."""
        if not isinstance(data, DataSet):
            raise TypeError(
                f"task {self.name!r} expects a DataSet, got {type(data).__name__}"
            )


TASK_FACTORIES: dict[str, Callable[[str], Task]] = {
    "a": ExampleTask,
}


def factory(name: str) -> Task:
    """Create the task registered under ``name``; raise LookupError if none is."""
    try:
        make = TASK_FACTORIES[name]
    except KeyError:
        raise LookupError(f"not found: {name}") from None
    return make(name)