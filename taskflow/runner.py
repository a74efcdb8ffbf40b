"""Execution of a dag's tasks in dependency order."""

from __future__ import annotations

import threading
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait

from taskflow.dataset import DataSet
from taskflow.graph import Dag, Node


class Flow:
    """Runs the tasks of a dag, each once all of its parents have finished.

    Tasks share one :class:`DataSet`.  A failing task is recorded in
    ``errors`` under its node id; its children still run.
    """

    def __init__(self, dag: Dag) -> None:
        self.dag = dag
        self.data = DataSet()
        self.errors: dict[str, Exception] = {}
        self._lock = threading.Lock()
        self._remaining: dict[str, int] = {}
        self._reset()

    def _reset(self) -> None:
        with self._lock:
            self._remaining = {node_id: node.indegree for node_id, node in self.dag.nodes.items()}
            self.errors = {}

    def run(self) -> Flow:
        """Run every task of the dag and return the flow once all have finished."""
        self._reset()
        ready = [node for node in self.dag.nodes.values() if node.indegree == 0]
        with ThreadPoolExecutor() as pool:
            pending = {pool.submit(self.run_node, node) for node in ready}
            while pending:
                finished, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in finished:
                    for child in future.result():
                        pending.add(pool.submit(self.run_node, child))
        return self

    def run_node(self, node: Node) -> list[Node]:
        """Run the task of ``node`` and return the children it made ready."""
        try:
            if node.task is not None:
                node.task.run(self.data)
        except Exception as exc:
            with self._lock:
                self.errors[node.id] = exc
        return self._release(node)

    def _release(self, node: Node) -> list[Node]:
        ready: list[Node] = []
        with self._lock:
            for child in node.children:
                self._remaining[child.id] = self._remaining.get(child.id, child.indegree) - 1
                if self._remaining[child.id] == 0:
                    ready.append(child)
        return ready