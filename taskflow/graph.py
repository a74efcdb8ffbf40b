"""Directed acyclic graphs of flow nodes.

A :class:`Dag` holds :class:`Node` vertices joined by directed edges.
Nodes may carry operations, a task, sub-dags, conditional dags and the
functions that aggregate, split or forward data between them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional

from taskflow.dataset import DataSet
from taskflow.operation import BlankOperation, Operation

# Aggregates the inputs of several nodes, keyed by node id, into one.
Aggregator = Callable[[dict[str, bytes]], bytes]
# Transforms a node's output before it is handed to one child.
Forwarder = Callable[[bytes], bytes]
# Splits a node's input into parts, keyed by name, run in parallel.
ForEach = Callable[[bytes], dict[str, bytes]]
# Picks the names of the conditional dags to run for an input.
Condition = Callable[[bytes], list[str]]

_ROOT_ID = "0"
_DYNAMIC = "dynamic"


class FlowError(Exception):
    """Base class of errors raised while building or validating a flow."""


class NoVertexError(FlowError):
    """The flow has no vertex."""

    def __init__(self, message: str = "flow has no vertex set") -> None:
        super().__init__(message)


class CyclicError(FlowError):
    """An edge would close a cycle."""

    def __init__(self, message: str = "flow has cyclic dependency") -> None:
        super().__init__(message)


class DuplicateEdgeError(FlowError):
    """An edge is defined twice."""

    def __init__(self, message: str = "edge redefined") -> None:
        super().__init__(message)


class DuplicateVertexError(FlowError):
    """A vertex is defined twice."""

    def __init__(self, message: str = "vertex redefined") -> None:
        super().__init__(message)


class MultipleStartError(FlowError):
    """The flow has more than one start vertex."""

    def __init__(self, message: str = "only one start vertex is allowed") -> None:
        super().__init__(message)


class RecursiveDependencyError(FlowError):
    """A dag would include itself as a sub-dag."""

    def __init__(self, message: str = "flow has recursive dependency") -> None:
        super().__init__(message)


def default_forwarder(data: bytes) -> bytes:
    """Forward the content of ``data`` unchanged, as bytes."""
    return bytes(data)


class Task(ABC):
    """Work attached to a node and run when the flow reaches it."""

    @abstractmethod
    def node_name(self) -> str:
        """Return the name of the node the task belongs to."""

    @abstractmethod
    def run(self, data: DataSet) -> None:
        """Run the task against the flow's shared data; raise on failure."""


def _contains(nodes: Iterable[Node], node: Node) -> bool:
    return any(other.id == node.id for other in nodes)


class Node:
    """A vertex of a flow."""

    def __init__(
        self,
        node_id: str,
        index: int,
        parent_dag: Dag,
        operations: Optional[list[Operation]] = None,
    ) -> None:
        self.id = node_id
        self.index = index
        self.unique_id = ""

        self.sub_dag: Optional[Dag] = None
        self.conditional_dags: Optional[dict[str, Dag]] = None
        self.operations: list[Operation] = list(operations or [])

        self.dynamic = False
        self.aggregator: Optional[Aggregator] = None
        self.foreach: Optional[ForEach] = None
        self.condition: Optional[Condition] = None
        self.sub_aggregator: Optional[Aggregator] = None
        self.forwarders: dict[str, Optional[Forwarder]] = {}

        self.task: Optional[Task] = None
        self.parent_dag = parent_dag
        self.indegree = 0
        self.dynamic_indegree = 0
        self.outdegree = 0
        self.children: list[Node] = []
        self.depends_on: list[Node] = []

        self.next: list[Node] = []
        self.prev: list[Node] = []

    def __repr__(self) -> str:
        return f"Node({self.id!r}, index={self.index})"

    def add_operation(self, operation: Operation) -> None:
        """Append an operation to the node."""
        self.operations.append(operation)

    def add_aggregator(self, aggregator: Aggregator) -> None:
        """Set the function combining several inputs into one."""
        self.aggregator = aggregator

    def add_foreach(self, foreach: ForEach) -> None:
        """Make the node dynamic, running its sub-dag for each part of the input."""
        self.foreach = foreach
        self.dynamic = True
        self.add_forwarder(_DYNAMIC, default_forwarder)

    def add_condition(self, condition: Condition) -> None:
        """Make the node dynamic, running only the conditional dags selected."""
        self.condition = condition
        self.dynamic = True
        self.add_forwarder(_DYNAMIC, default_forwarder)

    def add_sub_aggregator(self, aggregator: Aggregator) -> None:
        """Set the function combining foreach or condition outputs."""
        self.sub_aggregator = aggregator

    def add_forwarder(self, child: str, forwarder: Optional[Forwarder]) -> None:
        """Set how output reaches ``child``; None marks an execution-only edge."""
        self.forwarders[child] = forwarder
        dag = self.parent_dag
        if forwarder is not None:
            dag.data_forwarder_count += 1
            dag.execution_flow = False
        else:
            dag.data_forwarder_count -= 1
            if dag.data_forwarder_count == 0:
                dag.execution_flow = True

    def add_sub_dag(self, sub_dag: Dag) -> None:
        """Attach a sub-dag; raise RecursiveDependencyError if it encloses the node."""
        parent_dag: Optional[Dag] = self.parent_dag
        while parent_dag is not None:
            if parent_dag is sub_dag:
                raise RecursiveDependencyError()
            parent_node = parent_dag.parent_node
            if parent_node is None:
                break
            parent_dag = parent_node.parent_dag
        self.sub_dag = sub_dag
        sub_dag.parent_node = self

    def add_foreach_dag(self, sub_dag: Dag) -> None:
        """Attach the sub-dag run for each part of a foreach node."""
        self.sub_dag = sub_dag
        sub_dag.parent_node = self
        self.parent_dag.has_branch = True
        self.parent_dag.has_edge = True

    def add_conditional_dag(self, condition: str, dag: Dag) -> None:
        """Attach the dag run when ``condition`` is selected."""
        if self.conditional_dags is None:
            self.conditional_dags = {}
        self.conditional_dags[condition] = dag
        dag.parent_node = self
        self.parent_dag.has_branch = True
        self.parent_dag.has_edge = True

    def get_forwarder(self, child: str) -> Optional[Forwarder]:
        """Return the forwarder for ``child``, or None."""
        return self.forwarders.get(child)

    def get_conditional_dag(self, condition: str) -> Optional[Dag]:
        """Return the dag attached for ``condition``, or None."""
        if self.conditional_dags is None:
            return None
        return self.conditional_dags.get(condition)

    def _make_unique_id(self, dag_id: str) -> str:
        return f"{dag_id}_{self.index}_{self.id}"


class Dag:
    """A flow of nodes joined by directed edges."""

    def __init__(self) -> None:
        self.id = _ROOT_ID
        self.nodes: dict[str, Node] = {}
        self.parent_node: Optional[Node] = None
        self.initial_node: Optional[Node] = None
        self.end_node: Optional[Node] = None
        self.has_branch = False
        self.has_edge = False
        self.validated = False
        self.execution_flow = True
        self.data_forwarder_count = 0
        self.node_index = 0

    def __repr__(self) -> str:
        return f"Dag({self.id!r}, nodes={list(self.nodes)})"

    def append(self, other: Dag) -> None:
        """Merge the nodes of ``other``; they stay unconnected until edges are added."""
        if any(node_id in self.nodes for node_id in other.nodes):
            raise DuplicateVertexError()
        self.nodes.update(other.nodes)

    def add_vertex(self, node_id: str, operations: Optional[list[Operation]] = None) -> Node:
        """Create a node, replacing any node with the same id, and return it."""
        self.node_index += 1
        node = Node(node_id, self.node_index, self, operations)
        self.nodes[node_id] = node
        return node

    def add_edge(self, from_id: str, to_id: str) -> None:
        """Add the edge from_id -> to_id, creating missing vertices."""
        from_node = self.nodes.get(from_id) or self.add_vertex(from_id, [])
        to_node = self.nodes.get(to_id) or self.add_vertex(to_id, [])

        if _contains(from_node.children, to_node) or _contains(to_node.depends_on, from_node):
            raise DuplicateEdgeError()
        if _contains(to_node.next, from_node) or _contains(from_node.prev, to_node):
            raise CyclicError()

        from_node.next.append(to_node)
        from_node.next.extend(to_node.next)
        for before in from_node.prev:
            before.next.append(to_node)
            before.next.extend(to_node.next)

        to_node.prev.append(from_node)
        to_node.prev.extend(from_node.prev)
        for after in to_node.next:
            after.prev.append(from_node)
            after.prev.extend(from_node.prev)

        from_node.children.append(to_node)
        to_node.depends_on.append(from_node)
        to_node.indegree += 1
        if from_node.dynamic:
            to_node.dynamic_indegree += 1
        from_node.outdegree += 1

        from_node.add_forwarder(to_id, default_forwarder)

        if to_node.indegree > 1 or from_node.outdegree > 1:
            self.has_branch = True
        self.has_edge = True

    def get_node(self, node_id: str) -> Optional[Node]:
        """Return the node with ``node_id``, or None."""
        return self.nodes.get(node_id)

    def _absorb(self, child: Dag) -> None:
        child.validate()
        if child.has_branch:
            self.has_branch = True
        if child.has_edge:
            self.has_edge = True
        if not child.execution_flow:
            self.execution_flow = False

    def validate(self) -> None:
        """Check the flow and its sub-flows, fixing ids, start and end nodes.

        A flow with several end nodes gets an extra end node joining them.
        """
        if self.validated:
            return
        if not self.nodes:
            raise NoVertexError()

        initial_count = 0
        end_nodes: list[Node] = []
        for node in list(self.nodes.values()):
            node.unique_id = node._make_unique_id(self.id)
            if node.indegree == 0:
                initial_count += 1
                self.initial_node = node
            if node.outdegree == 0:
                end_nodes.append(node)
            if node.sub_dag is not None:
                if self.id != _ROOT_ID:
                    node.sub_dag.id = f"{self.id}_{node.index}"
                else:
                    node.sub_dag.id = f"{node.index}"
                self._absorb(node.sub_dag)
            if node.dynamic and node.forwarders.get(_DYNAMIC) is not None:
                self.execution_flow = False
            for condition, cdag in (node.conditional_dags or {}).items():
                if self.id != _ROOT_ID:
                    cdag.id = f"{self.id}_{node.index}_{condition}"
                else:
                    cdag.id = f"{node.index}_{condition}"
                self._absorb(cdag)

        if initial_count > 1:
            raise MultipleStartError(f"{MultipleStartError()}, flow: {self.id}")

        if not end_nodes:
            raise CyclicError()
        if len(end_nodes) > 1:
            end_id = f"end_{self.id}"
            end_node = self.add_vertex(end_id, [BlankOperation()])
            for node in end_nodes:
                self.add_edge(node.id, end_id)
                node.add_forwarder(end_id, None)
            self.end_node = end_node
        else:
            self.end_node = end_nodes[0]

        self.validated = True

    def get_nodes(self, dynamic_option: str = "") -> list[str]:
        """Return unique ids of the flow's nodes and of non-dynamic sub-dags."""
        result: list[str] = []
        for node in self.nodes.values():
            if dynamic_option:
                result.append(f"{node.unique_id}_{dynamic_option}")
            else:
                result.append(node.unique_id)
            if node.dynamic:
                continue
            if node.sub_dag is not None:
                result.extend(node.sub_dag.get_nodes(dynamic_option))
        return result