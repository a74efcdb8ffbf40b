"""Export of a flow's structure as plain data or JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from taskflow.graph import Dag, Node, FlowError
from taskflow.operation import Operation

_DYNAMIC = "dynamic"


@dataclass
class OperationExporter:
    """The exported form of an operation."""

    name: str = ""
    properties: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the operation under its serialised keys."""
        return {
            "name": self.name,
            "properties": {key: list(values) for key, values in self.properties.items()},
        }


@dataclass
class NodeExporter:
    """The exported form of a node."""

    id: str = ""
    index: int = 0
    unique_id: str = ""
    is_dynamic: bool = False
    is_condition: bool = False
    is_foreach: bool = False
    has_aggregator: bool = False
    has_sub_aggregator: bool = False
    has_sub_dag: bool = False
    in_degree: int = 0
    out_degree: int = 0
    sub_dag: Optional[DagExporter] = None
    foreach_dag: Optional[DagExporter] = None
    conditional_dags: Optional[dict[str, DagExporter]] = None
    dynamic_exec_only: bool = False
    operations: list[OperationExporter] = field(default_factory=list)
    children: list[str] = field(default_factory=list)
    children_exec_only: dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the node under its serialised keys; empty optional parts are left out."""
        result: dict[str, Any] = {
            "id": self.id,
            "node-index": self.index,
            "unique-id": self.unique_id,
            "is-dynamic": self.is_dynamic,
            "is-condition": self.is_condition,
            "is-foreach": self.is_foreach,
            "has-aggregator": self.has_aggregator,
            "has-sub-aggregator": self.has_sub_aggregator,
            "has-subdag": self.has_sub_dag,
            "in-degree": self.in_degree,
            "out-degree": self.out_degree,
        }
        if self.sub_dag is not None:
            result["sub-flow"] = self.sub_dag.to_dict()
        if self.foreach_dag is not None:
            result["foreach-flow"] = self.foreach_dag.to_dict()
        if self.conditional_dags:
            result["conditional-dags"] = {
                key: self.conditional_dags[key].to_dict()
                for key in sorted(self.conditional_dags)
            }
        result["dynamic-exec-only"] = self.dynamic_exec_only
        if self.operations:
            result["operations"] = [operation.to_dict() for operation in self.operations]
        if self.children:
            result["childrens"] = list(self.children)
        result["child-exec-only"] = {
            key: self.children_exec_only[key] for key in sorted(self.children_exec_only)
        }
        return result


@dataclass
class DagExporter:
    """The exported form of a dag."""

    id: str = ""
    start_node: str = ""
    end_node: str = ""
    has_branch: bool = False
    has_edge: bool = False
    execution_only_dag: bool = False
    nodes: Optional[dict[str, NodeExporter]] = None
    is_valid: bool = False
    validation_error: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the dag under its serialised keys."""
        result: dict[str, Any] = {
            "id": self.id,
            "start-node": self.start_node,
            "end-node": self.end_node,
            "has-branch": self.has_branch,
            "has-edge": self.has_edge,
            "exec-only-flow": self.execution_only_dag,
            "nodes": (
                None
                if self.nodes is None
                else {key: self.nodes[key].to_dict() for key in sorted(self.nodes)}
            ),
            "is-valid": self.is_valid,
        }
        if self.validation_error:
            result["validation-error"] = self.validation_error
        return result


def export_operation(operation: Operation) -> OperationExporter:
    """Export an operation's name and properties."""
    return OperationExporter(
        name=operation.get_id(), properties=dict(operation.get_properties())
    )


def export_node(node: Node) -> NodeExporter:
    """Export a node together with the dags it holds."""
    exported = NodeExporter(id=node.id, index=node.index, unique_id=node.unique_id)
    exported.is_dynamic = node.dynamic

    if node.condition is not None:
        exported.is_condition = True
        if node.forwarders.get(_DYNAMIC) is None:
            exported.dynamic_exec_only = True
        for condition, sub in (node.conditional_dags or {}).items():
            if exported.conditional_dags is None:
                exported.conditional_dags = {}
            exported.conditional_dags[condition] = export_dag(sub)

    if node.foreach is not None:
        exported.is_foreach = True
        exported.foreach_dag = export_dag(node.sub_dag) if node.sub_dag is not None else DagExporter()
        if node.forwarders.get(_DYNAMIC) is None:
            exported.dynamic_exec_only = True

    exported.has_aggregator = node.aggregator is not None
    exported.has_sub_aggregator = node.sub_aggregator is not None

    if node.sub_dag is not None and not node.dynamic:
        exported.has_sub_dag = True
        exported.sub_dag = export_dag(node.sub_dag)

    exported.operations = [export_operation(operation) for operation in node.operations]

    for child in node.children:
        exported.children.append(child.id)
        exported.children_exec_only[child.id] = node.forwarders.get(child.id) is None
    return exported


def export_dag(dag: Dag) -> DagExporter:
    """Export a dag and all of its nodes without validating it."""
    exported = DagExporter(id=dag.id)
    if dag.initial_node is not None:
        exported.start_node = dag.initial_node.id
    if dag.end_node is not None:
        exported.end_node = dag.end_node.id
    exported.has_branch = dag.has_branch
    exported.has_edge = dag.has_edge
    exported.execution_only_dag = dag.execution_flow
    for node_id, node in dag.nodes.items():
        if exported.nodes is None:
            exported.nodes = {}
        exported.nodes[node_id] = export_node(node)
    return exported


def get_definition(dag: Dag) -> DagExporter:
    """Validate ``dag`` and export it; a failed validation is recorded, not raised."""
    is_valid = True
    error = ""
    try:
        dag.validate()
    except FlowError as exc:
        is_valid = False
        error = str(exc)
    exported = export_dag(dag)
    exported.is_valid = is_valid
    exported.validation_error = error
    return exported


def definition_json(dag: Dag) -> str:
    """Validate ``dag`` and return its definition as indented JSON."""
    return json.dumps(get_definition(dag).to_dict(), indent=4, ensure_ascii=False)