import json

from taskflow.definition import (
    DagExporter,
    definition_json,
    export_dag,
    export_operation,
    get_definition,
)
from taskflow.graph import Dag
from taskflow.operation import BlankOperation


def _chain():
    dag = Dag()
    dag.add_edge("a", "b")
    return dag


def test_export_operation_blank():
    exported = export_operation(BlankOperation())
    assert exported.name == "end"
    assert exported.properties == {}
    assert exported.to_dict() == {"name": "end", "properties": {}}


def test_definition_of_simple_chain():
    definition = get_definition(_chain())
    assert definition.is_valid
    assert definition.validation_error == ""
    assert definition.start_node == "a"
    assert definition.end_node == "b"
    assert set(definition.nodes) == {"a", "b"}
    node_a = definition.nodes["a"]
    assert node_a.children == ["b"]
    assert node_a.children_exec_only == {"b": False}
    assert definition.nodes["b"].children == []


def test_unique_ids_follow_validation():
    dag = _chain()
    definition = get_definition(dag)
    for node_id, exported in definition.nodes.items():
        assert exported.unique_id == dag.get_node(node_id).unique_id
        assert exported.index == dag.get_node(node_id).index


def test_invalid_empty_dag_records_error():
    definition = get_definition(Dag())
    assert not definition.is_valid
    assert definition.validation_error == "flow has no vertex set"
    assert definition.nodes is None
    data = definition.to_dict()
    assert data["validation-error"] == "flow has no vertex set"
    assert data["nodes"] is None


def test_multiple_start_is_reported():
    dag = Dag()
    dag.add_edge("a", "c")
    dag.add_edge("b", "c")
    definition = get_definition(dag)
    assert not definition.is_valid
    assert "only one start vertex is allowed" in definition.validation_error


def test_multiple_ends_get_blank_end_node():
    dag = Dag()
    dag.add_edge("a", "b")
    dag.add_edge("a", "c")
    definition = get_definition(dag)
    assert definition.is_valid
    end = definition.end_node
    assert end == "end_0"
    assert [op.name for op in definition.nodes[end].operations] == ["end"]
    assert definition.nodes["b"].children_exec_only == {end: True}
    assert definition.has_branch


def test_json_omits_empty_parts():
    data = json.loads(definition_json(_chain()))
    assert data["is-valid"] is True
    assert "validation-error" not in data
    node_b = data["nodes"]["b"]
    assert "childrens" not in node_b
    assert "operations" not in node_b
    assert "sub-flow" not in node_b
    assert node_b["child-exec-only"] == {}
    assert data["nodes"]["a"]["childrens"] == ["b"]


def test_json_round_trips_to_dict():
    dag = _chain()
    assert json.loads(definition_json(dag)) == get_definition(dag).to_dict()


def test_conditional_node_export():
    dag = Dag()
    node = dag.add_vertex("a", [])
    node.add_condition(lambda data: ["yes"])
    branch = Dag()
    branch.add_vertex("x", [])
    node.add_conditional_dag("yes", branch)
    definition = get_definition(dag)
    exported = definition.nodes["a"]
    assert exported.is_condition
    assert exported.is_dynamic
    assert not exported.dynamic_exec_only
    assert set(exported.conditional_dags) == {"yes"}
    assert exported.conditional_dags["yes"].id == branch.id
    assert "conditional-dags" in exported.to_dict()


def test_foreach_node_export():
    dag = Dag()
    node = dag.add_vertex("a", [])
    node.add_foreach(lambda data: {"p": data})
    sub = Dag()
    sub.add_vertex("inner", [])
    node.add_foreach_dag(sub)
    definition = get_definition(dag)
    exported = definition.nodes["a"]
    assert exported.is_foreach
    assert exported.foreach_dag.id == str(node.index)
    assert not exported.has_sub_dag
    assert exported.sub_dag is None
    assert set(exported.foreach_dag.nodes) == {"inner"}


def test_sub_dag_export_and_aggregators():
    dag = Dag()
    node = dag.add_vertex("a", [])
    node.add_aggregator(lambda inputs: b"")
    sub = Dag()
    sub.add_vertex("inner", [])
    node.add_sub_dag(sub)
    exported = export_dag(dag).nodes["a"]
    assert exported.has_sub_dag
    assert exported.has_aggregator
    assert not exported.has_sub_aggregator
    assert isinstance(exported.sub_dag, DagExporter)
    assert set(exported.sub_dag.nodes) == {"inner"}