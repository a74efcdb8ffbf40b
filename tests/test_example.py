import pytest

from taskflow.dataset import DataSet
from taskflow.example import ExampleTask, factory
from taskflow.graph import Dag
from taskflow.runner import Flow


def test_factory_builds_registered_task():
    task = factory("a")
    assert isinstance(task, ExampleTask)
    assert task.node_name() == "a"


def test_factory_unknown_name():
    with pytest.raises(LookupError):
        factory("missing")


def test_run_leaves_data_untouched():
    data = DataSet()
    data.set("k", 1)
    assert ExampleTask("a").run(data) is None
    assert str(data) == "key=k,value=1"


def test_example_task_in_flow():
    dag = Dag()
    dag.add_edge("a", "b")
    for node in dag.nodes.values():
        node.task = ExampleTask(node.id)
    flow = Flow(dag).run()
    assert flow.errors == {}
    assert "a" not in flow.data