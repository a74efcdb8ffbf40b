import pytest

from taskflow.operation import BlankOperation, Operation


def test_blank_operation_id_is_end():
    assert BlankOperation().get_id() == "end"


def test_blank_operation_encodes_empty():
    assert BlankOperation().encode() == b""


def test_blank_operation_passes_data_through():
    op = BlankOperation()
    assert op.execute(b"payload", {"x": 1}) == b"payload"
    assert op.execute(b"") == b""


def test_blank_operation_properties_are_fresh_and_empty():
    op = BlankOperation()
    first = op.get_properties()
    first["k"] = ["v"]
    assert op.get_properties() == {}


def test_operation_is_abstract():
    with pytest.raises(TypeError):
        Operation()


def test_subclass_inherits_blank_behaviour():
    class Upper(BlankOperation):
        def execute(self, data, options=None):
            return data.upper()

    op = Upper()
    assert op.execute(b"abc") == b"ABC"
    assert BlankOperation.execute(op, b"abc", {}) == b"abc"
    assert BlankOperation.get_id(op) == "end"
    assert BlankOperation.encode(op) == b""
    assert BlankOperation.get_properties(op) == {}