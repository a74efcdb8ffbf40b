import threading

from taskflow.dataset import DataSet


def test_set_then_get_returns_value():
    data = DataSet()
    data.set("answer", [1, 2])
    assert data.get("answer") == [1, 2]


def test_set_returns_same_data_set_for_chaining():
    data = DataSet()
    assert data.set("a", 1).set("b", 2) is data
    assert (data.get("a"), data.get("b")) == (1, 2)


def test_get_missing_uses_default():
    data = DataSet()
    assert data.get("missing") is None
    assert data.get("missing", "fallback") == "fallback"


def test_contains_reflects_stored_keys():
    data = DataSet()
    data.set("present", None)
    assert "present" in data
    assert "absent" not in data


def test_set_overwrites():
    data = DataSet().set("k", 1).set("k", 2)
    assert data.get("k") == 2


def test_str_format():
    assert str(DataSet()) == ""
    assert str(DataSet().set("a", 1)) == "key=a,value=1"


def test_concurrent_sets_are_all_kept():
    data = DataSet()

    def writer(offset):
        for i in range(100):
            data.set(f"{offset}-{i}", i)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert all(f"{n}-{i}" in data for n in range(4) for i in range(100))