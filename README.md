# taskflow

Small building blocks for concurrent Python programs, using only the
standard library:

- `taskflow.channel.Channel`: a thread-safe channel with bounded or
  non-blocking input, per-item timeouts, timeout callbacks and producer or
  consumer throttling (including per-second rate limits).
- `taskflow.future.Future`: an await-style result holder, started with
  `spawn` and gathered with `await_all` or `block_on_all`.
- `taskflow.graph.Dag` and `taskflow.graph.Node`: a directed acyclic graph of
  nodes with operations, sub-dags, conditional dags and foreach dags, plus
  validation.
- `taskflow.definition`: export a graph as dataclasses, a dictionary or JSON.
- `taskflow.runner.Flow`: run a graph's tasks in dependency order, sharing a
  `taskflow.dataset.DataSet`.

## Installation

```
pip install .
```

With the test tools:

```
pip install ".[test]"
```

## Channel

```python
from taskflow.channel import Channel, with_size, with_timeout

with Channel(with_size(10), with_timeout(0.5)) as ch:
    ch.put("job")
    print(ch.get(timeout=1.0))
    produced, consumed = ch.stats()
```

Options are plain functions passed to the constructor: `with_size`,
`with_nonblock`, `with_timeout`, `with_timeout_callback`, `with_throttle`,
`with_throttle_window` and `with_rate_throttle`. Times are in seconds.

- `put` does nothing once the channel is closed. In blocking mode it waits
  while the buffer is full; with `with_nonblock()` it never waits.
- `get` returns the next value, returns `None` once the channel is closed and
  drained, and raises `TimeoutError` if nothing arrives within `timeout`.
- `for item in ch:` yields values until the channel is closed and drained.
- Items still buffered when their timeout passes are dropped, and handed to
  the timeout callback if one is set.
- `len(ch)` is the number of items produced but not yet consumed.

A channel that is garbage collected without being closed closes itself.

## Futures

```python
from taskflow.future import spawn, await_all

futures = [spawn(lambda n=n: n * n) for n in range(5)]
error = await_all(*futures)
print(error, [f.value() for f in futures])
```

`spawn` runs a function on a new thread; an exception it raises becomes the
future's error. `result()` returns the value or raises that error, `value()`,
`error()` and `ok()` wait and report, and `done()` checks without waiting.
`await_all` returns the first error it meets, in order, without waiting for
the rest; `block_on_all` waits for every future and returns the first error.

## Graphs

```python
from taskflow.graph import Dag
from taskflow.definition import definition_json

dag = Dag()
dag.add_edge("fetch", "parse")
dag.add_edge("parse", "store")
dag.validate()
print(definition_json(dag))
```

`add_edge` creates missing vertices and raises `DuplicateEdgeError` or
`CyclicError`. `validate` assigns unique ids, sets the start and end nodes,
adds a joining end node when there are several ends, and raises
`NoVertexError` or `MultipleStartError`. All of these derive from
`FlowError`. `get_definition` records a validation failure in the exported
result instead of raising it.

## Running tasks

```python
from taskflow.graph import Dag
from taskflow.runner import Flow
from taskflow.example import factory

dag = Dag()
dag.add_edge("a", "b")
dag.get_node("a").task = factory("a")
flow = Flow(dag).run()
print(flow.errors)
```

Tasks subclass `taskflow.graph.Task` and implement `node_name()` and
`run(data)`. Each node's task runs once all of its parents have finished; a
failing task is recorded in `Flow.errors` under its node id and its children
still run. `factory(name)` builds the tasks registered in `TASK_FACTORIES`
and raises `LookupError` for unknown names.

## Other helpers

- `taskflow.config.RedisConfig`: Redis connection settings, built from and
  written to a mapping with `from_mapping` and `to_mapping`.
- `taskflow.constants`: query fragments, table names and queue backend names.
- `taskflow.naming.sql_column_to_hump_style`: turns `user_name` into
  `userName`.
- `taskflow.operation.BlankOperation`: an operation that passes its input
  through.

## What this package does not do

It has no command-line tool and talks to no outside service: `RedisConfig`
only holds settings, there is no Redis or message-queue client, and flow
definitions are not loaded from configuration files.

## Running tests

```
pytest
```