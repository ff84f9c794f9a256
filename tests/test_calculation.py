from __future__ import annotations

import pytest

from feasibility.calculation import MODULE_ROUND_SLACK, CalculationModule, FieldWrite
from feasibility.convergence import to_number
from feasibility.store import ConvergenceError, RecordStore


class _Counter(CalculationModule):
    name = "counter"
    trigger_fields = frozenset({"seed"})
    output_fields = frozenset({"counter"})
    on_bulk_load = False

    def compute(self, record, path):
        return [FieldWrite.at("counter", to_number(record.get("counter")) + 1)]


class _Doubler(CalculationModule):
    name = "doubler"
    trigger_fields = frozenset({"rows"})
    row_outputs = {"rows": frozenset({"double"})}
    output_fields = frozenset({"total"})

    def compute(self, record, path):
        writes = []
        total = 0
        for idx, row in enumerate(record.get("rows") or []):
            writes.append(FieldWrite.at(("rows", idx, "double"), to_number(row.get("x")) * 2))
            total += to_number(row.get("x")) * 2
        writes.append(FieldWrite.at("total", total))
        return writes


def test_module_writes_a_whole_round_without_a_write_cap():
    rows = [{"x": i + 1} for i in range(400)]
    store = RecordStore({"rows": rows, "total": 0})
    module = _Doubler()
    module.attach(store)
    assert store.get("rows[399].double") == 800
    assert store.get("total") == 160400
    # One write per derived path, no repeats.
    assert store.commit_count == 401
    assert module.runs == 1


def test_module_that_never_settles_raises_round_limit():
    store = RecordStore({"seed": 0, "counter": 0})
    module = _Counter()
    module.attach(store)
    limit = 1 + MODULE_ROUND_SLACK
    with pytest.raises(ConvergenceError) as excinfo:
        store.set("seed", 1)
    assert excinfo.value.kind == "rounds"
    assert excinfo.value.depth == limit
    assert excinfo.value.module == "counter"
    assert str(excinfo.value) == f"counter did not settle after {limit} recompute rounds while handling seed."
    assert store.get("counter") == limit


def test_detached_module_stops_reacting():
    store = RecordStore({"rows": [{"x": 1}], "total": 0})
    module = _Doubler()
    module.attach(store)
    module.detach()
    store.set("rows[0].x", 5)
    assert store.get("total") == 2
