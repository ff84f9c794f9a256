"""Base class for the fixed set of derived-field calculation modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from feasibility.convergence import CENTS, WHOLE, needs_write, write_if_changed
from feasibility.paths import Path, get_in, parse_path
from feasibility.store import ConvergenceError, RecordStore, Subscription


MODULE_ROUND_SLACK = 8


@dataclass(frozen=True)
class FieldWrite:
    path: Path
    value: Any
    precision: str = WHOLE

    @classmethod
    def at(cls, path: str | Path, value: Any, precision: str = WHOLE) -> "FieldWrite":
        return cls(parse_path(path), value, precision)

    @classmethod
    def cents(cls, path: str | Path, value: Any) -> "FieldWrite":
        return cls(parse_path(path), value, CENTS)


class CalculationModule:
    """One business area that owns a known set of derived paths.

    Subclasses declare:

    * ``trigger_fields``: top-level field names whose paths (including any
      nested row path under a list field) wake the module.
    * ``output_fields``: top-level derived fields the module writes.
    * ``row_outputs``: per-list row fields the module writes, e.g.
      ``{"capex_items": {"total_cost"}}``.
    * ``ignored_row_fields``: row fields owned by another module that must not
      wake this one.
    * ``synced_fields``: fields the module writes that stay user-editable and
      keep waking it, such as the rent mirrored from the premises section.
    * ``on_bulk_load``: whether a bulk replace (path ``None``) triggers it.

    ``compute`` is a pure function of the record returning the writes; the
    base class applies them through the convergence guard.
    """

    name = ""
    trigger_fields: frozenset[str] = frozenset()
    output_fields: frozenset[str] = frozenset()
    row_outputs: dict[str, frozenset[str]] = {}
    ignored_row_fields: dict[str, frozenset[str]] = {}
    synced_fields: frozenset[str] = frozenset()
    on_bulk_load = True
    tolerance_gated = True

    def __init__(self) -> None:
        self.store: RecordStore | None = None
        self.subscription: Subscription | None = None
        self.runs = 0

    def owns(self, path: Path) -> bool:
        if len(path) == 1:
            return path[0] in self.output_fields
        leaf = path[-1]
        return isinstance(leaf, str) and leaf in self.row_outputs.get(path[0], ())

    def ignores(self, path: Path) -> bool:
        leaf = path[-1]
        return len(path) > 1 and isinstance(leaf, str) and leaf in self.ignored_row_fields.get(path[0], ())

    def triggered_by(self, path: Optional[Path]) -> bool:
        if path is None:
            return self.on_bulk_load
        if self.owns(path) or self.ignores(path):
            return False
        return path[0] in self.trigger_fields

    def compute(self, record: dict, path: Optional[Path]) -> list[FieldWrite]:
        raise NotImplementedError

    def derived_paths(self, record: dict) -> list[Path]:
        out: list[Path] = [(key,) for key in sorted(self.output_fields | self.synced_fields)]
        for list_name, fields in sorted(self.row_outputs.items()):
            for idx, row in enumerate(record.get(list_name) or []):
                if isinstance(row, dict):
                    out.extend((list_name, idx, field) for field in sorted(fields))
        return out

    def attach(self, store: RecordStore) -> Subscription:
        self.store = store
        self.subscription = store.subscribe(self._on_change, name=self.name)
        return self.subscription

    def detach(self) -> None:
        if self.subscription is not None:
            self.subscription.unsubscribe()
        self.subscription = None
        self.store = None

    def _apply(self, write: FieldWrite) -> bool:
        if self.tolerance_gated:
            return write_if_changed(self.store, write.path, write.value, write.precision)
        self.store.set(write.path, write.value)
        return True

    def _on_change(self, snapshot: dict, path: Optional[Path]) -> None:
        if not self.triggered_by(path):
            return
        self.runs += 1
        if not self.tolerance_gated:
            for write in self.compute(snapshot, path):
                self._apply(write)
            return
        # A round applies every pending write computed from one snapshot. It
        # ends early when a commit made since (ours or a nested cascade's)
        # would trigger this module; the rest of the batch may be stale.
        record = snapshot
        limit = len(self.derived_paths(record)) + MODULE_ROUND_SLACK
        for _ in range(limit):
            pending = [
                w for w in self.compute(record, path)
                if needs_write(get_in(record, w.path), w.value, w.precision)
            ]
            if not pending:
                return
            for write in pending:
                mark = len(self.store.commit_log)
                self._apply(write)
                if any(self.triggered_by(c.path) for c in self.store.commit_log[mark:]):
                    break
            record = self.store.get_all()
        raise ConvergenceError(path, limit, kind="rounds", module=self.name)
