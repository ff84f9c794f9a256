"""Record store with a synchronous, re-entrant change feed.

Every committed write notifies all active subscribers before ``set`` returns.
A subscriber that writes from inside its callback re-enters the feed, so a
cascade of derived-field updates settles depth-first within one outer call.
"""

from __future__ import annotations

import weakref
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Callable, Optional

from feasibility.defaults import DEFAULTS
from feasibility.paths import Path, format_path, get_in, parse_path, set_in


MAX_DISPATCH_DEPTH = 64

Handler = Callable[[dict, Optional[Path]], None]


class ConvergenceError(RuntimeError):
    """Raised when a cascade of derived writes does not settle.

    ``kind`` is ``"depth"`` when re-entrant writes nest deeper than the store
    allows, and ``"rounds"`` when one module keeps finding fresh work after
    ``depth`` recompute rounds.
    """

    def __init__(self, path: Path | None, depth: int, kind: str = "depth", module: str = ""):
        self.path = path
        self.depth = depth
        self.kind = kind
        self.module = module
        where = format_path(path) or "<bulk load>"
        if kind == "rounds":
            message = f"{module or 'Module'} did not settle after {depth} recompute rounds while handling {where}."
        else:
            message = f"Change feed exceeded depth {depth} while writing {where}."
        super().__init__(message)


@dataclass(frozen=True)
class Commit:
    seq: int
    path: Optional[Path]
    value: Any
    depth: int


class Subscription:
    def __init__(self, subscriber_id: int, handler: Handler, store: "RecordStore", name: str = ""):
        self.id = subscriber_id
        self.handler = handler
        self.name = name or f"subscriber-{subscriber_id}"
        self._store_ref = weakref.ref(store)
        self.active = True

    def pause(self) -> None:
        self.active = False

    def resume(self) -> None:
        self.active = True

    def unsubscribe(self) -> None:
        store = self._store_ref()
        if store is not None:
            store.unsubscribe(self.id)
        self.active = False

    def notify(self, snapshot: dict, path: Path | None) -> None:
        if self.active:
            self.handler(snapshot, path)


class RecordStore:
    """Current field values of one in-progress feasibility document."""

    def __init__(self, record: dict | None = None, max_depth: int = MAX_DISPATCH_DEPTH):
        self._record: dict = deepcopy(record) if record is not None else deepcopy(DEFAULTS)
        self._subscriptions: dict[int, Subscription] = {}
        self._next_sub_id = 0
        self._depth = 0
        self.max_depth = int(max_depth)
        self.commit_count = 0
        self.commit_log: list[Commit] = []

    def get(self, path: str | Path, default: Any = None) -> Any:
        return deepcopy(get_in(self._record, parse_path(path), default))

    def get_all(self) -> dict:
        return deepcopy(self._record)

    def set(self, path: str | Path, value: Any) -> None:
        """Commit ``value`` at ``path`` and notify every subscriber.

        The write is unconditional; tolerance gating is the caller's job.
        """
        parsed = parse_path(path)
        self._check_depth(parsed)
        set_in(self._record, parsed, deepcopy(value))
        self._commit(parsed, value)

    def load(self, record: dict) -> None:
        """Replace the whole record and announce it as a bulk load."""
        self._check_depth(None)
        self._record = deepcopy(record)
        self._commit(None, None)

    def subscribe(self, handler: Handler, name: str = "") -> Subscription:
        sub = Subscription(self._next_sub_id, handler, self, name=name)
        self._next_sub_id += 1
        self._subscriptions[sub.id] = sub
        sub.notify(self.get_all(), None)
        return sub

    def unsubscribe(self, subscriber_id: int) -> None:
        self._subscriptions.pop(subscriber_id, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def reset_commit_log(self) -> None:
        self.commit_count = 0
        self.commit_log = []

    def _check_depth(self, path: Path | None) -> None:
        if self._depth >= self.max_depth:
            raise ConvergenceError(path, self.max_depth)

    def _commit(self, path: Path | None, value: Any) -> None:
        self.commit_count += 1
        self.commit_log.append(Commit(self.commit_count, path, deepcopy(value), self._depth))
        self._depth += 1
        snapshot, seen = None, -1
        try:
            for sub in list(self._subscriptions.values()):
                if sub.id not in self._subscriptions:
                    continue
                # Shared until a subscriber commits; subscribers must not mutate it.
                if seen != self.commit_count:
                    snapshot, seen = self.get_all(), self.commit_count
                sub.notify(snapshot, path)
        finally:
            self._depth -= 1
