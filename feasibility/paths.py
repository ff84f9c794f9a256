"""Field path parsing and nested record access.

A path is a tuple of segments: strings for dict keys and ints for list
positions. ``"products[0].product_bom[2].consumption_per_unit"`` parses to
``("products", 0, "product_bom", 2, "consumption_per_unit")``. The dotted
numeric form ``"products.0.uom"`` is accepted too.
"""

from __future__ import annotations

import re
from typing import Any, Union

Path = tuple[Union[str, int], ...]

_TOKEN_RE = re.compile(r"([^.\[\]]+)|\[(\d+)\]")
_VALID_RE = re.compile(r"^[^.\[\]]+(?:\.[^.\[\]]+|\[\d+\])*$")

_MISSING = object()


def parse_path(path: str | Path) -> Path:
    if isinstance(path, tuple):
        if not path:
            raise ValueError("Empty field path.")
        return path
    text = str(path).strip()
    if not text or not _VALID_RE.match(text):
        raise ValueError(f"Malformed field path: {path!r}")
    out: list[str | int] = []
    for name, index in _TOKEN_RE.findall(text):
        if index:
            out.append(int(index))
        elif name.isdigit() and out:
            out.append(int(name))
        else:
            out.append(name)
    return tuple(out)


def format_path(path: Path | None) -> str:
    if path is None:
        return ""
    parts: list[str] = []
    for seg in path:
        if isinstance(seg, int):
            parts.append(f"[{seg}]")
        elif parts:
            parts.append(f".{seg}")
        else:
            parts.append(str(seg))
    return "".join(parts)


def get_in(record: Any, path: Path, default: Any = None) -> Any:
    node = record
    for seg in path:
        if isinstance(seg, int):
            if not isinstance(node, list) or seg < 0 or seg >= len(node):
                return default
            node = node[seg]
        else:
            if not isinstance(node, dict) or seg not in node:
                return default
            node = node[seg]
    return node


def set_in(record: dict, path: Path, value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate rows as needed.

    Missing dict keys become empty dicts or lists depending on the next
    segment; short lists are padded with empty rows.
    """
    if not path:
        raise ValueError("Empty field path.")
    node: Any = record
    for seg, nxt in zip(path[:-1], path[1:]):
        empty = [] if isinstance(nxt, int) else {}
        if isinstance(seg, int):
            if not isinstance(node, list):
                raise ValueError(f"Cannot index non-list with {seg} in {format_path(path)}")
            while len(node) <= seg:
                node.append({})
            if not isinstance(node[seg], (dict, list)):
                node[seg] = empty
            node = node[seg]
        else:
            if not isinstance(node, dict):
                raise ValueError(f"Cannot read key {seg!r} from non-object in {format_path(path)}")
            child = node.get(seg, _MISSING)
            if not isinstance(child, (dict, list)):
                node[seg] = empty
            node = node[seg]
    last = path[-1]
    if isinstance(last, int):
        if not isinstance(node, list):
            raise ValueError(f"Cannot index non-list with {last} in {format_path(path)}")
        while len(node) <= last:
            node.append({})
        node[last] = value
    else:
        if not isinstance(node, dict):
            raise ValueError(f"Cannot write key {last!r} on non-object in {format_path(path)}")
        node[last] = value


def row_index(path: Path | None, list_name: str) -> int | None:
    """Return the row position when ``path`` addresses a row of ``list_name``."""
    if path is None or len(path) < 2 or path[0] != list_name or not isinstance(path[1], int):
        return None
    return path[1]
