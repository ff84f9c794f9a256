"""Local draft persistence and the submission payload boundary."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path

from feasibility.schema import DRAFT_TYPE, DRAFT_TYPE_ID, SCHEMA_VERSION, migrate_import_payload


STORE_DIR = Path(".local_store")
DRAFT_STORE_FILE = STORE_DIR / "drafts.json"

_DEFAULT_STORE_DIR = Path(".local_store")
_STORAGE_ENV_VAR = "FEASIBILITY_STORAGE_ROOT"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _expand_storage_root(path_value: str | Path | None) -> Path:
    if path_value is None:
        return _DEFAULT_STORE_DIR
    text = str(path_value).strip()
    if not text:
        return _DEFAULT_STORE_DIR
    return Path(os.path.expandvars(os.path.expanduser(text)))


def configure_storage_root(path_value: str | Path | None) -> Path:
    """Point draft persistence at a new storage root."""
    global STORE_DIR, DRAFT_STORE_FILE
    STORE_DIR = _expand_storage_root(path_value)
    DRAFT_STORE_FILE = STORE_DIR / "drafts.json"
    return STORE_DIR


def storage_root_path() -> str:
    return str(STORE_DIR.resolve())


def storage_root_from_env() -> Path:
    return _expand_storage_root(os.getenv(_STORAGE_ENV_VAR, ""))


def _path_for(kind: str) -> Path:
    if kind == DRAFT_TYPE:
        return DRAFT_STORE_FILE
    raise ValueError(f"Unsupported store kind: {kind}")


def _load_store(kind: str) -> dict:
    p = _path_for(kind)
    if not p.exists():
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def _save_store(kind: str, data: dict) -> None:
    STORE_DIR.mkdir(parents=True, exist_ok=True)
    p = _path_for(kind)
    tmp = p.with_suffix(f"{p.suffix}.tmp")
    tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
    tmp.replace(p)


def list_saved_names(kind: str = DRAFT_TYPE) -> list[str]:
    return sorted(_load_store(kind).keys())


def load_saved(name: str, kind: str = DRAFT_TYPE) -> dict | None:
    return deepcopy(_load_store(kind).get(name))


def save_named_bundle(name: str, bundle: dict, overwrite: bool = False, kind: str = DRAFT_TYPE) -> tuple[bool, str]:
    if not name.strip():
        return False, "Name is required."
    store = _load_store(kind)
    if name in store and not overwrite:
        return False, "Name already exists."
    store[name] = bundle
    _save_store(kind, store)
    return True, "Saved."


def delete_saved(name: str, kind: str = DRAFT_TYPE) -> bool:
    store = _load_store(kind)
    if name not in store:
        return False
    del store[name]
    _save_store(kind, store)
    return True


def build_draft_bundle(name: str, record: dict) -> dict:
    return {
        "type": DRAFT_TYPE,
        "schema_version": SCHEMA_VERSION,
        "name": name,
        "created_at": _now_iso(),
        "record": deepcopy(record),
    }


def build_submission_payload(record: dict) -> dict[str, str]:
    """Form body handed to the submission collaborator.

    The whole record travels as one JSON string under ``case_details``.
    """
    return {
        "case_details": json.dumps(record, ensure_ascii=False),
        "draft_type_id": DRAFT_TYPE_ID,
    }


def parse_import_json(raw_json: str) -> tuple[dict, str | None, list[str], list[str]]:
    try:
        payload = json.loads(raw_json)
    except json.JSONDecodeError:
        return {}, None, ["Could not parse import JSON."], []
    return migrate_import_payload(payload)


configure_storage_root(storage_root_from_env())
