from __future__ import annotations

from copy import deepcopy
from pathlib import Path

import pytest

import feasibility.runtime_logging as runtime_logging
from feasibility.defaults import DEFAULTS, SAMPLE_DRAFT
from feasibility.schema import migrate_record


@pytest.fixture(autouse=True)
def isolated_runtime_log(tmp_path, monkeypatch):
    monkeypatch.setattr(runtime_logging, "LOG_DIR", Path(tmp_path) / "logs")
    monkeypatch.setattr(runtime_logging, "RUNTIME_EVENTS_LOG_FILE", Path(tmp_path) / "logs" / "runtime_events.jsonl")


@pytest.fixture
def blank_record() -> dict:
    record, _, _ = migrate_record(deepcopy(DEFAULTS))
    return record


@pytest.fixture
def sample_record() -> dict:
    record, _, _ = migrate_record(deepcopy(SAMPLE_DRAFT))
    return record
