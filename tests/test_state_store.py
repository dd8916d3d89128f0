"""Tests for resource state persistence."""

import json

import pytest

from pack_platform.core.exceptions import StateError
from pack_platform.core.models import ResourceState
from pack_platform.deploy.state import SCHEMA_VERSION, StateStore


@pytest.fixture
def store():
    return StateStore()


def test_save_is_versioned_json(store):
    blob = store.save(ResourceState(name="redis"))

    assert json.loads(blob) == {"schema_version": SCHEMA_VERSION, "name": "redis"}


def test_load_saved_state(store):
    state = store.load(store.save(ResourceState(name="redis")), legacy_name="d1")

    assert state.name == "redis"


def test_missing_state_uses_legacy_name(store):
    state = store.load(None, legacy_name="d1")

    assert state == ResourceState(name="d1")


@pytest.mark.parametrize(
    "blob",
    [
        b"not json",
        b"\xff\xfe",
        b"[1, 2]",
        b'{"name": "redis"}',
        b'{"schema_version": "1", "name": "redis"}',
        b'{"schema_version": 1, "name": 5}',
    ],
)
def test_corrupt_state_raises(store, blob):
    with pytest.raises(StateError) as exc_info:
        store.load(blob, legacy_name="d1")

    assert exc_info.value.code == "invalid_state"


def test_newer_schema_rejected(store):
    blob = json.dumps({"schema_version": SCHEMA_VERSION + 1, "name": "redis"}).encode()

    with pytest.raises(StateError, match="newest supported"):
        store.load(blob, legacy_name="d1")


def test_unknown_fields_ignored(store):
    blob = json.dumps({"schema_version": SCHEMA_VERSION, "name": "redis", "extra": 1}).encode()

    assert store.load(blob, legacy_name="d1").name == "redis"
