"""Serialization of per-deployment resource state."""

import json
from typing import Optional

import structlog
from pydantic import ValidationError

from pack_platform.core.exceptions import StateError
from pack_platform.core.models import ResourceState

logger = structlog.get_logger()

SCHEMA_VERSION = 1


class StateStore:
    """Turns ResourceState into the opaque blob the host persists and back."""

    schema_version = SCHEMA_VERSION

    def save(self, state: ResourceState) -> bytes:
        payload = {"schema_version": self.schema_version, **state.model_dump()}
        return json.dumps(payload, sort_keys=True).encode("utf-8")

    def load(self, blob: Optional[bytes], legacy_name: str) -> ResourceState:
        """Restore state from a blob.

        A missing blob comes from a deployment recorded before state was
        persisted; its state is rebuilt using `legacy_name`.

        Raises:
            StateError: if the blob is corrupt or from a newer schema.
        """
        if blob is None:
            logger.info("No persisted resource state, rebuilding", name=legacy_name)
            return ResourceState(name=legacy_name)

        try:
            data = json.loads(blob)
        except (UnicodeDecodeError, ValueError) as e:
            raise StateError(f"persisted resource state is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise StateError("persisted resource state must be a JSON object")

        version = data.pop("schema_version", None)
        if not isinstance(version, int):
            raise StateError("persisted resource state has no schema_version")
        if version > self.schema_version:
            raise StateError(
                f"persisted resource state has schema_version {version}, "
                f"newest supported is {self.schema_version}"
            )

        try:
            return ResourceState.model_validate(data)
        except ValidationError as e:
            raise StateError(f"persisted resource state is malformed: {e}") from e
