"""Core data models for Pack Platform."""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _hcl_value(value: Any) -> str:
    """Render a config value the way nomad-pack expects it after `--var=NAME=`."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        # JSON arrays and objects are valid HCL expressions
        return json.dumps(value, separators=(",", ":"))
    return str(value)


class HealthLevel(str, Enum):
    """Coarse health of a pack deployment."""

    READY = "ready"
    DOWN = "down"
    UNKNOWN = "unknown"


# Higher rank wins when rolling resource healths up into a report
_HEALTH_RANK = {
    HealthLevel.READY: 0,
    HealthLevel.UNKNOWN: 1,
    HealthLevel.DOWN: 2,
}


class DeploymentSpec(BaseModel):
    """User-supplied description of one pack deployment.

    Field names follow the deployment config file attributes.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    deployment_name: str = Field(..., description="Name given to the deployed pack instance")
    registry_name: str = Field(..., description="Registry name")
    registry_source: str = Field(..., description="Registry URL")
    registry_ref: Optional[str] = Field(None, description="Specific git ref of the registry")
    registry_target: Optional[str] = Field(None, description="Specific pack within the registry")
    pack: str = Field(..., description="Name of the pack to run")
    variables: Dict[str, str] = Field(default_factory=dict, description="Variable overrides")
    variable_files: List[str] = Field(default_factory=list, description="Variable override files")

    @field_validator("deployment_name", "registry_name", "registry_source", "pack")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("cannot be empty or whitespace-only")
        return v

    @field_validator("variables", mode="before")
    @classmethod
    def stringify_variables(cls, v: Any) -> Any:
        # YAML gives typed scalars; the tool only sees HCL value strings
        if isinstance(v, dict):
            return {str(k): _hcl_value(val) for k, val in v.items()}
        return v

    @property
    def registry_qualifier(self) -> str:
        """The `--ref=` flag shared by every invocation against this registry."""
        if self.registry_ref:
            return "--ref=" + self.registry_ref
        return ""


class ResourceState(BaseModel):
    """Persisted identity of one deployed pack instance."""

    name: str = ""


class PackStatusRecord(BaseModel):
    """One row of `nomad-pack status` output."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    pack_name: str = Field(..., alias="PackName")
    registry_name: str = Field(..., alias="RegistryName")
    deployment_name: str = Field(..., alias="DeploymentName")
    job_name: str = Field(..., alias="JobName")
    status: str = Field(..., alias="Status")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class ResourceStatus(BaseModel):
    """Health of a single declared resource."""

    id: str
    name: str
    platform: str = "nomad"
    category_display_hint: str = "instance"
    created_time: datetime = Field(default_factory=_utcnow)
    health: HealthLevel = HealthLevel.UNKNOWN
    health_message: str = ""
    state_json: Optional[str] = None


class StatusReport(BaseModel):
    """Status of a deployment and its resources."""

    resources: List[ResourceStatus] = Field(default_factory=list)
    health: HealthLevel = HealthLevel.UNKNOWN
    health_message: str = ""
    generated_time: datetime = Field(default_factory=_utcnow)
    external: bool = True

    def summarize(self) -> None:
        """Roll resource healths up into the report's own health."""
        if not self.resources:
            self.health = HealthLevel.UNKNOWN
            self.health_message = "no resources reported"
            return

        worst = max(self.resources, key=lambda r: _HEALTH_RANK[r.health])
        self.health = worst.health
        if len(self.resources) == 1:
            self.health_message = worst.health_message
        else:
            ready = sum(1 for r in self.resources if r.health == HealthLevel.READY)
            self.health_message = f"{ready}/{len(self.resources)} resources ready"


class Deployment(BaseModel):
    """Record the host keeps for a deployment between operations."""

    id: str
    name: str
    resource_state: Optional[bytes] = None
    created_at: datetime = Field(default_factory=_utcnow)
