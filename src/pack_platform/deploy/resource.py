"""Resource kinds and the manager that drives their operations.

A resource kind bundles a state type with its create, destroy and status
operations. The platform declares one kind today (`nomad_pack`).
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Type

import structlog

from pack_platform.core.exceptions import InternalError
from pack_platform.core.models import DeploymentSpec, ResourceState, ResourceStatus, StatusReport
from pack_platform.deploy.state import StateStore

logger = structlog.get_logger()

CreateFunc = Callable[[DeploymentSpec, ResourceState], None]
DestroyFunc = Callable[[DeploymentSpec, ResourceState], None]
StatusFunc = Callable[[DeploymentSpec, ResourceState], ResourceStatus]


@dataclass
class Resource:
    """One resource kind and its operation set."""

    name: str
    create: CreateFunc
    destroy: DestroyFunc
    status: StatusFunc
    state_type: Type[ResourceState] = ResourceState
    platform: str = "nomad"
    category_display_hint: str = "instance_manager"


@dataclass
class DeclaredResource:
    """Bookkeeping entry reported to the host for each created or destroyed resource."""

    name: str
    type: str
    platform: str
    category_display_hint: str


@dataclass
class ResourceManager:
    """Creates, destroys and reports on a fixed set of resources in order.

    Destroy runs in reverse declaration order. Failures propagate immediately;
    nothing is rolled back.
    """

    resources: List[Resource]
    declared: List[DeclaredResource] = field(default_factory=list)
    destroyed: List[DeclaredResource] = field(default_factory=list)
    _states: Dict[str, ResourceState] = field(default_factory=dict, init=False, repr=False)

    def resource(self, name: str) -> Resource:
        for r in self.resources:
            if r.name == name:
                return r
        raise InternalError(f"unknown resource {name!r}")

    def set_state(self, name: str, state: ResourceState) -> None:
        resource = self.resource(name)
        if not isinstance(state, resource.state_type):
            raise InternalError(
                f"state for {name!r} must be {resource.state_type.__name__}, "
                f"got {type(state).__name__}"
            )
        self._states[name] = state

    def load_state(self, blob: Optional[bytes], legacy_name: str, store: StateStore) -> None:
        """Restore every resource's state from a persisted blob.

        A missing blob rebuilds the state from `legacy_name`.

        Raises:
            StateError: if the blob is corrupt or from a newer schema.
        """
        for r in self.resources:
            self.set_state(r.name, store.load(blob, legacy_name=legacy_name))

    def state(self, name: str) -> Optional[ResourceState]:
        self.resource(name)
        return self._states.get(name)

    def create_all(self, spec: DeploymentSpec) -> None:
        for r in self.resources:
            state = r.state_type()
            logger.info("Creating resource", resource=r.name)
            r.create(spec, state)
            self._states[r.name] = state
            self.declared.append(self._entry(r, state))

    def destroy_all(self, spec: DeploymentSpec) -> None:
        for r in reversed(self.resources):
            state = self._require_state(r.name)
            logger.info("Destroying resource", resource=r.name)
            r.destroy(spec, state)
            self.destroyed.append(self._entry(r, state))

    def status_report(self, spec: DeploymentSpec) -> StatusReport:
        report = StatusReport()
        for r in self.resources:
            state = self._require_state(r.name)
            status = r.status(spec, state)
            status.platform = r.platform
            report.resources.append(status)
        report.summarize()
        return report

    def _require_state(self, name: str) -> ResourceState:
        state = self._states.get(name)
        if state is None:
            raise InternalError(f"no state loaded for resource {name!r}")
        return state

    @staticmethod
    def _entry(resource: Resource, state: ResourceState) -> DeclaredResource:
        return DeclaredResource(
            name=state.name or resource.name,
            type=resource.name,
            platform=resource.platform,
            category_display_hint=resource.category_display_hint,
        )
