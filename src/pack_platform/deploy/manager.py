"""Lifecycle controller for Nomad Pack deployments.

Create, status and destroy are delegated to `nomad-pack`. Each operation
registers the pack registry first, then runs its own commands. The deployment
spec is passed to every call; the controller itself holds no per-deployment
state, so one instance can serve many deployments. The host must not run two
operations against the same deployment at once.
"""

from __future__ import annotations

from typing import List, Optional

import structlog

from pack_platform.core.config import Settings
from pack_platform.core.exceptions import InternalError, PackNotFoundError
from pack_platform.core.models import (
    Deployment,
    DeploymentSpec,
    ResourceState,
    ResourceStatus,
    StatusReport,
)
from pack_platform.deploy.health import classify
from pack_platform.deploy.invoker import ToolInvoker
from pack_platform.deploy.parser import StatusTableParser
from pack_platform.deploy.registry import (
    add_registry,
    destroy_args,
    invoke,
    run_args,
    status_args,
)
from pack_platform.deploy.resource import DeclaredResource, Resource, ResourceManager
from pack_platform.deploy.state import StateStore
from pack_platform.ui import OutputSink, OutputStyle
from pack_platform.utils.logging import bind_deployment_context

logger = structlog.get_logger()

PACK_RESOURCE = "nomad_pack"


class PackPlatform:
    """Deploys, inspects and destroys one pack deployment per call."""

    def __init__(
        self,
        invoker: ToolInvoker,
        ui: OutputSink,
        parser: Optional[StatusTableParser] = None,
        state_store: Optional[StateStore] = None,
    ):
        self.invoker = invoker
        self.ui = ui
        self.parser = parser or StatusTableParser()
        self.state_store = state_store or StateStore()

    @classmethod
    def from_settings(cls, settings: Settings, ui: OutputSink) -> "PackPlatform":
        return cls(
            ToolInvoker(settings.tool_binary, timeout=settings.command_timeout_seconds),
            ui,
            parser=StatusTableParser(settings.status_row_index, settings.status_delimiter),
        )

    def resource_manager(
        self,
        declared: Optional[List[DeclaredResource]] = None,
        destroyed: Optional[List[DeclaredResource]] = None,
    ) -> ResourceManager:
        """Resource manager with the pack resource; bookkeeping lists are the host's."""
        return ResourceManager(
            resources=[
                Resource(
                    name=PACK_RESOURCE,
                    create=self._deploy_pack,
                    destroy=self._destroy_pack,
                    status=self._pack_status,
                    platform="nomad",
                    category_display_hint="instance_manager",
                )
            ],
            declared=declared if declared is not None else [],
            destroyed=destroyed if destroyed is not None else [],
        )

    # Operations

    def create(
        self,
        spec: DeploymentSpec,
        declared: Optional[List[DeclaredResource]] = None,
    ) -> Deployment:
        """Run the pack and return the deployment record to persist."""
        bind_deployment_context(spec.deployment_name, spec.pack)

        with self.ui.step("Deploy application"):
            rm = self.resource_manager(declared=declared)
            rm.create_all(spec)

            state = rm.state(PACK_RESOURCE)
            if state is None or not state.name:
                raise InternalError("pack state is empty after deploy, this shouldn't happen")

        self.ui.output("Application deployed", OutputStyle.SUCCESS)
        logger.info("Pack deployed", pack=state.name)
        return Deployment(
            id=spec.deployment_name,
            name=spec.deployment_name,
            resource_state=self.state_store.save(state),
        )

    def status(self, spec: DeploymentSpec, deployment: Deployment) -> StatusReport:
        """Query the tool for the deployment's current health.

        Raises:
            PackNotFoundError: if the tool reports no matching deployment.
        """
        bind_deployment_context(spec.deployment_name, spec.pack)

        with self.ui.step("Checking the status of the deployment..."):
            rm = self._load(deployment)
            try:
                report = rm.status_report(spec)
            except Exception as e:
                logger.error("Error generating status report", error=str(e))
                raise

        logger.info("Status report generated", health=report.health.value)
        return report

    def destroy(
        self,
        spec: DeploymentSpec,
        deployment: Deployment,
        declared: Optional[List[DeclaredResource]] = None,
        destroyed: Optional[List[DeclaredResource]] = None,
    ) -> None:
        """Destroy the pack. A deployment that is already gone is not an error."""
        bind_deployment_context(spec.deployment_name, spec.pack)

        with self.ui.step("Destroy deployment"):
            rm = self._load(deployment, declared=declared, destroyed=destroyed)
            rm.destroy_all(spec)

    def generation(self, spec: DeploymentSpec) -> Optional[bytes]:
        """Return the deployed job name as a version marker, or None if not deployed.

        The host compares it with its own record to decide whether a
        redeploy is needed.
        """
        bind_deployment_context(spec.deployment_name, spec.pack)

        ref_arg = add_registry(self.invoker, self.ui, spec)
        output = invoke(
            self.invoker, self.ui, status_args(spec, spec.pack, ref_arg), "getting pack status"
        )
        logger.info("Pack status output", output=output.decode("utf-8", errors="replace"))

        job_name = self.parser.find_job_name(output)
        if job_name is None:
            return None
        return job_name.encode("utf-8")

    # Resource operations

    def _load(
        self,
        deployment: Deployment,
        declared: Optional[List[DeclaredResource]] = None,
        destroyed: Optional[List[DeclaredResource]] = None,
    ) -> ResourceManager:
        rm = self.resource_manager(declared=declared, destroyed=destroyed)
        rm.load_state(deployment.resource_state, deployment.name, self.state_store)
        return rm

    def _deploy_pack(self, spec: DeploymentSpec, state: ResourceState) -> None:
        ref_arg = add_registry(self.invoker, self.ui, spec)

        output = invoke(self.invoker, self.ui, run_args(spec, ref_arg), "running pack")
        self.ui.output(output.decode("utf-8", errors="replace"), OutputStyle.INFO)
        state.name = spec.pack

    def _pack_status(self, spec: DeploymentSpec, state: ResourceState) -> ResourceStatus:
        ref_arg = add_registry(self.invoker, self.ui, spec)

        output = invoke(
            self.invoker, self.ui, status_args(spec, state.name, ref_arg), "getting pack status"
        )
        self.ui.output(output.decode("utf-8", errors="replace"), OutputStyle.INFO)

        record = self.parser.parse(output)
        if record is None:
            raise PackNotFoundError(
                f"no deployment {spec.deployment_name!r} of pack {state.name!r} "
                f"found in registry {spec.registry_name!r}"
            )

        health, message = classify(record.status)
        return ResourceStatus(
            id=state.name,
            name=state.name,
            category_display_hint="instance",
            health=health,
            health_message=message,
            state_json=record.to_json(),
        )

    def _destroy_pack(self, spec: DeploymentSpec, state: ResourceState) -> None:
        ref_arg = add_registry(self.invoker, self.ui, spec)

        output = invoke(
            self.invoker, self.ui, status_args(spec, spec.pack, ref_arg), "getting pack status"
        )
        logger.info("Pack status output", output=output.decode("utf-8", errors="replace"))

        if not self.parser.has_match(output):
            logger.info("no pack to destroy, skipping redundant destroy operation")
            self.ui.output(
                "No pack to destroy, skipping redundant destroy operation", OutputStyle.INFO
            )
            return

        output = invoke(self.invoker, self.ui, destroy_args(spec, ref_arg), "destroying pack")
        self.ui.output(output.decode("utf-8", errors="replace"), OutputStyle.INFO)
        logger.info("Pack destroyed", pack=state.name)
