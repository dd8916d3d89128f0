"""Registry registration and pack tool argument building."""

from typing import List, Sequence

import structlog

from pack_platform.core.exceptions import InvocationError
from pack_platform.core.models import DeploymentSpec
from pack_platform.deploy.invoker import ToolInvoker
from pack_platform.ui import OutputSink, OutputStyle

logger = structlog.get_logger()


def invoke(invoker: ToolInvoker, ui: OutputSink, args: Sequence[str], action: str) -> bytes:
    """Run the tool, surfacing captured output to the user if it fails."""
    try:
        return invoker.run(args)
    except InvocationError as e:
        if e.output:
            ui.output(e.output_text, OutputStyle.ERROR)
        ui.output(f"Error {action}: {e}", OutputStyle.ERROR)
        raise


def add_registry(invoker: ToolInvoker, ui: OutputSink, spec: DeploymentSpec) -> str:
    """Add the pack registry so later commands can resolve the pack.

    Every lifecycle operation calls this first; nothing is cached between
    calls. Returns the `--ref=` qualifier (empty without a ref) so later
    commands address the same registry revision.
    """
    args = [
        "registry",
        "add",
        spec.registry_name,
        spec.registry_source,
    ]
    if spec.registry_target:
        args.append("--target=" + spec.registry_target)
    ref_arg = spec.registry_qualifier
    if ref_arg:
        args.append(ref_arg)

    invoke(invoker, ui, args, "adding pack registry")
    logger.info("Pack registry added", registry=spec.registry_name, source=spec.registry_source)
    return ref_arg


def build_var_args(spec: DeploymentSpec) -> List[str]:
    """Variable overrides followed by variable file overrides."""
    args = [f"--var={name}={value}" for name, value in spec.variables.items()]
    args.extend(f"--var-file={path}" for path in spec.variable_files)
    return args


def run_args(spec: DeploymentSpec, ref_arg: str) -> List[str]:
    args = [
        "run",
        spec.pack,
        "--name=" + spec.deployment_name,
        "--registry=" + spec.registry_name,
    ]
    if ref_arg:
        args.append(ref_arg)
    return args + build_var_args(spec)


def status_args(spec: DeploymentSpec, pack: str, ref_arg: str) -> List[str]:
    args = [
        "status",
        pack,
        "--registry=" + spec.registry_name,
        "--name=" + spec.deployment_name,
    ]
    if ref_arg:
        args.append(ref_arg)
    return args


def destroy_args(spec: DeploymentSpec, ref_arg: str) -> List[str]:
    args = [
        "destroy",
        spec.pack,
        "--name=" + spec.deployment_name,
        "--registry=" + spec.registry_name,
    ]
    if ref_arg:
        args.append(ref_arg)
    return args + build_var_args(spec)
