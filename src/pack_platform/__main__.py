"""CLI entrypoints for local use (pack-platform deploy, status, destroy, generation)."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from pack_platform.core.config import LOG_LEVELS, Settings, load_deployment_spec
from pack_platform.core.exceptions import PackNotFoundError, PackPlatformError, StateError
from pack_platform.core.models import Deployment, DeploymentSpec, HealthLevel
from pack_platform.deploy.manager import PackPlatform
from pack_platform.ui import ConsoleUI, OutputStyle
from pack_platform.utils.logging import setup_logging

logger = structlog.get_logger()


def record_path(state_dir: Path, deployment_name: str) -> Path:
    return state_dir / f"{deployment_name}.json"


def load_record(state_dir: Path, spec: DeploymentSpec) -> Deployment:
    """Read the stored deployment record.

    Without one, the deployment predates local records; return a record with
    no resource state so the platform rebuilds it from the deployment name.
    """
    path = record_path(state_dir, spec.deployment_name)
    if not path.exists():
        logger.info("No deployment record found", path=str(path))
        return Deployment(id=spec.deployment_name, name=spec.deployment_name)
    try:
        return Deployment.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise StateError(f"deployment record {path} is corrupt: {e}") from e


def save_record(state_dir: Path, deployment: Deployment) -> Path:
    state_dir.mkdir(parents=True, exist_ok=True)
    path = record_path(state_dir, deployment.name)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(deployment.model_dump_json(indent=2), encoding="utf-8")
    tmp.replace(path)
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pack-platform", description="Nomad Pack lifecycle CLI")
    parser.add_argument("--state-dir", help="Directory for deployment records")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, help="Log level (default from settings)"
    )
    parser.add_argument("--log-format", choices=["json", "console"], help="Log renderer")
    sub = parser.add_subparsers(dest="cmd", required=True)

    for name, help_text in (
        ("deploy", "Register the registry and run the pack"),
        ("status", "Report health of the deployed pack"),
        ("destroy", "Destroy the deployed pack if it exists"),
        ("generation", "Print the deployed job name"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("-c", "--config", required=True, help="Deployment config file (YAML or JSON)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    ui = ConsoleUI()

    try:
        settings = Settings()
    except ValidationError as e:
        ui.output(f"Invalid settings: {e}", OutputStyle.ERROR)
        return 1
    setup_logging(args.log_level or settings.log_level, args.log_format or settings.log_format)
    state_dir = Path(args.state_dir) if args.state_dir else settings.state_path

    platform = PackPlatform.from_settings(settings, ui)

    try:
        spec = load_deployment_spec(Path(args.config))

        if args.cmd == "deploy":
            deployment = platform.create(spec)
            path = save_record(state_dir, deployment)
            logger.info("Deployment record saved", path=str(path))
            return 0

        if args.cmd == "status":
            report = platform.status(spec, load_record(state_dir, spec))
            for resource in report.resources:
                ui.output(f"{resource.name}: {resource.health.value} ({resource.health_message})")
            style = OutputStyle.SUCCESS if report.health == HealthLevel.READY else OutputStyle.WARNING
            ui.output(f"Health: {report.health.value}", style)
            return 0

        if args.cmd == "destroy":
            platform.destroy(spec, load_record(state_dir, spec))
            record_path(state_dir, spec.deployment_name).unlink(missing_ok=True)
            return 0

        if args.cmd == "generation":
            generation = platform.generation(spec)
            if generation is None:
                ui.output("not deployed", OutputStyle.WARNING)
                return 1
            ui.output(generation.decode("utf-8", errors="replace"))
            return 0

    except PackNotFoundError as e:
        ui.output(f"Deployment not found: {e}", OutputStyle.ERROR)
        return 1
    except PackPlatformError as e:
        logger.error("Operation failed", command=args.cmd, error=str(e), code=e.code)
        return 1
    except OSError as e:
        logger.error("Deployment record I/O failed", command=args.cmd, state_dir=str(state_dir), error=str(e))
        return 1

    return 2


if __name__ == "__main__":
    sys.exit(main())
