"""Pack Platform - lifecycle controller for Nomad Pack deployments."""

__version__ = "0.1.0"

from pack_platform.core.config import Settings
from pack_platform.core.models import Deployment, DeploymentSpec, HealthLevel, StatusReport
from pack_platform.deploy.manager import PackPlatform

__all__ = [
    "Settings",
    "Deployment",
    "DeploymentSpec",
    "HealthLevel",
    "StatusReport",
    "PackPlatform",
    "__version__",
]
