"""
Pytest configuration and fixtures for pack platform tests.
"""

from typing import Callable, Dict, List, Optional, Sequence, Union

import pytest
import structlog
from structlog.contextvars import clear_contextvars

from pack_platform.core.exceptions import InvocationError
from pack_platform.core.models import DeploymentSpec
from pack_platform.deploy.manager import PackPlatform
from pack_platform.ui import RecordingUI


STATUS_HEADER = (
    "PACK NAME | REGISTRY NAME | DEPLOYMENT NAME | JOB NAME | STATUS\n"
    "----------+---------------+-----------------+----------+-------\n"
)


def status_table(*rows: str) -> bytes:
    """Build `nomad-pack status` output with the given data rows."""
    body = "".join(f"{row}\n" for row in rows)
    return (STATUS_HEADER + body).encode()


Response = Union[bytes, InvocationError, Callable[[List[str]], bytes]]


class FakeInvoker:
    """Scripted stand-in for ToolInvoker.

    Responses are keyed by verb ("registry add", "run", "status", "destroy").
    A list value is consumed one entry per call; the last entry repeats.
    """

    def __init__(self, responses: Optional[Dict[str, Union[Response, List[Response]]]] = None):
        self.binary = "nomad-pack"
        self.responses = responses or {}
        self.calls: List[List[str]] = []

    @staticmethod
    def verb(args: Sequence[str]) -> str:
        if args[0] == "registry":
            return "registry add"
        return args[0]

    @property
    def verbs(self) -> List[str]:
        return [self.verb(c) for c in self.calls]

    def run(self, args: Sequence[str]) -> bytes:
        args = list(args)
        self.calls.append(args)
        response = self.responses.get(self.verb(args), b"")
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, InvocationError):
            raise response
        if callable(response):
            return response(args)
        return response


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    clear_contextvars()
    structlog.reset_defaults()


@pytest.fixture
def spec() -> DeploymentSpec:
    return DeploymentSpec(
        deployment_name="d1",
        registry_name="r1",
        registry_source="github.com/x/y",
        pack="redis",
        variables={"replicas": "3"},
    )


@pytest.fixture
def ui() -> RecordingUI:
    return RecordingUI()


@pytest.fixture
def invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture
def platform(invoker: FakeInvoker, ui: RecordingUI) -> PackPlatform:
    return PackPlatform(invoker, ui)
