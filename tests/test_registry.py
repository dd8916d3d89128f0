"""Tests for registry registration and argument building."""

import pytest

from pack_platform.core.exceptions import InvocationError
from pack_platform.core.models import DeploymentSpec
from pack_platform.deploy.registry import (
    add_registry,
    build_var_args,
    destroy_args,
    run_args,
    status_args,
)
from pack_platform.ui import OutputStyle

from conftest import FakeInvoker


def _spec(**overrides):
    values = dict(
        deployment_name="d1",
        registry_name="r1",
        registry_source="github.com/x/y",
        pack="redis",
    )
    values.update(overrides)
    return DeploymentSpec(**values)


def test_add_registry_minimal(invoker, ui):
    ref_arg = add_registry(invoker, ui, _spec())

    assert ref_arg == ""
    assert invoker.calls == [["registry", "add", "r1", "github.com/x/y"]]


def test_add_registry_with_target_and_ref(invoker, ui):
    ref_arg = add_registry(invoker, ui, _spec(registry_target="redis", registry_ref="v0.1.0"))

    assert ref_arg == "--ref=v0.1.0"
    assert invoker.calls == [
        ["registry", "add", "r1", "github.com/x/y", "--target=redis", "--ref=v0.1.0"]
    ]


def test_add_registry_failure_surfaces_output(ui):
    invoker = FakeInvoker({
        "registry add": InvocationError("boom", returncode=1, output=b"Error: bad source\n"),
    })

    with pytest.raises(InvocationError):
        add_registry(invoker, ui, _spec())

    errors = ui.texts(OutputStyle.ERROR)
    assert errors[0] == "Error: bad source\n"
    assert errors[1].startswith("Error adding pack registry")


def test_build_var_args_order():
    spec = _spec(
        variables={"replicas": "3", "image": "redis:7"},
        variable_files=["a.hcl", "b.hcl"],
    )

    assert build_var_args(spec) == [
        "--var=replicas=3",
        "--var=image=redis:7",
        "--var-file=a.hcl",
        "--var-file=b.hcl",
    ]


def test_run_args():
    spec = _spec(variables={"replicas": "3"}, variable_files=["v.hcl"])

    assert run_args(spec, "--ref=main") == [
        "run",
        "redis",
        "--name=d1",
        "--registry=r1",
        "--ref=main",
        "--var=replicas=3",
        "--var-file=v.hcl",
    ]


def test_status_args_without_ref():
    assert status_args(_spec(), "redis", "") == [
        "status",
        "redis",
        "--registry=r1",
        "--name=d1",
    ]


def test_destroy_args():
    spec = _spec(variables={"replicas": "3"})

    assert destroy_args(spec, "") == [
        "destroy",
        "redis",
        "--name=d1",
        "--registry=r1",
        "--var=replicas=3",
    ]
