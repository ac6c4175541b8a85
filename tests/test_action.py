"""Tests for action.yml: the composite action installs into a managed interpreter."""

from pathlib import Path

import yaml

ACTION_PATH = Path(__file__).resolve().parent.parent / "action.yml"


def _steps():
    with open(ACTION_PATH) as f:
        return yaml.safe_load(f)["runs"]["steps"]


def test_python_is_set_up_before_install():
    steps = _steps()
    names = [step["name"] for step in steps]

    setup = next(step for step in steps if step.get("uses", "").startswith("actions/setup-python@"))
    install = next(step for step in steps if "pip install" in step.get("run", ""))

    assert names.index(setup["name"]) < names.index(install["name"])
    assert "python3 -m pip" not in install["run"]


def test_wait_step_exposes_deployments_output():
    with open(ACTION_PATH) as f:
        action = yaml.safe_load(f)

    assert action["outputs"]["deployments"]["value"] == "${{ steps.wait.outputs.deployments }}"
    assert any(step.get("id") == "wait" for step in _steps())
