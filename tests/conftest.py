"""Shared pytest fixtures for all test modules."""

import os
import subprocess
import sys

import pytest

from deploygate.errors import ApiError
from deploygate.wait.types import Deployment, DeploymentStatus, WaitConfig

PROJECT_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))

# Environment variables the CLI reads; cleared so the host runner cannot leak in.
_CLI_ENV_VARS = [
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "GITHUB_SHA",
    "GITHUB_REPOSITORY",
    "GITHUB_API_URL",
    "GITHUB_OUTPUT",
    "GITHUB_ACTIONS",
    "INPUT_GITHUB-TOKEN",
    "INPUT_DEPLOYMENTS-TO-WAIT-FOR",
    "INPUT_GITHUB-HEAD-SHA",
    "INPUT_TIMEOUT",
    "INPUT_INTERVAL",
    "INPUT_CONCURRENCY",
]


@pytest.fixture(scope="session")
def project_root():
    """Absolute path to the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every GitHub/Actions variable the CLI would otherwise pick up."""
    for var in _CLI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(scope="session")
def run_cli(project_root):
    """Return a callable that invokes the deploygate CLI as a subprocess."""

    def _run(*args, env=None):
        base_env = {k: v for k, v in os.environ.items() if k not in _CLI_ENV_VARS}
        base_env.update(env or {})
        result = subprocess.run(
            [sys.executable, "-m", "deploygate.deploygate", *args],
            capture_output=True,
            text=True,
            cwd=project_root,
            env=base_env,
        )
        return result.returncode, result.stdout, result.stderr

    return _run


# ── Unit-test fixtures ──────────────────────────────────────────────


class FakeDeploymentClient:
    """Scripted stand-in for GitHubClient.

    ``cycles`` is a list of (deployments, statuses) pairs, one per poll
    cycle: deployments as (id, environment) tuples, statuses as
    deployment id -> list of state strings or (state, target_url,
    environment_url) tuples. The last cycle repeats once the script runs out.
    """

    def __init__(self, cycles, fail_on=None):
        self.cycles = cycles
        self.fail_on = fail_on  # ("list", cycle) or ("statuses", deployment_id)
        self.cycle = -1
        self.calls = []

    def _current(self):
        return self.cycles[min(self.cycle, len(self.cycles) - 1)]

    async def list_deployments(self, sha):
        self.cycle += 1
        self.calls.append(("list", sha))
        if self.fail_on == ("list", self.cycle):
            raise ApiError("GitHub API request failed: 502", status_code=502)
        deployments, _ = self._current()
        return [Deployment(id=dep_id, environment=env, sha=sha) for dep_id, env in deployments]

    async def get_deployment_statuses(self, deployment_id):
        self.calls.append(("statuses", deployment_id))
        if self.fail_on == ("statuses", deployment_id):
            raise ApiError("GitHub API request failed: 401", status_code=401)
        _, statuses = self._current()
        result = []
        for entry in statuses.get(deployment_id, []):
            if isinstance(entry, tuple):
                state, target_url, environment_url = entry
                result.append(DeploymentStatus(state, target_url, environment_url))
            else:
                result.append(DeploymentStatus(entry))
        return result


class FakeClock:
    """Monotonic clock advanced only by ``sleep``."""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def make_client():
    """Return a factory for scripted deployment clients."""
    return FakeDeploymentClient


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_config():
    """Return a factory for WaitConfig with test defaults."""

    def _make(deployments, **overrides):
        params = {
            "token": "ghp_testtoken123456",
            "owner": "acme",
            "repo": "shop",
            "sha": "abc123",
            "deployments": deployments,
            "timeout": 300,
            "interval": 5,
        }
        params.update(overrides)
        return WaitConfig(**params)

    return _make
