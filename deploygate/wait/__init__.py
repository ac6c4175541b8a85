"""Deployment wait loop: resolver, poll cycle, scheduler and shared types."""

from deploygate.wait.loop import wait_for_deployments
from deploygate.wait.poll import find_success, poll_cycle
from deploygate.wait.resolver import resolve_environments
from deploygate.wait.types import (
    Deployment,
    DeploymentStatus,
    SuccessRecord,
    WaitConfig,
    WaitState,
)

__all__ = [
    "Deployment",
    "DeploymentStatus",
    "SuccessRecord",
    "WaitConfig",
    "WaitState",
    "find_success",
    "poll_cycle",
    "resolve_environments",
    "wait_for_deployments",
]
