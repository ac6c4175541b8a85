"""Shared data types for the wait loop."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

DEFAULT_TIMEOUT = 300
DEFAULT_INTERVAL = 5
DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class Deployment:
    """A deployment of one commit to one environment, as listed by the API."""

    id: int
    environment: str
    sha: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Deployment":
        return cls(
            id=int(data["id"]),
            environment=data.get("environment") or "",
            sha=data.get("sha") or "",
        )


@dataclass(frozen=True)
class DeploymentStatus:
    """One state event attached to a deployment."""

    state: str
    target_url: str | None = None
    environment_url: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "DeploymentStatus":
        return cls(
            state=data.get("state") or "",
            target_url=data.get("target_url") or None,
            environment_url=data.get("environment_url") or None,
        )

    @property
    def url(self) -> str | None:
        """Link to the deployed environment: target_url, then environment_url."""
        return self.target_url or self.environment_url


@dataclass(frozen=True)
class SuccessRecord:
    """Metadata for the successful deployment found for one environment."""

    project_name: str
    environment: str
    url: str | None = None

    def to_dict(self) -> dict:
        """Output shape consumed by downstream workflow steps. ``url`` is omitted when unknown."""
        data = {"projectName": self.project_name, "environment": self.environment}
        if self.url is not None:
            data["url"] = self.url
        return data


@dataclass(frozen=True)
class WaitConfig:
    """All inputs for a single wait run. Built once at the CLI boundary."""

    token: str
    owner: str
    repo: str
    sha: str
    deployments: Mapping[str, str] = field(default_factory=dict)  # project name -> environment, read-only
    timeout: int = DEFAULT_TIMEOUT  # seconds
    interval: int = DEFAULT_INTERVAL  # seconds between poll cycles
    api_url: str = DEFAULT_API_URL
    concurrency: int = 1

    def __post_init__(self):
        object.__setattr__(self, "deployments", MappingProxyType(dict(self.deployments)))

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class WaitState:
    """Mutable state owned by one run of the wait loop."""

    start: float
    successful: dict[str, SuccessRecord] = field(default_factory=dict)  # environment -> record
    elapsed: float = 0.0
    cycles: int = 0

    def pending(self, environments: list[str]) -> list[str]:
        return [env for env in environments if env not in self.successful]
