"""GitHub REST API access."""

from deploygate.github.client import GitHubClient

__all__ = ["GitHubClient"]
