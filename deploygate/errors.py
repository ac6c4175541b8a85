"""Error taxonomy for the deployment gate.

Every failure surfaces to the CLI as a ``DeployGateError`` subclass; the
handler reports the message and exits non-zero.
"""

from typing import Any


class DeployGateError(Exception):
    """Base exception for deploygate."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(DeployGateError):
    """Missing or malformed input, detected before any network call."""


class ApiError(DeployGateError):
    """The GitHub API call failed (transport, auth, rate limit, bad body)."""

    def __init__(self, message: str, status_code: int | None = None):
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code


class WaitTimeoutError(DeployGateError, TimeoutError):
    """Timeout budget elapsed with at least one environment unresolved."""

    def __init__(self, elapsed: float, timeout: int, pending: list[str] | None = None):
        super().__init__(
            f"Timing out after {timeout} seconds ({elapsed:.1f} elapsed)",
            {"elapsed": elapsed, "timeout": timeout, "pending": pending or []},
        )
        self.elapsed = elapsed
        self.timeout = timeout
        self.pending = pending or []
