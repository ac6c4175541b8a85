"""Build a WaitConfig from CLI flags, GitHub Actions inputs and an optional YAML file.

Precedence, highest first: CLI flag, action input (``INPUT_*``) or standard
GitHub env var, YAML config file, built-in default.
"""

import json
import logging
import os
import re

import yaml

from deploygate.errors import ConfigurationError
from deploygate.wait.types import DEFAULT_API_URL, DEFAULT_INTERVAL, DEFAULT_TIMEOUT, WaitConfig

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Keys accepted in the YAML config file. The token is deliberately not one of them.
CONFIG_FILE_KEYS = {"deployments", "timeout", "interval", "repo", "api_url", "concurrency"}


def action_input(environ, name):
    """Read a GitHub Actions input the way the runner exposes it (``INPUT_<NAME>``).

    Returns None for unset or blank inputs.
    """
    value = environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()
    return value or None


def _first(*values):
    for value in values:
        if value is not None and value != "":
            return value
    return None


def parse_int_input(value, default):
    """Parse a leading integer from *value* ("10", " 10s" -> 10).

    Returns *default* when the value is absent, has no leading integer, or is
    not positive.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    parsed = int(match.group(1))
    return parsed if parsed > 0 else default


def parse_deployments(raw) -> dict[str, str]:
    """Validate the project -> environment mapping.

    Accepts a JSON object string (CLI flag / action input) or an already
    parsed mapping (YAML config file).

    Raises:
        ConfigurationError: if missing, not valid JSON, not an object, empty,
            or containing non-string / blank names.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ConfigurationError('Missing required input "deployments-to-wait-for".')

    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                'Could not parse the stringified JSON given for "deployments-to-wait-for", please ensure it is valid JSON',
                {"error": str(e)},
            ) from e
    else:
        data = raw

    if not isinstance(data, dict):
        raise ConfigurationError(
            f'"deployments-to-wait-for" must be a JSON object of project name -> environment name, got {type(data).__name__}'
        )
    if not data:
        raise ConfigurationError('"deployments-to-wait-for" is empty: name at least one environment to wait for.')

    for project_name, environment in data.items():
        if not isinstance(project_name, str) or not project_name.strip():
            raise ConfigurationError(f'"deployments-to-wait-for": invalid project name {project_name!r}')
        if not isinstance(environment, str) or not environment.strip():
            raise ConfigurationError(f'"deployments-to-wait-for": environment for project "{project_name}" must be a non-empty string')

    return dict(data)


def parse_repo(value) -> tuple[str, str]:
    """Split ``OWNER/REPO`` into its parts."""
    if not value or "/" not in value:
        raise ConfigurationError(f"Invalid repository {value!r}: expected OWNER/REPO (or set GITHUB_REPOSITORY).")
    owner, repo = value.split("/", 1)
    if not owner or not repo or "/" in repo:
        raise ConfigurationError(f"Invalid repository {value!r}: expected OWNER/REPO.")
    return owner, repo


def load_config_file(path) -> dict:
    """Load the optional YAML config file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping at the top level.")

    unknown = set(data) - CONFIG_FILE_KEYS
    if unknown:
        logger.warning(f"Warning: ignoring unknown config file keys: {', '.join(sorted(unknown))}")
    return {k: v for k, v in data.items() if k in CONFIG_FILE_KEYS}


def load_config(args, environ=None) -> WaitConfig:
    """Assemble and validate the WaitConfig for one run.

    Raises:
        ConfigurationError: on any missing or malformed input.
    """
    environ = os.environ if environ is None else environ
    config_path = getattr(args, "config", None)
    file_cfg = load_config_file(config_path) if config_path else {}

    token = _first(getattr(args, "github_token", None), action_input(environ, "github-token"), environ.get("GITHUB_TOKEN"))
    if not token:
        raise ConfigurationError("GitHub token required. Use --github-token or set GITHUB_TOKEN.")

    deployments = parse_deployments(
        _first(
            getattr(args, "deployments_to_wait_for", None),
            action_input(environ, "deployments-to-wait-for"),
            file_cfg.get("deployments"),
        )
    )

    sha = _first(getattr(args, "sha", None), action_input(environ, "github-head-sha"), environ.get("GITHUB_SHA"))
    if not sha:
        raise ConfigurationError("Commit SHA required. Use --sha or set GITHUB_SHA.")

    owner, repo = parse_repo(_first(getattr(args, "repo", None), environ.get("GITHUB_REPOSITORY"), file_cfg.get("repo")))

    return WaitConfig(
        token=token,
        owner=owner,
        repo=repo,
        sha=sha,
        deployments=deployments,
        timeout=parse_int_input(
            _first(getattr(args, "timeout", None), action_input(environ, "timeout"), file_cfg.get("timeout")), DEFAULT_TIMEOUT
        ),
        interval=parse_int_input(
            _first(getattr(args, "interval", None), action_input(environ, "interval"), file_cfg.get("interval")), DEFAULT_INTERVAL
        ),
        api_url=_first(getattr(args, "api_url", None), environ.get("GITHUB_API_URL"), file_cfg.get("api_url")) or DEFAULT_API_URL,
        concurrency=parse_int_input(
            _first(getattr(args, "concurrency", None), action_input(environ, "concurrency"), file_cfg.get("concurrency")), 1
        ),
    )
