"""Report wait results to the invoking workflow (GITHUB_OUTPUT, workflow commands)."""

import json
import logging
import os
import sys
import uuid

from deploygate.redact import redact_secrets
from deploygate.wait.types import SuccessRecord

logger = logging.getLogger(__name__)

OUTPUT_NAME = "deployments"


def deployments_by_project(successful: dict[str, SuccessRecord]) -> dict[str, dict]:
    """Re-key environment -> record into project name -> output dict."""
    return {record.project_name: record.to_dict() for record in successful.values()}


def _write_multiline_output(f, name, value):
    """Write a value to GITHUB_OUTPUT using heredoc delimiter."""
    delimiter = f"ghadelim_{uuid.uuid4().hex[:8]}"
    f.write(f"{name}<<{delimiter}\n")
    f.write(value)
    if not value.endswith("\n"):
        f.write("\n")
    f.write(f"{delimiter}\n")


def write_output(name, value, environ=None):
    """Set a step output. Falls back to ``name=value`` on stdout outside Actions."""
    environ = os.environ if environ is None else environ
    github_output = environ.get("GITHUB_OUTPUT")
    if github_output:
        with open(github_output, "a") as f:
            _write_multiline_output(f, name, value)
    else:
        print(f"{name}={value}")


def report_success(successful: dict[str, SuccessRecord], environ=None) -> dict[str, dict]:
    """Emit the ``deployments`` output keyed by project name and return it."""
    deployments = deployments_by_project(successful)
    write_output(OUTPUT_NAME, json.dumps(deployments), environ)
    return deployments


def _escape_command_data(message):
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def report_failure(message, environ=None):
    """Log a terminal failure; under GitHub Actions also annotate the step with ``::error::``."""
    environ = os.environ if environ is None else environ
    logger.error(f"Error: {message}")
    if environ.get("GITHUB_ACTIONS") == "true":
        print(f"::error::{_escape_command_data(redact_secrets(message))}", file=sys.stdout, flush=True)
