"""Resolve the project -> environment request into the watch set."""

import logging

from deploygate.errors import ConfigurationError

logger = logging.getLogger(__name__)


def resolve_environments(deployments: dict[str, str]) -> tuple[list[str], dict[str, str]]:
    """Split a project -> environment mapping into the watch list and its reverse lookup.

    Environments are listed once each, in first-seen order. When two projects
    name the same environment the later project owns it in the reverse lookup
    and a warning is logged.

    Returns:
        (environments, environment -> project name)

    Raises:
        ConfigurationError: if the mapping is empty.
    """
    if not deployments:
        raise ConfigurationError("No deployments to wait for: the project -> environment mapping is empty.")

    environments = []
    env_to_project = {}
    for project_name, environment in deployments.items():
        if environment in env_to_project:
            logger.warning(
                f"Warning: environment '{environment}' is requested by both '{env_to_project[environment]}' "
                f"and '{project_name}'; results will be reported under '{project_name}'."
            )
        else:
            environments.append(environment)
        env_to_project[environment] = project_name

    return environments, env_to_project
