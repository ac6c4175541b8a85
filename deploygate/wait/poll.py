"""One poll cycle: list deployments for the commit and check each watched environment."""

import asyncio
import logging

from deploygate.wait.types import DeploymentStatus, SuccessRecord

logger = logging.getLogger(__name__)

SUCCESS_STATE = "success"


def find_success(statuses: list[DeploymentStatus]) -> DeploymentStatus | None:
    """Return the first status with state 'success', or None."""
    for status in statuses:
        if status.state == SUCCESS_STATE:
            return status
    return None


async def _fetch_statuses(client, environment, deployment):
    logger.info(f'\tGetting statuses for environment deployment for "{environment}", deployment ID = {deployment.id}...')
    statuses = await client.get_deployment_statuses(deployment.id)
    logger.info(f"\tFound {len(statuses)} statuses")
    return statuses


async def _fetch_all(client, matches, concurrency):
    """Fetch statuses for every (environment, deployment) pair, preserving order."""
    if concurrency <= 1:
        return [await _fetch_statuses(client, env, dep) for env, dep in matches]

    sem = asyncio.Semaphore(concurrency)

    async def _fetch_with_semaphore(env, dep):
        async with sem:
            return await _fetch_statuses(client, env, dep)

    tasks = [asyncio.create_task(_fetch_with_semaphore(env, dep)) for env, dep in matches]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        # One failed fetch aborts the cycle: stop the rest before the client is closed.
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def poll_cycle(client, sha, environments, env_to_project, concurrency=1) -> dict[str, SuccessRecord]:
    """Run one pass over all watched environments.

    Checks every deployment of *sha* whose environment is watched, in
    environment-then-deployment order. Environments that already succeeded in
    an earlier cycle are checked again; the caller merges the result.

    Args:
        client: object with async ``list_deployments(sha)`` and
            ``get_deployment_statuses(deployment_id)``.
        concurrency: max in-flight status requests. 1 keeps the requests
            strictly sequential.

    Returns:
        environment -> SuccessRecord for every environment with a successful
        deployment in this cycle.

    Raises:
        ApiError: from the client, unhandled. One failed call aborts the cycle.
    """
    deployments = await client.list_deployments(sha)
    logger.info(f"Found {len(deployments)} deployments...")

    matches = [(env, dep) for env in environments for dep in deployments if dep.environment == env]
    all_statuses = await _fetch_all(client, matches, concurrency)

    found = {}
    for (environment, deployment), statuses in zip(matches, all_statuses):
        success = find_success(statuses)
        if success is None:
            states = '", "'.join(s.state for s in statuses)
            logger.info(f'\tNo statuses with state "success": "{states}"')
            continue

        logger.info(f"\tSuccessful deployment found (deployment ID = {deployment.id})")
        found[environment] = SuccessRecord(
            project_name=env_to_project[environment],
            environment=environment,
            url=success.url,
        )

    return found
