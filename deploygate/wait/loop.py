"""Wait loop: repeat poll cycles until every environment succeeds or time runs out."""

import asyncio
import json
import logging
import time

from deploygate.errors import WaitTimeoutError
from deploygate.wait.poll import poll_cycle
from deploygate.wait.resolver import resolve_environments
from deploygate.wait.types import SuccessRecord, WaitConfig, WaitState

logger = logging.getLogger(__name__)


async def wait_for_deployments(
    client, config: WaitConfig, *, sleep=asyncio.sleep, clock=time.monotonic
) -> dict[str, SuccessRecord]:
    """Poll deployment statuses for ``config.sha`` until all watched environments succeed.

    Each iteration runs one poll cycle, sleeps ``config.interval`` seconds,
    then checks for completion and only after that for timeout. A run can
    therefore last up to one interval past ``config.timeout``.

    Args:
        client: deployment status client (see ``GitHubClient``).
        sleep: awaitable sleep, replaced in tests.
        clock: monotonic seconds source, replaced in tests.

    Returns:
        environment -> SuccessRecord, one entry per watched environment.

    Raises:
        ConfigurationError: if ``config.deployments`` is empty.
        ApiError: on the first failed API call.
        WaitTimeoutError: if the timeout elapses with environments pending.
    """
    environments, env_to_project = resolve_environments(config.deployments)

    logger.info(f"Listing all deployments for the current commit: {config.sha}")
    state = WaitState(start=clock())

    while True:
        found = await poll_cycle(client, config.sha, environments, env_to_project, concurrency=config.concurrency)
        state.successful.update(found)
        state.cycles += 1

        logger.info(f"Sleeping for {config.interval} seconds...")
        await sleep(config.interval)

        summary = {env: record.to_dict() for env, record in state.successful.items()}
        logger.info(f"Successful deployments so far: {json.dumps(summary, indent=2)}")

        state.elapsed = clock() - state.start
        pending = state.pending(environments)
        if not pending:
            logger.info(
                f"All environments successfully deployed for the current commit "
                f"({state.cycles} cycle(s), {state.elapsed:.1f}s elapsed)"
            )
            return state.successful

        if state.elapsed >= config.timeout:
            raise WaitTimeoutError(state.elapsed, config.timeout, pending)

        logger.debug(f"Cycle {state.cycles}: still waiting for {', '.join(pending)} ({state.elapsed:.1f}s elapsed)")
