"""Wait command: block until the requested environments are deployed for a commit."""

import asyncio
import logging
import sys

from deploygate.config import load_config
from deploygate.errors import DeployGateError
from deploygate.github.client import GitHubClient
from deploygate.redact import register_secret
from deploygate.report import report_failure, report_success
from deploygate.wait.loop import wait_for_deployments

logger = logging.getLogger(__name__)


def handle_wait(args):
    """CLI handler for 'wait'."""
    try:
        config = load_config(args)
    except DeployGateError as e:
        report_failure(e.message)
        sys.exit(1)

    register_secret(config.token)
    logger.info(f"Deployments to wait for: {dict(config.deployments)}")

    try:
        successful = asyncio.run(_run_wait(config))
    except DeployGateError as e:
        report_failure(e.message)
        sys.exit(1)

    report_success(successful)


async def _run_wait(config):
    async with GitHubClient(config.token, config.owner, config.repo, api_url=config.api_url) as client:
        return await wait_for_deployments(client, config)


# ── Registration ───────────────────────────────────────────────────


def register_wait_command(subparsers):
    """Register the 'wait' command."""
    parser = subparsers.add_parser("wait", help="Wait for deployments of a commit to succeed")
    parser.add_argument(
        "--deployments-to-wait-for",
        default=None,
        help='JSON object of project name -> environment, e.g. \'{"web": "production"}\' '
        "(fallback: INPUT_DEPLOYMENTS-TO-WAIT-FOR)",
    )
    parser.add_argument("--github-token", default=None, help="GitHub token (fallback: INPUT_GITHUB-TOKEN, GITHUB_TOKEN env var)")
    parser.add_argument("--sha", default=None, help="Commit SHA to inspect (fallback: INPUT_GITHUB-HEAD-SHA, GITHUB_SHA)")
    parser.add_argument("--repo", default=None, help="Repository as OWNER/REPO (fallback: GITHUB_REPOSITORY)")
    parser.add_argument("--timeout", default=None, help="Seconds to wait before failing (default: 300)")
    parser.add_argument("--interval", default=None, help="Seconds between poll cycles (default: 5)")
    parser.add_argument("--api-url", default=None, help="GitHub API base URL (fallback: GITHUB_API_URL, default: https://api.github.com)")
    parser.add_argument("--concurrency", default=None, help="Max concurrent status requests per cycle (default: 1)")
    parser.add_argument("--config", default=None, help="YAML config file with deployments/timeout/interval/repo/api_url/concurrency")
    parser.set_defaults(func=handle_wait)
