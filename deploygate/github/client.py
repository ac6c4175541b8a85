"""GitHub deployments API: list deployments for a commit and read their statuses."""

import logging

import httpx

from deploygate.errors import ApiError
from deploygate.wait.types import DEFAULT_API_URL, Deployment, DeploymentStatus

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
# ant-man adds environment_url and the inactive state, flash adds in_progress/queued.
PREVIEW_MEDIA_TYPES = (
    "application/vnd.github.ant-man-preview+json",
    "application/vnd.github.flash-preview+json",
)
PER_PAGE = 100
REQUEST_TIMEOUT = 30


def _headers(token):
    return {
        "Authorization": f"Bearer {token}",
        "Accept": ", ".join(PREVIEW_MEDIA_TYPES),
        "X-GitHub-Api-Version": API_VERSION,
        "User-Agent": "deploygate",
    }


def _error_message(resp: httpx.Response) -> str:
    """Build a readable message from a failed response, including GitHub's own message."""
    detail = ""
    try:
        body = resp.json()
        if isinstance(body, dict):
            detail = body.get("message") or ""
    except ValueError:
        detail = resp.text[:200]

    if resp.status_code in (403, 429) and resp.headers.get("x-ratelimit-remaining") == "0":
        reset = resp.headers.get("x-ratelimit-reset", "unknown")
        return f"GitHub API rate limit exceeded (resets at {reset}): {detail}"
    return f"GitHub API request failed: {resp.status_code} {resp.request.method} {resp.request.url}: {detail}"


class GitHubClient:
    """Read-only client for the repository deployments endpoints.

    Use as an async context manager. An ``http_client`` can be injected (tests
    pass one backed by ``httpx.MockTransport``); it is then left open on exit.
    """

    def __init__(self, token, owner, repo, api_url=DEFAULT_API_URL, http_client=None):
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=REQUEST_TIMEOUT)
        self._headers = _headers(token)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def _get_list(self, path, params=None) -> list:
        """GET a list endpoint, following ``Link: rel="next"`` pagination.

        Raises:
            ApiError: on transport failure, non-2xx status or a non-list body.
        """
        url = f"{self.api_url}{path}"
        params = {**(params or {}), "per_page": PER_PAGE}
        items = []
        while url:
            logger.debug(f"GET {url}")
            try:
                resp = await self._client.get(url, params=params, headers=self._headers)
            except httpx.HTTPError as e:
                raise ApiError(f"GitHub API request to {url} failed: {e}") from e
            if resp.is_error:
                raise ApiError(_error_message(resp), status_code=resp.status_code)
            try:
                page = resp.json()
            except ValueError as e:
                raise ApiError(f"GitHub API returned invalid JSON for {url}", status_code=resp.status_code) from e
            if not isinstance(page, list):
                raise ApiError(f"GitHub API returned unexpected body for {url}: expected a list", status_code=resp.status_code)
            items.extend(page)
            # The next link already carries the query string.
            url = resp.links.get("next", {}).get("url")
            params = None
        return items

    async def list_deployments(self, sha) -> list[Deployment]:
        """GET /repos/{owner}/{repo}/deployments?sha={sha}"""
        data = await self._get_list(f"/repos/{self.owner}/{self.repo}/deployments", {"sha": sha})
        try:
            return [Deployment.from_api(d) for d in data]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ApiError(f"GitHub API returned a malformed deployment: {e}") from e

    async def get_deployment_statuses(self, deployment_id) -> list[DeploymentStatus]:
        """GET /repos/{owner}/{repo}/deployments/{deployment_id}/statuses"""
        data = await self._get_list(f"/repos/{self.owner}/{self.repo}/deployments/{deployment_id}/statuses")
        try:
            return [DeploymentStatus.from_api(s) for s in data]
        except (AttributeError, TypeError) as e:
            raise ApiError(f"GitHub API returned a malformed deployment status: {e}") from e
