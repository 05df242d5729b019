"""Bitbucket Cloud pull request discovery."""

import logging
from typing import Any, Callable, List
from urllib.parse import urlsplit

from pydantic import ValidationError

from bbprs.adapters.base import (
    ConfigError,
    DecodeError,
    OperationCancelledError,
    PullRequestService,
    TransportError,
)
from bbprs.adapters.bitbucket_client import DEFAULT_TIMEOUT_SECONDS, BitbucketCloudClient
from bbprs.context import OperationContext
from bbprs.models import Auth, BasicAuth, BearerToken, NoAuth, PullRequest, PullRequestPage

DEFAULT_API_URL = "https://api.bitbucket.org/2.0"

LOG = logging.getLogger("bbprs.adapters.bitbucket_cloud")


def parse_base_url(base_url: str | None) -> str:
    """Validate an API root URL; empty means the public Bitbucket Cloud API.

    Raises:
        ConfigError: If the URL has no http(s) scheme or no host.
    """
    if not base_url or not base_url.strip():
        return DEFAULT_API_URL
    url = base_url.strip()
    try:
        parts = urlsplit(url)
        # port is parsed lazily and raises on garbage like ":abc"
        _ = parts.port
    except ValueError as e:
        raise ConfigError(f"invalid URL {url!r}: {e}") from e
    if parts.scheme not in ("http", "https"):
        raise ConfigError(f"invalid URL {url!r}: scheme must be http or https")
    if not parts.hostname:
        raise ConfigError(f"invalid URL {url!r}: missing host")
    return url.rstrip("/")


class BitbucketCloudService(PullRequestService):
    """Lists open pull requests of one Bitbucket Cloud repository.

    Build it with one of the ``with_*`` constructors; they only validate and
    wire settings and never touch the network.

    By default a single page is read per call. When the provider reports a
    further page a warning is logged; pass ``follow_pages=True`` to walk
    every ``next`` cursor instead.
    """

    def __init__(
        self,
        client: BitbucketCloudClient,
        owner: str,
        repo_slug: str,
        *,
        follow_pages: bool = False,
        pagelen: int | None = None,
    ) -> None:
        if not owner:
            raise ConfigError("owner is required")
        if not repo_slug:
            raise ConfigError("repository slug is required")
        self._client = client
        self._owner = owner
        self._repo_slug = repo_slug
        self._follow_pages = follow_pages
        self._pagelen = pagelen

    @classmethod
    def _build(
        cls,
        auth: Auth,
        base_url: str | None,
        owner: str,
        repo_slug: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        follow_pages: bool = False,
        pagelen: int | None = None,
    ) -> "BitbucketCloudService":
        try:
            url = parse_base_url(base_url)
        except ConfigError as e:
            raise ConfigError(f"error parsing base url of {base_url} for {owner}/{repo_slug}: {e}") from e
        client = BitbucketCloudClient(url, auth, default_timeout=timeout)
        return cls(client, owner, repo_slug, follow_pages=follow_pages, pagelen=pagelen)

    @classmethod
    def with_basic_auth(
        cls,
        username: str,
        password: str,
        base_url: str | None,
        owner: str,
        repo_slug: str,
        **kwargs: Any,
    ) -> "BitbucketCloudService":
        """Service authenticating with a username and (app) password."""
        return cls._build(BasicAuth(username=username, password=password), base_url, owner, repo_slug, **kwargs)

    @classmethod
    def with_bearer_token(
        cls,
        token: str,
        base_url: str | None,
        owner: str,
        repo_slug: str,
        **kwargs: Any,
    ) -> "BitbucketCloudService":
        """Service authenticating with an access token."""
        return cls._build(BearerToken(token=token), base_url, owner, repo_slug, **kwargs)

    @classmethod
    def with_no_auth(
        cls,
        base_url: str | None,
        owner: str,
        repo_slug: str,
        **kwargs: Any,
    ) -> "BitbucketCloudService":
        """Anonymous service; works for public repositories only."""
        return cls._build(NoAuth(), base_url, owner, repo_slug, **kwargs)

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def repo_slug(self) -> str:
        return self._repo_slug

    @property
    def base_url(self) -> str:
        return self._client.base_url

    @property
    def auth(self) -> Auth:
        return self._client.auth

    @property
    def follow_pages(self) -> bool:
        return self._follow_pages

    def list(self, ctx: OperationContext | None = None) -> List[PullRequest]:
        """List open pull requests.

        Args:
            ctx: Bounds the call; its remaining time becomes the HTTP timeout.

        Returns:
            Normalized pull requests in provider order; empty list if none.

        Raises:
            OperationCancelledError: If ctx is cancelled or expires.
            TransportError: If the API call fails.
            DecodeError: If the response does not have the expected shape.
        """
        ctx = ctx or OperationContext.background()
        repo = f"{self._owner}/{self._repo_slug}"
        LOG.debug("Listing open pull requests for %s from %s", repo, self._client.base_url)

        page = self._decode(
            self._fetch(
                ctx,
                lambda timeout: self._client.get_pull_requests(
                    self._owner, self._repo_slug, timeout=timeout, pagelen=self._pagelen
                ),
            )
        )
        pull_requests = [pr.to_pull_request() for pr in page.values]
        seen: set[str] = set()

        while page.next:
            if not self._follow_pages:
                LOG.warning(
                    "%s has more open pull requests than fit in one page (pagelen=%s); only the first page was read",
                    repo,
                    page.pagelen,
                )
                break
            cursor = page.next
            if cursor in seen:
                raise DecodeError(f"pagination cursor {cursor} repeats for {repo}")
            seen.add(cursor)
            page = self._decode(self._fetch(ctx, lambda timeout: self._client.get_page(cursor, timeout=timeout)))
            pull_requests.extend(pr.to_pull_request() for pr in page.values)

        LOG.debug("Found %d open pull requests for %s", len(pull_requests), repo)
        return pull_requests

    def _fetch(self, ctx: OperationContext, call: Callable[[float | None], Any]) -> Any:
        repo = f"{self._owner}/{self._repo_slug}"
        ctx.check()
        timeout = self._client.default_timeout
        remaining = ctx.remaining()
        if remaining is not None:
            # the deadline can pass between check() and remaining()
            if remaining <= 0:
                raise OperationCancelledError(f"deadline exceeded before listing pull requests for {repo}")
            timeout = min(timeout, remaining)
        try:
            payload = call(timeout)
        except TransportError as e:
            if ctx.cancelled or ctx.expired():
                raise OperationCancelledError(f"listing pull requests for {repo} was cancelled: {e}") from e
            raise TransportError(f"error listing pull requests for {repo}: {e}") from e
        ctx.check()
        return payload

    def _decode(self, payload: Any) -> PullRequestPage:
        repo = f"{self._owner}/{self._repo_slug}"
        if not isinstance(payload, dict):
            raise DecodeError(
                f"not a valid format: expected a JSON object for {repo}, got {type(payload).__name__}"
            )
        if not isinstance(payload.get("values"), list):
            raise DecodeError(f"not a valid format: 'values' is missing or not a list for {repo}")
        try:
            return PullRequestPage.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(f"failed to decode pull requests for {repo}: {e}") from e
