"""Thin Bitbucket Cloud REST client (requests)."""

from typing import Any, Dict
from urllib.parse import quote, urlsplit

import requests

from bbprs.adapters.base import DecodeError, TransportError
from bbprs.models import Auth, BasicAuth, BearerToken

DEFAULT_TIMEOUT_SECONDS = 30.0


class BitbucketCloudClient:
    """Issues GET requests against the Bitbucket Cloud 2.0 API.

    Returns decoded JSON as-is; shaping the payload is left to the caller.
    """

    def __init__(
        self,
        base_url: str,
        auth: Auth,
        default_timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.default_timeout = default_timeout
        self._session = requests.Session()
        self._session.headers["Accept"] = "application/json"
        if isinstance(auth, BasicAuth):
            self._session.auth = (auth.username, auth.password.get_secret_value())
        elif isinstance(auth, BearerToken):
            self._session.headers["Authorization"] = f"Bearer {auth.token.get_secret_value()}"

    def _get(self, url: str, params: Dict[str, Any] | None = None, timeout: float | None = None) -> Any:
        try:
            resp = self._session.request(
                "GET",
                url,
                params=params,
                timeout=timeout if timeout is not None else self.default_timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"request to {url} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                data = resp.json()
            except ValueError:
                data = None
            if isinstance(data, dict) and isinstance(data.get("error"), dict):
                msg = data["error"].get("message") or msg
            raise TransportError(f"Bitbucket API error {resp.status_code}: {msg}")
        try:
            return resp.json()
        except ValueError as e:
            raise DecodeError(f"response body from {url} is not valid JSON") from e

    def get_pull_requests(
        self,
        owner: str,
        repo_slug: str,
        *,
        timeout: float | None = None,
        pagelen: int | None = None,
    ) -> Any:
        """Fetch the first page of open pull requests for owner/repo_slug."""
        url = f"{self.base_url}/repositories/{quote(owner, safe='')}/{quote(repo_slug, safe='')}/pullrequests"
        params: Dict[str, Any] = {"state": "OPEN"}
        if pagelen is not None:
            params["pagelen"] = pagelen
        return self._get(url, params=params, timeout=timeout)

    def get_page(self, url: str, *, timeout: float | None = None) -> Any:
        """Fetch a pagination cursor URL (the ``next`` field of a page).

        The cursor must point at the configured API host so credentials are
        never sent elsewhere.
        """
        base = urlsplit(self.base_url)
        target = urlsplit(url)
        if (target.scheme, target.netloc) != (base.scheme, base.netloc):
            raise DecodeError(f"pagination cursor {url} does not belong to {self.base_url}")
        return self._get(url, timeout=timeout)
