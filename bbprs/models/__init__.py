"""Data models: normalized pull requests, provider records, auth modes (Pydantic)."""

from bbprs.models.auth import Auth, BasicAuth, BearerToken, NoAuth
from bbprs.models.bitbucket import (
    BitbucketBranch,
    BitbucketCommit,
    BitbucketPullRequest,
    BitbucketPullRequestSource,
    PullRequestPage,
)
from bbprs.models.pull_request import PullRequest

__all__ = [
    "Auth",
    "BasicAuth",
    "BearerToken",
    "BitbucketBranch",
    "BitbucketCommit",
    "BitbucketPullRequest",
    "BitbucketPullRequestSource",
    "NoAuth",
    "PullRequest",
    "PullRequestPage",
]
