"""Open pull request discovery for Git hosting providers."""

from bbprs.adapters import (
    BitbucketCloudService,
    ConfigError,
    DecodeError,
    DiscoveryError,
    OperationCancelledError,
    PullRequestService,
    TransportError,
)
from bbprs.context import OperationContext
from bbprs.models import PullRequest

__all__ = [
    "BitbucketCloudService",
    "ConfigError",
    "DecodeError",
    "DiscoveryError",
    "OperationCancelledError",
    "OperationContext",
    "PullRequest",
    "PullRequestService",
    "TransportError",
]
