"""Pull request discovery services."""

from bbprs.adapters.base import (
    ConfigError,
    DecodeError,
    DiscoveryError,
    OperationCancelledError,
    PullRequestService,
    TransportError,
)
from bbprs.adapters.bitbucket_client import DEFAULT_TIMEOUT_SECONDS, BitbucketCloudClient
from bbprs.adapters.bitbucket_cloud import DEFAULT_API_URL, BitbucketCloudService, parse_base_url

__all__ = [
    "BitbucketCloudClient",
    "BitbucketCloudService",
    "ConfigError",
    "DEFAULT_API_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "DecodeError",
    "DiscoveryError",
    "OperationCancelledError",
    "PullRequestService",
    "TransportError",
    "parse_base_url",
]
