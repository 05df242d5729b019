"""Abstract base for pull request discovery services."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

from bbprs.models import PullRequest

if TYPE_CHECKING:
    from bbprs.context import OperationContext


class DiscoveryError(Exception):
    """Raised when open pull requests cannot be listed."""

    pass


class ConfigError(DiscoveryError):
    """Raised when a service is built from invalid settings."""

    pass


class TransportError(DiscoveryError):
    """Raised when the provider call fails (network, HTTP status, auth, rate limit)."""

    pass


class DecodeError(DiscoveryError):
    """Raised when the provider response does not have the expected shape."""

    pass


class OperationCancelledError(DiscoveryError):
    """Raised when the operation context is cancelled or its deadline passes."""

    pass


class PullRequestService(ABC):
    """Lists open pull requests of one repository on a Git hosting platform.

    The repository is bound at construction; implementations exist per
    provider (Bitbucket Cloud, self-hosted instances, other vendors).
    """

    @abstractmethod
    def list(self, ctx: "OperationContext | None" = None) -> List[PullRequest]:
        """Return the currently open pull requests.

        Order is whatever the provider returns. Raises DiscoveryError on
        any failure; a partial list is never returned.
        """
        ...
