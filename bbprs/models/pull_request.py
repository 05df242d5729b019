"""Provider-agnostic pull request record."""

from pydantic import BaseModel, ConfigDict


class PullRequest(BaseModel):
    """Open pull request as seen by every adapter.

    Built fresh on each listing and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    branch: str
    head_sha: str
