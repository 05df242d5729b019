"""Bitbucket Cloud pull request payloads.

Only the fields needed for discovery are modeled. Scalars are strict so the
decode stays faithful to the JSON types: an ``id`` sent as a string or a
bool is rejected instead of coerced.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr

from bbprs.models.pull_request import PullRequest


class _BitbucketModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class BitbucketBranch(_BitbucketModel):
    name: StrictStr


class BitbucketCommit(_BitbucketModel):
    hash: StrictStr


class BitbucketPullRequestSource(_BitbucketModel):
    """Source side of a pull request: branch and tip commit."""

    branch: BitbucketBranch
    commit: BitbucketCommit


class BitbucketPullRequest(_BitbucketModel):
    """Pull request entry from the ``values`` list."""

    id: StrictInt
    source: BitbucketPullRequestSource

    def to_pull_request(self) -> PullRequest:
        return PullRequest(
            number=self.id,
            branch=self.source.branch.name,
            head_sha=self.source.commit.hash,
        )


class PullRequestPage(_BitbucketModel):
    """One page of ``/repositories/{owner}/{slug}/pullrequests``.

    ``next`` and ``previous`` are full URLs when present.
    """

    page: Optional[StrictInt] = None
    size: Optional[StrictInt] = None
    pagelen: Optional[StrictInt] = None
    next: Optional[StrictStr] = None
    previous: Optional[StrictStr] = None
    values: List[BitbucketPullRequest]
