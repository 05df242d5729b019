"""Authentication modes for provider clients.

A closed set selected once at construction: basic credentials, a bearer
token, or anonymous access.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class BasicAuth(BaseModel):
    """Username and password (or app password)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["basic"] = "basic"
    username: str
    password: SecretStr


class BearerToken(BaseModel):
    """OAuth or repository access token."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bearer"] = "bearer"
    token: SecretStr


class NoAuth(BaseModel):
    """Anonymous access; no Authorization header is sent."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


Auth = Annotated[Union[BasicAuth, BearerToken, NoAuth], Field(discriminator="kind")]
