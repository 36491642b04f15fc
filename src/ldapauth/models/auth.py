"""Models for credentials and authentication outcomes."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .enums import FailureReason

__all__ = ["AuthOutcome", "Credentials"]


class Credentials(BaseSettings):
    """Username and password of the user being authenticated.

    Calling programs such as OpenVPN and Home Assistant pass these in the
    ``username`` and ``password`` environment variables so that the password
    never appears in a process listing. Matching is case-sensitive so that
    the unrelated ``USERNAME`` variable of some shells is not picked up.
    """

    model_config = SettingsConfigDict(case_sensitive=True, frozen=True)

    username: str = Field("", title="Username")

    password: SecretStr = Field(SecretStr(""), title="Password")


@dataclass(frozen=True)
class AuthOutcome:
    """Final result of one authentication attempt."""

    username: str
    """Username that was authenticated."""

    success: bool
    """Whether the user was authenticated and authorized."""

    entry_count: int = 0
    """Number of entries returned by the authorization search."""

    raw_output: str = ""
    """Raw LDIF-like output of the directory client, passed to hooks."""

    failure_reason: FailureReason | None = None
    """Why authentication failed, or `None` on success."""
