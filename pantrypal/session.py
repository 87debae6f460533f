"""Explicit session context for API requests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import PantryConfig


class SessionKind(Enum):
    AUTHENTICATED = "authenticated"
    GUEST = "guest"


@dataclass(frozen=True)
class SessionContext:
    """Who is talking to the API.

    A signed-in household member carries a bearer token; a guest who
    accepted an invite link carries the invitation id instead.
    """

    kind: SessionKind
    token: str

    @classmethod
    def authenticated(cls, token: str) -> SessionContext:
        if not token:
            raise ValueError("bearer token must not be empty")
        return cls(SessionKind.AUTHENTICATED, token)

    @classmethod
    def guest(cls, invite_id: str) -> SessionContext:
        if not invite_id:
            raise ValueError("invite id must not be empty")
        return cls(SessionKind.GUEST, invite_id)

    @classmethod
    def from_config(cls, config: PantryConfig) -> SessionContext | None:
        """Bearer token first, then invite id; None if neither is set."""
        if config.api.token:
            return cls.authenticated(config.api.token)
        if config.api.invite_id:
            return cls.guest(config.api.invite_id)
        return None

    @property
    def is_guest(self) -> bool:
        return self.kind is SessionKind.GUEST

    def authorization_header(self) -> str:
        if self.kind is SessionKind.GUEST:
            return f"Invite {self.token}"
        return f"Bearer {self.token}"
