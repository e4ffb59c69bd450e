from __future__ import annotations

from typing import Protocol


class IdentityProvider(Protocol):
    """Supplies the currently authenticated user id, if any."""

    def current_user_id(self) -> str | None:
        ...


class StaticIdentity:
    """Identity provider backed by a fixed, optionally changeable, user id."""

    def __init__(self, user_id: str | None = None) -> None:
        self.user_id = user_id or None

    def current_user_id(self) -> str | None:
        return self.user_id
