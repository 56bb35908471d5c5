"""Current-user lookup.

Authentication happens upstream; the storefront only needs to know who is
shopping. Providers return None for guests.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    id: str
    name: str
    role: str = "customer"
    email: str | None = None


class IdentityProvider(ABC):
    @abstractmethod
    def get(self) -> CurrentUser | None:
        """Return the signed-in user, or None for a guest."""
        ...


class StaticIdentityProvider(IdentityProvider):
    """Always returns the user it was built with."""

    def __init__(self, user: CurrentUser | None = None) -> None:
        self.user = user

    def get(self) -> CurrentUser | None:
        return self.user


class HeaderIdentityProvider(IdentityProvider):
    """Reads the user forwarded by the upstream auth proxy as X-User-* headers."""

    def __init__(self, headers: Mapping[str, str]) -> None:
        self.headers = headers

    def get(self) -> CurrentUser | None:
        user_id = self.headers.get("x-user-id")
        if not user_id:
            return None
        return CurrentUser(
            id=user_id,
            name=self.headers.get("x-user-name") or user_id,
            role=(self.headers.get("x-user-role") or "customer").lower(),
            email=self.headers.get("x-user-email"),
        )
