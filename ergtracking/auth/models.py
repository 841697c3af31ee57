"""Identity model for users authenticated through Discord."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class Identity(BaseModel):
    """Profile fragment returned by the identity provider.

    Built fresh on every login and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str
    username: str
    discriminator: str = "0"
    avatar: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: dict[str, Any]) -> "Identity":
        """Build an identity from a raw ``/users/@me`` response."""
        return cls.model_validate(profile)

    @property
    def tag(self) -> str:
        """Human readable ``username#discriminator (id)`` label."""
        return f"{self.username}#{self.discriminator} ({self.id})"
