# auth/models.py
"""
Account, Profile and Session models for the client session.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

from app.errors import ValidationError

REQUIRED_PROFILE_FIELDS = ("age", "weight", "height")


@dataclass(frozen=True)
class Profile:
    """
    Health profile attached to an account.

    Attributes:
        age: Age in years
        weight: Weight in kg
        height: Height in cm
        smoking: Whether the user smokes
        drinking: Whether the user drinks alcohol
    """
    age: Optional[float] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    smoking: bool = False
    drinking: bool = False

    @property
    def is_complete(self) -> bool:
        """Age, weight and height all present and nonzero."""
        return all(getattr(self, name) for name in REQUIRED_PROFILE_FIELDS)

    @property
    def missing_fields(self) -> list:
        return [name for name in REQUIRED_PROFILE_FIELDS if not getattr(self, name)]

    def merged(self, partial: Mapping[str, Any]) -> Profile:
        """Return a copy with `partial` shallow-merged over this profile."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(partial) - known)
        if unknown:
            raise ValidationError(
                f"Unknown profile field(s): {', '.join(unknown)}",
                field_errors={name: "Unknown field" for name in unknown},
            )
        return replace(self, **dict(partial))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Profile:
        """Build from a wire/storage dict. Missing or None becomes empty."""
        if not data:
            return cls()
        return cls(
            age=data.get("age"),
            weight=data.get("weight"),
            height=data.get("height"),
            smoking=bool(data.get("smoking") or False),
            drinking=bool(data.get("drinking") or False),
        )

    def to_dict(self) -> dict:
        return {
            "age": self.age,
            "weight": self.weight,
            "height": self.height,
            "smoking": self.smoking,
            "drinking": self.drinking,
        }


@dataclass(frozen=True)
class Account:
    """
    Authenticated account.

    The profile is always present; a fresh registration carries an
    empty Profile rather than None.
    """
    id: str
    email: str
    profile: Profile = field(default_factory=Profile)

    def with_profile(self, profile: Profile) -> Account:
        return replace(self, profile=profile)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Account:
        return cls(
            id=str(data["id"]),
            email=str(data["email"]).lower().strip(),
            profile=Profile.from_dict(data.get("profile")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "profile": self.profile.to_dict(),
        }


@dataclass(frozen=True)
class Session:
    """
    Point-in-time view of the client session.

    Attributes:
        credential: Bearer token issued at login
        account: Logged-in account
        is_initializing: True only during the startup recovery check
    """
    credential: Optional[str] = None
    account: Optional[Account] = None
    is_initializing: bool = True

    @property
    def is_authenticated(self) -> bool:
        return bool(self.credential) and self.account is not None
