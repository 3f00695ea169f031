from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AdminRole


@dataclass(frozen=True)
class KioskContext:
    """Who is calling from a kiosk: resolved once per request from the bearer key."""

    device_id: int
    organisation_id: int
    station_id: int
    device_name: str = ""


@dataclass(frozen=True)
class AdminContext:
    """Signed-in admin, as stored in the Flask session cookie."""

    user_id: str
    email: str
    role: AdminRole
    organisation_id: int
    name: Optional[str] = None

    def to_session(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "role": self.role.value,
            "organisation_id": self.organisation_id,
            "name": self.name,
        }

    @classmethod
    def from_session(cls, data: object) -> Optional["AdminContext"]:
        if not isinstance(data, dict):
            return None
        try:
            return cls(
                user_id=str(data["id"]),
                email=str(data["email"]),
                role=AdminRole(data["role"]),
                organisation_id=int(data["organisation_id"]),
                name=data.get("name"),
            )
        except (KeyError, TypeError, ValueError):
            return None
