from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Organisation:
    organisation_id: int
    name: str
    timezone: str = "Australia/Sydney"


@dataclass(frozen=True)
class Station:
    station_id: int
    organisation_id: int
    name: str
    code: str
    active: bool = True
