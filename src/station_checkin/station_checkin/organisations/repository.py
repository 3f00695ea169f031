from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Organisation, Station


class OrganisationRepository(Protocol):
    def get_first(self) -> Optional[Organisation]:
        raise NotImplementedError

    def get_station(self, station_id: int) -> Optional[Station]:
        raise NotImplementedError

    def list_stations(self, organisation_id: int) -> Sequence[Station]:
        raise NotImplementedError
