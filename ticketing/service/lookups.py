import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from ticketing.exception_handler.exceptions import NotFoundError, ValidationFailed
from ticketing.models.hierarchy import Region, Station
from ticketing.models.offence import Offence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OffenceFine:
    offence_id: int
    code: str
    default_fine: float
    min_fine: float
    max_fine: float

    def charge(self, custom_fine: Optional[float] = None) -> float:
        """Amount to charge: the catalog default unless a custom amount is supplied."""
        if custom_fine is None:
            return self.default_fine
        if custom_fine < self.min_fine or custom_fine > self.max_fine:
            raise ValidationFailed(
                f"custom fine for {self.code} must be between {self.min_fine:.2f} and {self.max_fine:.2f}")
        return custom_fine


@dataclass(frozen=True)
class StationJurisdiction:
    station_id: int
    district_id: int
    division_id: int
    region_id: int


class OffenceLookup:

    def __init__(self, db: Session):
        self.db = db

    def get_fine(self, offence_id: int) -> OffenceFine:
        offence = Offence.get_active_by_id(self.db, offence_id)
        if offence is None:
            raise NotFoundError(f"offence {offence_id}")
        return OffenceFine(offence_id=offence.id,
                           code=offence.code,
                           default_fine=offence.default_fine,
                           min_fine=offence.min_fine,
                           max_fine=offence.max_fine)


class JurisdictionLookup:

    def __init__(self, db: Session):
        self.db = db

    def get_station(self, station_id: int) -> StationJurisdiction:
        station = Station.get_by_id(self.db, station_id)
        if station is None:
            raise NotFoundError(f"station {station_id}")
        return StationJurisdiction(station_id=station.id,
                                   district_id=station.district_id,
                                   division_id=station.division_id,
                                   region_id=station.region_id)

    def get_region_code(self, region_id: int) -> str:
        region = Region.get_by_id(self.db, region_id)
        if region is None:
            raise NotFoundError(f"region {region_id}")
        return region.code
