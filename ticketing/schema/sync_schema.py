from datetime import datetime
from typing import Optional, List, Any, Dict, Union, Literal, Annotated

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ticketing.utils.common import DateTimeUtils, blank_to_none
from ticketing.utils.enum import ItemStatus, ServerUpdateAction


class CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_utc(value):
    return DateTimeUtils.parse_timestamp(value)


def _as_str(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class SyncRequest(CamelSchema):
    # Items stay undecoded here so one malformed entry cannot fail the whole batch.
    last_sync_timestamp: Optional[datetime] = None
    tickets: List[Any] = []
    photos: List[Any] = []

    normalize_last_sync = field_validator("last_sync_timestamp", mode="before")(_as_utc)

    @property
    def total_items(self) -> int:
        return len(self.tickets) + len(self.photos)


class OffenceInput(CamelSchema):
    id: int
    custom_fine: Optional[float] = None
    notes: Optional[str] = None


class TicketCreateData(CamelSchema):
    client_created_id: Optional[str] = None
    vehicle_registration: str = ""
    vehicle_type: Optional[str] = None
    vehicle_color: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    driver_name: Optional[str] = None
    driver_first_name: Optional[str] = None
    driver_last_name: Optional[str] = None
    driver_license: Optional[str] = None
    driver_phone: Optional[str] = None
    driver_address: Optional[str] = None
    offences: List[OffenceInput] = []
    offence_ids: List[int] = []
    location: Optional[str] = None
    location_latitude: Optional[float] = None
    location_longitude: Optional[float] = None
    notes: Optional[str] = None
    issued_at: Optional[datetime] = None

    normalize_issued_at = field_validator("issued_at", mode="before")(_as_utc)
    normalize_client_id = field_validator("client_created_id", mode="before")(_as_str)

    @model_validator(mode="after")
    def check_required_fields(self):
        self.vehicle_registration = (self.vehicle_registration or "").strip()
        if not self.vehicle_registration:
            raise ValueError("vehicle registration is required")

        full_name = blank_to_none(self.driver_name)
        if full_name is None:
            parts = [blank_to_none(self.driver_first_name), blank_to_none(self.driver_last_name)]
            full_name = " ".join(part for part in parts if part) or None
        if full_name is None:
            raise ValueError("driver name is required")
        self.driver_name = full_name

        # legacy payloads send bare offence ids
        offences = list(self.offences)
        known = {offence.id for offence in offences}
        for offence_id in self.offence_ids:
            if offence_id not in known:
                offences.append(OffenceInput(id=offence_id))
                known.add(offence_id)
        self.offences = offences
        if not self.offences:
            raise ValueError("at least one offence is required")

        self.client_created_id = blank_to_none(self.client_created_id)
        return self


class TicketUpdateData(CamelSchema):
    id: Optional[int] = None
    notes: Optional[str] = None
    status: Optional[str] = None


class CreateTicketItem(CamelSchema):
    local_id: str = Field(alias="id")
    action: Literal["create"]
    timestamp: datetime
    data: TicketCreateData

    normalize_local_id = field_validator("local_id", mode="before")(_as_str)
    normalize_timestamp = field_validator("timestamp", mode="before")(_as_utc)


class UpdateTicketItem(CamelSchema):
    local_id: str = Field(alias="id")
    action: Literal["update"]
    timestamp: datetime
    data: TicketUpdateData

    normalize_local_id = field_validator("local_id", mode="before")(_as_str)
    normalize_timestamp = field_validator("timestamp", mode="before")(_as_utc)


TicketItem = Annotated[Union[CreateTicketItem, UpdateTicketItem], Field(discriminator="action")]
ticket_item_adapter = TypeAdapter(TicketItem)


class SyncPhotoItem(CamelSchema):
    ticket_id: str
    photo_id: str
    data: str
    type: str

    normalize_refs = field_validator("ticket_id", "photo_id", mode="before")(_as_str)


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------

class SyncTicketResult(CamelSchema):
    local_id: str
    server_id: Optional[str] = None
    status: ItemStatus
    error: Optional[str] = None


class SyncPhotoResult(CamelSchema):
    local_id: str
    server_id: Optional[str] = None
    status: ItemStatus
    url: Optional[str] = None
    error: Optional[str] = None


class ServerTicketUpdate(CamelSchema):
    id: str
    action: ServerUpdateAction
    data: Dict[str, Any] = {}


class SyncResults(CamelSchema):
    tickets: List[SyncTicketResult] = []
    photos: List[SyncPhotoResult] = []


class ServerUpdates(CamelSchema):
    tickets: List[ServerTicketUpdate] = []


class SyncResponse(CamelSchema):
    sync_timestamp: datetime
    results: SyncResults
    server_updates: ServerUpdates


class SyncStatusResponse(CamelSchema):
    device_id: str
    last_sync_timestamp: Optional[datetime] = None
    pending_server_updates: int = 0
