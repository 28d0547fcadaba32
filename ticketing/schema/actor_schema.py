from typing import Optional
from pydantic import BaseModel, ConfigDict


class ActorContext(BaseModel):
    """Who is calling and under which station/region, as resolved from the bearer token."""
    model_config = ConfigDict(frozen=True)

    user_id: int
    role: Optional[str] = None
    officer_id: Optional[int] = None
    station_id: Optional[int] = None
    region_id: Optional[int] = None

    @property
    def has_officer_context(self) -> bool:
        return None not in (self.officer_id, self.station_id, self.region_id)
