import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ticketing.models.device_sync import DeviceSync
from ticketing.models.ticket import Ticket
from ticketing.schema import ActorContext, SyncStatusResponse

logger = logging.getLogger(__name__)


class DeviceCheckpointService:
    """Per (user, device) sync checkpoints."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int, device_id: str):
        return DeviceSync.get(self.db, user_id, device_id)

    def record_sync(self, user_id: int, device_id: str, sync_timestamp: datetime, items_synced: int):
        return DeviceSync.upsert(self.db, user_id, device_id, sync_timestamp, items_synced)

    def status(self, actor: ActorContext, device_id: str) -> SyncStatusResponse:
        record = self.get(actor.user_id, device_id)
        if record is None:
            return SyncStatusResponse(device_id=device_id, last_sync_timestamp=None, pending_server_updates=0)

        try:
            pending = Ticket.count_updated_since(self.db, record.last_sync_timestamp,
                                                 actor.station_id, actor.region_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Counting pending updates for device {device_id} failed: {str(e)}")
            pending = 0

        return SyncStatusResponse(device_id=device_id,
                                  last_sync_timestamp=record.last_sync_timestamp,
                                  pending_server_updates=pending)
