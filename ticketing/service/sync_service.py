import logging
import time
from collections import Counter
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ticketing.config import Settings
from ticketing.exception_handler.exceptions import AppError, ValidationFailed
from ticketing.models.ticket import Ticket
from ticketing.schema import (ActorContext, SyncRequest, SyncResponse, SyncResults, ServerUpdates,
                              ServerTicketUpdate, SyncTicketResult, SyncPhotoResult, SyncPhotoItem,
                              SyncStatusResponse, CreateTicketItem, ticket_item_adapter)
from ticketing.service.conflict_resolver import ConflictResolver
from ticketing.service.device_checkpoint import DeviceCheckpointService
from ticketing.service.lookups import OffenceLookup, JurisdictionLookup
from ticketing.service.photo_ingestion import PhotoIngestion
from ticketing.service.storage_service import LocalStorage
from ticketing.service.ticket_ingestion import TicketIngestion
from ticketing.utils import enum
from ticketing.utils.common import DateTimeUtils, calculate_time_difference

logger = logging.getLogger(__name__)


def _validation_message(prefix: str, error: ValidationError) -> str:
    reasons = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()))
        reasons.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return f"{prefix}: {'; '.join(reasons)}"


def _local_ref(raw: Any, *keys: str) -> str:
    if isinstance(raw, dict):
        for key in keys:
            value = raw.get(key)
            if value is not None:
                return str(value)
    return ""


class SyncService:
    """
    Entry point for an offline device's batch.

    Every item is committed on its own and reported on its own. Ticket items are
    all processed before any photo item so photos can point at tickets created
    earlier in the same batch.
    """

    def __init__(self,
                 db: Session,
                 offence_lookup: OffenceLookup,
                 jurisdiction_lookup: JurisdictionLookup,
                 storage: LocalStorage,
                 checkpoints: DeviceCheckpointService,
                 settings: Settings):
        self.db = db
        self.checkpoints = checkpoints
        self.max_batch_size = settings.SYNC_MAX_BATCH_SIZE
        self.server_updates_limit = settings.SYNC_SERVER_UPDATES_LIMIT

        self.ticket_ingestion = TicketIngestion(db,
                                                offence_lookup,
                                                jurisdiction_lookup,
                                                payment_grace_days=settings.PAYMENT_GRACE_DAYS,
                                                ticket_prefix=settings.TICKET_PREFIX,
                                                payment_prefix=settings.PAYMENT_PREFIX)
        self.conflict_resolver = ConflictResolver(db)
        self.photo_ingestion = PhotoIngestion(db, storage, settings.SYNC_MAX_PHOTO_BYTES)

    def batch_sync(self, request: SyncRequest, device_id: Optional[str], actor: ActorContext) -> SyncResponse:
        total_items = request.total_items
        if total_items > self.max_batch_size:
            raise ValidationFailed(
                f"Maximum batch size of {self.max_batch_size} items exceeded (got {total_items})")

        if not device_id:
            raise ValidationFailed("Device ID is required (X-Device-ID header)")

        start_time = time.time()

        ticket_results: List[SyncTicketResult] = []
        local_to_server: Dict[str, int] = {}
        for raw_item in request.tickets:
            result = self.process_ticket_item(raw_item, actor)
            ticket_results.append(result)
            if result.status == enum.ItemStatus.SUCCESS and result.server_id and result.local_id:
                local_to_server[result.local_id] = int(result.server_id)

        photo_results = [self.process_photo_item(raw_item, local_to_server) for raw_item in request.photos]

        sync_timestamp = DateTimeUtils.utc_now()
        server_updates = self.get_server_updates(request.last_sync_timestamp, actor)

        try:
            self.checkpoints.record_sync(actor.user_id, device_id, sync_timestamp, total_items)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update device sync for user {actor.user_id} device {device_id}: {str(e)}")

        ticket_tally = Counter(result.status.value for result in ticket_results)
        photo_tally = Counter(result.status.value for result in photo_results)
        logger.info(f"Sync from device {device_id} (user {actor.user_id}): "
                    f"tickets {dict(ticket_tally)}, photos {dict(photo_tally)}, "
                    f"{len(server_updates)} server update(s) in {calculate_time_difference(start_time):.2f}s")

        return SyncResponse(sync_timestamp=sync_timestamp,
                            results=SyncResults(tickets=ticket_results, photos=photo_results),
                            server_updates=ServerUpdates(tickets=server_updates))

    def process_ticket_item(self, raw_item: Dict[str, Any], actor: ActorContext) -> SyncTicketResult:
        local_id = _local_ref(raw_item, "id")
        try:
            item = ticket_item_adapter.validate_python(raw_item)
        except ValidationError as e:
            message = _validation_message("invalid ticket data", e)
            logger.warning(f"Ticket item {local_id}: {message}")
            return SyncTicketResult(local_id=local_id, status=enum.ItemStatus.ERROR, error=message)

        server_id = None if isinstance(item, CreateTicketItem) else (
            str(item.data.id) if item.data.id is not None else None)
        try:
            if isinstance(item, CreateTicketItem):
                return self.ticket_ingestion.create(item, actor)
            return self.conflict_resolver.apply(item, actor)
        except AppError as e:
            logger.warning(f"Ticket item {local_id} ({item.action}): {e.message}")
            return SyncTicketResult(local_id=local_id, server_id=server_id,
                                    status=enum.ItemStatus.ERROR, error=e.message)
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Ticket item {local_id} ({item.action}) failed unexpectedly: {str(e)}")
            return SyncTicketResult(local_id=local_id, server_id=server_id,
                                    status=enum.ItemStatus.ERROR, error="internal error")

    def process_photo_item(self, raw_item: Dict[str, Any], local_to_server: Dict[str, int]) -> SyncPhotoResult:
        local_id = _local_ref(raw_item, "photoId", "photo_id")
        try:
            item = SyncPhotoItem.model_validate(raw_item)
        except ValidationError as e:
            message = _validation_message("invalid photo data", e)
            logger.warning(f"Photo item {local_id}: {message}")
            return SyncPhotoResult(local_id=local_id, status=enum.ItemStatus.ERROR, error=message)

        try:
            return self.photo_ingestion.ingest(item, local_to_server)
        except AppError as e:
            logger.warning(f"Photo item {local_id}: {e.message}")
            return SyncPhotoResult(local_id=local_id, status=enum.ItemStatus.ERROR, error=e.message)
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Photo item {local_id} failed unexpectedly: {str(e)}")
            return SyncPhotoResult(local_id=local_id, status=enum.ItemStatus.ERROR, error="internal error")

    def get_server_updates(self, since, actor: ActorContext) -> List[ServerTicketUpdate]:
        try:
            tickets = Ticket.get_updated_since(self.db, since, actor.station_id, actor.region_id,
                                               self.server_updates_limit)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to get server updates: {str(e)}")
            return []

        updates = []
        for ticket in tickets:
            action = enum.ServerUpdateAction.DELETE \
                if ticket.status == enum.TicketStatus.CANCELLED.value else enum.ServerUpdateAction.UPDATE
            updates.append(ServerTicketUpdate(id=str(ticket.id), action=action, data=ticket.server_update_payload()))
        return updates

    def get_status(self, device_id: Optional[str], actor: ActorContext) -> SyncStatusResponse:
        if not device_id:
            raise ValidationFailed("Device ID is required")
        return self.checkpoints.status(actor, device_id)
