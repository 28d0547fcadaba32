import logging
from typing import Optional

from fastapi import APIRouter, Depends

from ticketing import schema
from ticketing.dependencies.deps import get_device_id, get_status_device_id, get_sync_service
from ticketing.service.sync_service import SyncService
from ticketing.utils.security import get_actor_context

logger = logging.getLogger(__name__)
sync_router = APIRouter()


@sync_router.post('/v1/sync', response_model=schema.SyncResponse)
def batch_sync(sync_request: schema.SyncRequest,
               device_id: Optional[str] = Depends(get_device_id),
               actor: schema.ActorContext = Depends(get_actor_context),
               sync_service: SyncService = Depends(get_sync_service)):
    """
    Upload a batch of offline tickets and photos and receive the server-side
    changes made since the device's last sync.
    """
    return sync_service.batch_sync(sync_request, device_id, actor)


@sync_router.get('/v1/sync/status', response_model=schema.SyncStatusResponse)
def sync_status(device_id: Optional[str] = Depends(get_status_device_id),
                actor: schema.ActorContext = Depends(get_actor_context),
                sync_service: SyncService = Depends(get_sync_service)):
    return sync_service.get_status(device_id, actor)
