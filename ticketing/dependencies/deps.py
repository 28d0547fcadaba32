import logging
from typing import Generator, Optional

from fastapi import Depends, Header, Query
from sqlalchemy.orm import Session

from ticketing.config import settings
from ticketing.models.session import SessionLocal
from ticketing.service.device_checkpoint import DeviceCheckpointService
from ticketing.service.lookups import OffenceLookup, JurisdictionLookup
from ticketing.service.storage_service import LocalStorage
from ticketing.service.sync_service import SyncService

logger = logging.getLogger(__name__)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.critical(f"Exception {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


def get_device_id(x_device_id: Optional[str] = Header(None),
                  device_id: Optional[str] = Query(None, alias="deviceId")) -> Optional[str]:
    return x_device_id or device_id


def get_status_device_id(device_id: Optional[str] = Query(None, alias="deviceId"),
                         x_device_id: Optional[str] = Header(None)) -> Optional[str]:
    return device_id or x_device_id


def get_storage() -> LocalStorage:
    return LocalStorage(settings.STORAGE_LOCAL_PATH, settings.STORAGE_BASE_URL)


def get_sync_service(db: Session = Depends(get_db),
                     storage: LocalStorage = Depends(get_storage)) -> SyncService:
    return SyncService(db,
                       offence_lookup=OffenceLookup(db),
                       jurisdiction_lookup=JurisdictionLookup(db),
                       storage=storage,
                       checkpoints=DeviceCheckpointService(db),
                       settings=settings)
