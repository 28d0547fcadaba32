import base64
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ticketing.config import settings
from ticketing.models.base import Base, Region, Division, District, Station, Offence
from ticketing.models.session import enable_sqlite_savepoints
from ticketing.schema import ActorContext
from ticketing.service.device_checkpoint import DeviceCheckpointService
from ticketing.service.lookups import OffenceLookup, JurisdictionLookup
from ticketing.service.storage_service import LocalStorage
from ticketing.service.sync_service import SyncService

# smallest valid JPEG/PNG headers are enough for type sniffing
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 60
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 60
JPEG_B64 = base64.b64encode(JPEG_BYTES).decode()
PNG_B64 = base64.b64encode(PNG_BYTES).decode()

STORAGE_BASE_URL = "http://files.test/uploads"


@pytest.fixture
def engine():
    test_engine = create_engine("sqlite://",
                                connect_args={"check_same_thread": False},
                                poolclass=StaticPool)
    enable_sqlite_savepoints(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed(db):
    region = Region(name="Greater Accra", code="GA")
    db.add(region)
    db.flush()
    division = Division(name="Accra Central", code="ACD", region_id=region.id)
    db.add(division)
    db.flush()
    district = District(name="Osu", code="OSU", division_id=division.id, region_id=region.id)
    db.add(district)
    db.flush()
    station = Station(name="Osu MTTD", code="OSU-01", district_id=district.id,
                      division_id=division.id, region_id=region.id)
    other_station = Station(name="Tema MTTD", code="TMA-01", district_id=district.id,
                            division_id=division.id, region_id=region.id)
    speeding = Offence(code="SPD-01", name="Speeding", category="traffic",
                       default_fine=200.0, min_fine=100.0, max_fine=500.0, points=3)
    parking = Offence(code="PRK-01", name="Illegal parking", category="parking",
                      default_fine=50.0, min_fine=50.0, max_fine=150.0)
    retired = Offence(code="OLD-01", name="Retired offence", default_fine=10.0,
                      min_fine=10.0, max_fine=10.0, is_active=False)
    db.add_all([station, other_station, speeding, parking, retired])
    db.commit()
    return {
        "region": region,
        "division": division,
        "district": district,
        "station": station,
        "other_station": other_station,
        "speeding": speeding,
        "parking": parking,
        "retired": retired,
    }


@pytest.fixture
def actor(seed):
    return ActorContext(user_id=7,
                        role="officer",
                        officer_id=11,
                        station_id=seed["station"].id,
                        region_id=seed["region"].id)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path), STORAGE_BASE_URL)


@pytest.fixture
def sync_settings():
    return settings.model_copy(update={"SYNC_MAX_BATCH_SIZE": 50,
                                       "SYNC_MAX_PHOTO_BYTES": 5 * 1024 * 1024,
                                       "SYNC_SERVER_UPDATES_LIMIT": 200,
                                       "PAYMENT_GRACE_DAYS": 14,
                                       "TICKET_PREFIX": "TKT",
                                       "PAYMENT_PREFIX": "PAY"})


@pytest.fixture
def sync_service(db, storage, sync_settings):
    return SyncService(db,
                       offence_lookup=OffenceLookup(db),
                       jurisdiction_lookup=JurisdictionLookup(db),
                       storage=storage,
                       checkpoints=DeviceCheckpointService(db),
                       settings=sync_settings)


def create_item(local_id, offence_id, timestamp="2026-03-02T09:15:00Z", **data):
    payload = {
        "vehicleRegistration": "GR-1234-20",
        "driverName": "Kofi Mensah",
        "offences": [{"id": offence_id}],
        "location": "Ring Road Central, Accra",
    }
    payload.update(data)
    return {"id": local_id, "action": "create", "timestamp": timestamp, "data": payload}


def photo_item(ticket_ref, photo_id="photo-1", data=JPEG_B64, photo_type="vehicle"):
    return {"ticketId": ticket_ref, "photoId": photo_id, "data": data, "type": photo_type}
