import os
from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from ticketing.exception_handler.exceptions import ValidationFailed
from ticketing.models.base import Ticket, TicketNote, TicketPhoto, DeviceSync
from ticketing.schema import SyncRequest
from ticketing.service.sync_service import SyncService
from ticketing.service.device_checkpoint import DeviceCheckpointService
from ticketing.service.lookups import OffenceLookup, JurisdictionLookup
from ticketing.tests.conftest import create_item, photo_item, PNG_B64, STORAGE_BASE_URL
from ticketing.utils import enum
from ticketing.utils.common import DateTimeUtils


def _sync(service, actor, tickets=None, photos=None, device_id="device-A", last_sync=None):
    request = SyncRequest(lastSyncTimestamp=last_sync, tickets=tickets or [], photos=photos or [])
    return service.batch_sync(request, device_id, actor)


def _future(hours=1):
    return (DateTimeUtils.utc_now() + timedelta(hours=hours)).isoformat() + "Z"


def test_ticket_and_photo_in_same_batch(sync_service, actor, db, storage, seed):
    response = _sync(sync_service, actor,
                     tickets=[create_item("local-1", seed["speeding"].id)],
                     photos=[photo_item("local-1")])

    ticket_result = response.results.tickets[0]
    photo_result = response.results.photos[0]
    assert ticket_result.status == enum.ItemStatus.SUCCESS
    assert ticket_result.local_id == "local-1"
    assert ticket_result.server_id
    assert photo_result.status == enum.ItemStatus.SUCCESS
    assert photo_result.url.startswith(f"{STORAGE_BASE_URL}/tickets/{ticket_result.server_id}/")

    ticket = Ticket.get_by_id(db, int(ticket_result.server_id))
    assert ticket.vehicle_reg_number == "GR-1234-20"
    assert ticket.driver_name == "Kofi Mensah"
    assert ticket.location_description == "Ring Road Central, Accra"

    photos = TicketPhoto.get_by_ticket(db, ticket.id)
    assert len(photos) == 1
    assert str(photos[0].id) == photo_result.server_id
    assert os.path.exists(os.path.join(storage.base_path, photos[0].storage_path))


def test_created_ticket_fields(sync_service, actor, db, seed):
    response = _sync(sync_service, actor,
                     tickets=[create_item("local-1", seed["speeding"].id,
                                          timestamp="2026-03-02T09:15:00+02:00",
                                          driverName=None, driverFirstName="Kofi", driverLastName="Mensah")])

    ticket = Ticket.get_by_id(db, int(response.results.tickets[0].server_id))
    year = DateTimeUtils.utc_now().year
    assert ticket.ticket_number == f"TKT-{year}-GA-000001"
    assert ticket.payment_reference == f"PAY-{year}-GA-000001"
    assert ticket.status == enum.TicketStatus.UNPAID.value
    assert ticket.sync_status == enum.SyncStatus.SYNCED.value
    assert ticket.driver_name == "Kofi Mensah"
    assert ticket.issued_at.isoformat() == "2026-03-02T07:15:00"
    assert ticket.due_date == ticket.issued_at + timedelta(days=14)
    assert ticket.officer_id == actor.officer_id
    assert ticket.station_id == seed["station"].id
    assert ticket.district_id == seed["district"].id
    assert ticket.division_id == seed["division"].id
    assert ticket.region_id == seed["region"].id


def test_ticket_numbers_increase_per_region(sync_service, actor, db, seed):
    response = _sync(sync_service, actor,
                     tickets=[create_item("local-1", seed["speeding"].id),
                              create_item("local-2", seed["parking"].id)])

    numbers = [Ticket.get_by_id(db, int(result.server_id)).ticket_number for result in response.results.tickets]
    assert [number[-6:] for number in numbers] == ["000001", "000002"]


def test_fine_uses_default_and_custom_amounts(sync_service, actor, db, seed):
    item = create_item("local-1", seed["speeding"].id,
                       offences=[{"id": seed["speeding"].id, "customFine": 350},
                                 {"id": seed["parking"].id, "notes": "blocking junction"}])
    response = _sync(sync_service, actor, tickets=[item])

    ticket = Ticket.get_by_id(db, int(response.results.tickets[0].server_id))
    assert ticket.total_fine == 400.0
    amounts = sorted(line.fine_amount for line in ticket.offences)
    assert amounts == [50.0, 350.0]


def test_custom_fine_outside_bounds_is_item_error(sync_service, actor, db, seed):
    item = create_item("local-1", seed["speeding"].id,
                       offences=[{"id": seed["speeding"].id, "customFine": 900}])
    response = _sync(sync_service, actor, tickets=[item])

    result = response.results.tickets[0]
    assert result.status == enum.ItemStatus.ERROR
    assert result.error == "custom fine for SPD-01 must be between 100.00 and 500.00"
    assert db.query(Ticket).count() == 0


def test_legacy_offence_ids(sync_service, actor, db, seed):
    item = create_item("local-1", seed["speeding"].id, offences=[],
                       offenceIds=[seed["speeding"].id, seed["parking"].id])
    response = _sync(sync_service, actor, tickets=[item])

    ticket = Ticket.get_by_id(db, int(response.results.tickets[0].server_id))
    assert ticket.total_fine == 250.0
    assert len(ticket.offences) == 2


def test_inactive_offence_is_not_found(sync_service, actor, seed):
    response = _sync(sync_service, actor, tickets=[create_item("local-1", seed["retired"].id)])

    result = response.results.tickets[0]
    assert result.status == enum.ItemStatus.ERROR
    assert result.error == f"offence {seed['retired'].id} not found"


def test_missing_officer_context(sync_service, actor, seed):
    clerk = actor.model_copy(update={"officer_id": None})
    response = _sync(sync_service, clerk, tickets=[create_item("local-1", seed["speeding"].id)])

    result = response.results.tickets[0]
    assert result.status == enum.ItemStatus.ERROR
    assert result.error == "officer context required (officerId, stationId, regionId)"


def test_duplicate_client_created_id_returns_same_ticket(sync_service, actor, db, seed):
    item = create_item("local-1", seed["speeding"].id, clientCreatedId="dev-A-0001")
    first = _sync(sync_service, actor, tickets=[item])
    second = _sync(sync_service, actor, tickets=[dict(item, id="local-1-retry")])

    assert first.results.tickets[0].status == enum.ItemStatus.SUCCESS
    assert second.results.tickets[0].status == enum.ItemStatus.SUCCESS
    assert second.results.tickets[0].server_id == first.results.tickets[0].server_id
    assert second.results.tickets[0].local_id == "local-1-retry"
    assert db.query(Ticket).count() == 1


def test_duplicate_client_created_id_within_one_batch(sync_service, actor, db, seed):
    item = create_item("local-1", seed["speeding"].id, clientCreatedId="dev-A-0002")
    response = _sync(sync_service, actor, tickets=[item, dict(item, id="local-2")])

    server_ids = {result.server_id for result in response.results.tickets}
    assert len(server_ids) == 1
    assert db.query(Ticket).count() == 1


def test_lost_insert_race_resolves_to_existing_ticket(sync_service, actor, db, seed):
    item = create_item("local-1", seed["speeding"].id, clientCreatedId="dev-A-0003")
    existing = _sync(sync_service, actor, tickets=[item]).results.tickets[0]

    # the fast-path lookup misses, as it would for a concurrent request
    with patch.object(Ticket, "get_id_by_client_created_id",
                      side_effect=[None, int(existing.server_id)]):
        response = _sync(sync_service, actor, tickets=[dict(item, id="local-9")])

    result = response.results.tickets[0]
    assert result.status == enum.ItemStatus.SUCCESS
    assert result.server_id == existing.server_id
    assert db.query(Ticket).count() == 1


def test_partial_failure_keeps_good_items(sync_service, actor, db, seed):
    malformed = create_item("bad-1", seed["speeding"].id, vehicleRegistration="  ")
    good = create_item("good-1", seed["speeding"].id)
    response = _sync(sync_service, actor, tickets=[malformed, good, {"id": "odd", "action": "delete"}])

    statuses = {result.local_id: result.status for result in response.results.tickets}
    assert statuses == {"bad-1": enum.ItemStatus.ERROR,
                        "good-1": enum.ItemStatus.SUCCESS,
                        "odd": enum.ItemStatus.ERROR}
    assert response.results.tickets[0].error.startswith("invalid ticket data")
    assert db.query(Ticket).count() == 1


def test_out_of_range_timestamp_is_item_error(sync_service, actor, db, seed):
    overflowing = create_item("bad-1", seed["speeding"].id, timestamp="99999999999999999999")
    good = create_item("good-1", seed["speeding"].id)
    response = _sync(sync_service, actor, tickets=[overflowing, good])

    bad_result, good_result = response.results.tickets
    assert bad_result.local_id == "bad-1"
    assert bad_result.status == enum.ItemStatus.ERROR
    assert bad_result.error.startswith("invalid ticket data")
    assert good_result.status == enum.ItemStatus.SUCCESS
    assert db.query(Ticket).count() == 1


def test_batch_over_ceiling_is_rejected_before_processing(db, storage, sync_settings, actor, seed):
    service = SyncService(db, OffenceLookup(db), JurisdictionLookup(db), storage,
                          DeviceCheckpointService(db),
                          sync_settings.model_copy(update={"SYNC_MAX_BATCH_SIZE": 2}))

    with pytest.raises(ValidationFailed) as error:
        _sync(service, actor,
              tickets=[create_item("local-1", seed["speeding"].id),
                       create_item("local-2", seed["speeding"].id)],
              photos=[photo_item("local-1")])

    assert "Maximum batch size of 2 items exceeded (got 3)" == error.value.message
    assert db.query(Ticket).count() == 0
    assert db.query(DeviceSync).count() == 0


def test_device_id_is_required(sync_service, actor, db, seed):
    with pytest.raises(ValidationFailed):
        _sync(sync_service, actor, tickets=[create_item("local-1", seed["speeding"].id)], device_id="")
    assert db.query(Ticket).count() == 0


class TestServerWins:

    @pytest.fixture
    def ticket(self, sync_service, actor, db, seed):
        response = _sync(sync_service, actor, tickets=[create_item("local-1", seed["speeding"].id)])
        return Ticket.get_by_id(db, int(response.results.tickets[0].server_id))

    def _update(self, ticket, timestamp, notes="driver returned with licence", **data):
        return {"id": "edit-1", "action": "update", "timestamp": timestamp,
                "data": dict({"id": ticket.id, "notes": notes}, **data)}

    def test_newer_device_edit_is_applied(self, sync_service, actor, db, ticket):
        before = ticket.updated_at
        response = _sync(sync_service, actor, tickets=[self._update(ticket, _future())])

        result = response.results.tickets[0]
        assert result.status == enum.ItemStatus.SUCCESS
        assert result.server_id == str(ticket.id)
        notes = db.query(TicketNote).filter(TicketNote.ticket_id == ticket.id).all()
        assert [note.content for note in notes] == ["driver returned with licence"]
        assert notes[0].user_id == actor.user_id
        assert notes[0].officer_id == actor.officer_id
        assert Ticket.get_by_id(db, ticket.id).updated_at > before

    def test_older_device_edit_conflicts(self, sync_service, actor, db, ticket):
        stale = (ticket.updated_at - timedelta(minutes=5)).isoformat()
        response = _sync(sync_service, actor, tickets=[self._update(ticket, stale)])

        result = response.results.tickets[0]
        assert result.status == enum.ItemStatus.CONFLICT
        assert result.error == "server version is newer; server-wins conflict resolution applied"
        assert db.query(TicketNote).count() == 0

    def test_same_instant_conflicts(self, sync_service, actor, db, ticket):
        response = _sync(sync_service, actor, tickets=[self._update(ticket, ticket.updated_at.isoformat())])

        assert response.results.tickets[0].status == enum.ItemStatus.CONFLICT

    def test_status_in_update_is_ignored(self, sync_service, actor, db, ticket):
        response = _sync(sync_service, actor,
                         tickets=[self._update(ticket, _future(), notes=None, status="paid")])

        assert response.results.tickets[0].status == enum.ItemStatus.SUCCESS
        assert Ticket.get_by_id(db, ticket.id).status == enum.TicketStatus.UNPAID.value

    def test_unknown_ticket(self, sync_service, actor, ticket):
        item = self._update(ticket, _future())
        item["data"]["id"] = ticket.id + 100
        result = _sync(sync_service, actor, tickets=[item]).results.tickets[0]

        assert result.status == enum.ItemStatus.ERROR
        assert result.error == "ticket not found"

    def test_update_without_server_id(self, sync_service, actor, ticket):
        item = self._update(ticket, _future())
        del item["data"]["id"]
        result = _sync(sync_service, actor, tickets=[item]).results.tickets[0]

        assert result.status == enum.ItemStatus.ERROR
        assert result.error == "server ticket ID required for updates"


class TestPhotos:

    @pytest.fixture
    def ticket_id(self, sync_service, actor, seed):
        response = _sync(sync_service, actor, tickets=[create_item("local-1", seed["speeding"].id)])
        return response.results.tickets[0].server_id

    def test_photo_for_existing_ticket(self, sync_service, actor, ticket_id):
        result = _sync(sync_service, actor, photos=[photo_item(ticket_id, data=PNG_B64, photo_type="plate")]) \
            .results.photos[0]

        assert result.status == enum.ItemStatus.SUCCESS
        assert result.local_id == "photo-1"
        assert result.url.endswith("_sync.png")

    def test_data_url_prefix_is_accepted(self, sync_service, actor, ticket_id):
        result = _sync(sync_service, actor,
                       photos=[photo_item(ticket_id, data=f"data:image/png;base64,{PNG_B64}")]).results.photos[0]

        assert result.status == enum.ItemStatus.SUCCESS

    @pytest.mark.parametrize("overrides, message", [
        ({"photo_type": "selfie"}, "invalid photo type 'selfie'"),
        ({"data": "***not-base64***"}, "invalid photo data"),
        ({"data": ""}, "photo data is empty"),
    ])
    def test_rejected_photo(self, sync_service, actor, db, ticket_id, overrides, message):
        result = _sync(sync_service, actor, photos=[photo_item(ticket_id, **overrides)]).results.photos[0]

        assert result.status == enum.ItemStatus.ERROR
        assert result.error.startswith(message)
        assert db.query(TicketPhoto).count() == 0

    def test_unknown_ticket_reference(self, sync_service, actor, ticket_id):
        results = _sync(sync_service, actor,
                        photos=[photo_item("local-never-sent", photo_id="p1"),
                                photo_item(str(int(ticket_id) + 50), photo_id="p2")]).results.photos

        assert [result.status for result in results] == [enum.ItemStatus.ERROR, enum.ItemStatus.ERROR]
        assert results[1].error == "ticket not found"

    def test_photo_over_size_limit(self, db, storage, sync_settings, actor, ticket_id):
        service = SyncService(db, OffenceLookup(db), JurisdictionLookup(db), storage,
                              DeviceCheckpointService(db),
                              sync_settings.model_copy(update={"SYNC_MAX_PHOTO_BYTES": 16}))
        result = _sync(service, actor, photos=[photo_item(ticket_id)]).results.photos[0]

        assert result.status == enum.ItemStatus.ERROR
        assert result.error == "photo exceeds maximum size of 16 bytes"

    def test_failed_record_removes_stored_file(self, sync_service, actor, storage, ticket_id):
        with patch.object(TicketPhoto, "create", side_effect=OperationalError("INSERT", {}, Exception("disk"))):
            result = _sync(sync_service, actor, photos=[photo_item(ticket_id)]).results.photos[0]

        assert result.status == enum.ItemStatus.ERROR
        assert result.error.startswith("save photo record")
        ticket_dir = os.path.join(storage.base_path, "tickets", ticket_id)
        assert not os.listdir(ticket_dir)


class TestServerUpdatesAndCheckpoint:

    def test_server_updates_since_last_sync(self, sync_service, actor, db, seed):
        created = _sync(sync_service, actor, tickets=[create_item("local-1", seed["speeding"].id),
                                                       create_item("local-2", seed["parking"].id)])
        cancelled = Ticket.get_by_id(db, int(created.results.tickets[1].server_id))
        cancelled.status = enum.TicketStatus.CANCELLED.value
        cancelled.void_reason = "duplicate"
        db.commit()

        response = _sync(sync_service, actor, last_sync="2020-01-01T00:00:00Z")
        updates = {update.id: update for update in response.server_updates.tickets}

        assert updates[created.results.tickets[0].server_id].action == enum.ServerUpdateAction.UPDATE
        deleted = updates[str(cancelled.id)]
        assert deleted.action == enum.ServerUpdateAction.DELETE
        assert deleted.data["status"] == "cancelled"
        assert deleted.data["voidReason"] == "duplicate"
        assert "paidAt" not in deleted.data

    def test_server_updates_are_scoped_to_station(self, sync_service, actor, db, seed):
        db.add(Ticket(ticket_number="TKT-2026-GA-900001", vehicle_reg_number="AS-77-21", officer_id=99,
                      station_id=seed["other_station"].id, region_id=seed["region"].id,
                      issued_at=DateTimeUtils.utc_now()))
        db.commit()

        response = _sync(sync_service, actor, last_sync="2020-01-01T00:00:00Z")

        assert response.server_updates.tickets == []

    def test_server_updates_are_capped(self, db, storage, sync_settings, actor, seed):
        service = SyncService(db, OffenceLookup(db), JurisdictionLookup(db), storage,
                              DeviceCheckpointService(db),
                              sync_settings.model_copy(update={"SYNC_SERVER_UPDATES_LIMIT": 2}))
        _sync(service, actor, tickets=[create_item(f"local-{n}", seed["parking"].id) for n in range(3)])

        response = _sync(service, actor, last_sync="2020-01-01T00:00:00Z")

        assert len(response.server_updates.tickets) == 2
        assert [update.id for update in response.server_updates.tickets] == ["1", "2"]

    def test_checkpoint_is_recorded(self, sync_service, actor, db, seed):
        response = _sync(sync_service, actor,
                         tickets=[create_item("local-1", seed["speeding"].id)],
                         photos=[photo_item("local-1")])
        _sync(sync_service, actor, tickets=[create_item("local-2", seed["speeding"].id)])

        record = DeviceSync.get(db, actor.user_id, "device-A")
        assert record.items_synced == 3
        assert record.last_sync_timestamp >= response.sync_timestamp

    def test_checkpoint_failure_does_not_fail_batch(self, sync_service, actor, db, seed):
        with patch.object(DeviceSync, "upsert", side_effect=OperationalError("UPSERT", {}, Exception("locked"))):
            response = _sync(sync_service, actor, tickets=[create_item("local-1", seed["speeding"].id)])

        assert response.results.tickets[0].status == enum.ItemStatus.SUCCESS
        assert db.query(DeviceSync).count() == 0
