import logging
from datetime import timedelta
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ticketing.exception_handler.exceptions import ValidationFailed, InternalError
from ticketing.models.ticket import Ticket
from ticketing.models.ticket_counter import TicketCounter
from ticketing.models.ticket_offence import TicketOffence
from ticketing.schema import ActorContext, CreateTicketItem, OffenceInput, SyncTicketResult
from ticketing.service.lookups import OffenceLookup, JurisdictionLookup
from ticketing.utils import enum
from ticketing.utils.common import DateTimeUtils, blank_to_none

logger = logging.getLogger(__name__)


class TicketIngestion:
    """Turns a device-submitted create item into a durable ticket."""

    def __init__(self,
                 db: Session,
                 offence_lookup: OffenceLookup,
                 jurisdiction_lookup: JurisdictionLookup,
                 payment_grace_days: int = 14,
                 ticket_prefix: str = "TKT",
                 payment_prefix: str = "PAY"):
        self.db = db
        self.offence_lookup = offence_lookup
        self.jurisdiction_lookup = jurisdiction_lookup
        self.payment_grace_days = payment_grace_days
        self.ticket_prefix = ticket_prefix
        self.payment_prefix = payment_prefix

    def create(self, item: CreateTicketItem, actor: ActorContext) -> SyncTicketResult:
        data = item.data

        if data.client_created_id:
            existing_id = Ticket.get_id_by_client_created_id(self.db, data.client_created_id)
            if existing_id is not None:
                logger.info(f"Ticket item {item.local_id}: clientCreatedId {data.client_created_id} "
                            f"already synced as ticket {existing_id}")
                return self._success(item, existing_id)

        if not actor.has_officer_context:
            raise ValidationFailed("officer context required (officerId, stationId, regionId)")

        region_code = self.jurisdiction_lookup.get_region_code(actor.region_id)
        station = self.jurisdiction_lookup.get_station(actor.station_id)
        offence_lines, total_fine = self.resolve_offences(data.offences)

        try:
            ticket_number, payment_reference = self.next_ticket_number(region_code)
        except SQLAlchemyError as e:
            raise InternalError(f"generate ticket number: {str(e)}")

        issued_at = data.issued_at or item.timestamp
        due_date = issued_at + timedelta(days=self.payment_grace_days)

        ticket = Ticket(
            ticket_number=ticket_number,
            status=enum.TicketStatus.UNPAID.value,
            vehicle_reg_number=data.vehicle_registration,
            vehicle_type=data.vehicle_type,
            vehicle_color=data.vehicle_color,
            vehicle_make=data.vehicle_make,
            vehicle_model=data.vehicle_model,
            driver_name=data.driver_name,
            driver_license=data.driver_license,
            driver_phone=data.driver_phone,
            driver_address=data.driver_address,
            location_description=blank_to_none(data.location),
            location_latitude=data.location_latitude,
            location_longitude=data.location_longitude,
            total_fine=total_fine,
            payment_reference=payment_reference,
            payment_deadline=due_date,
            officer_id=actor.officer_id,
            station_id=station.station_id,
            district_id=station.district_id,
            division_id=station.division_id,
            region_id=actor.region_id,
            notes=data.notes,
            sync_status=enum.SyncStatus.SYNCED.value,
            client_created_id=data.client_created_id,
            issued_at=issued_at,
            due_date=due_date,
        )

        try:
            Ticket.create_with_offences(self.db, ticket, offence_lines)
        except IntegrityError as e:
            # a concurrent submission of the same clientCreatedId won the insert
            if data.client_created_id:
                existing_id = Ticket.get_id_by_client_created_id(self.db, data.client_created_id)
                if existing_id is not None:
                    logger.info(f"Ticket item {item.local_id}: lost insert race for clientCreatedId "
                                f"{data.client_created_id}, using ticket {existing_id}")
                    return self._success(item, existing_id)
            raise InternalError(f"create ticket: {str(e.orig)}")
        except SQLAlchemyError as e:
            raise InternalError(f"create ticket: {str(e)}")

        logger.info(f"Ticket item {item.local_id}: created ticket {ticket.id} ({ticket.ticket_number}), "
                    f"{len(offence_lines)} offence(s), total {total_fine:.2f}")
        return self._success(item, ticket.id)

    def resolve_offences(self, offences: List[OffenceInput]) -> Tuple[List[TicketOffence], float]:
        offence_lines = []
        total_fine = 0.0

        for offence_input in offences:
            offence = self.offence_lookup.get_fine(offence_input.id)
            fine = offence.charge(offence_input.custom_fine)
            offence_lines.append(TicketOffence(offence_id=offence.offence_id,
                                               fine_amount=fine,
                                               notes=offence_input.notes))
            total_fine += fine

        return offence_lines, total_fine

    def next_ticket_number(self, region_code: str) -> Tuple[str, str]:
        year = DateTimeUtils.utc_now().year
        sequence = TicketCounter.next_value(self.db, year, region_code)
        ticket_number = f"{self.ticket_prefix}-{year}-{region_code}-{sequence:06d}"
        payment_reference = f"{self.payment_prefix}-{year}-{region_code}-{sequence:06d}"
        return ticket_number, payment_reference

    @staticmethod
    def _success(item: CreateTicketItem, ticket_id: int) -> SyncTicketResult:
        return SyncTicketResult(local_id=item.local_id,
                                server_id=str(ticket_id),
                                status=enum.ItemStatus.SUCCESS)
