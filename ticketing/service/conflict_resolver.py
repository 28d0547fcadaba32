import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ticketing.exception_handler.exceptions import ValidationFailed, NotFoundError, InternalError
from ticketing.models.ticket import Ticket
from ticketing.schema import ActorContext, UpdateTicketItem, SyncTicketResult
from ticketing.utils import enum
from ticketing.utils.common import blank_to_none

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "server version is newer; server-wins conflict resolution applied"


class ConflictResolver:
    """
    Applies device edits to existing tickets under a server-wins policy.

    Only notes are synchronised this way. Status changes, voids and payments go
    through their own endpoints and are ignored here.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def is_conflict(server_updated_at: datetime, device_changed_at: datetime) -> bool:
        return server_updated_at >= device_changed_at

    def apply(self, item: UpdateTicketItem, actor: ActorContext) -> SyncTicketResult:
        ticket_id = item.data.id
        if ticket_id is None:
            raise ValidationFailed("server ticket ID required for updates")

        ticket = Ticket.get_by_id(self.db, ticket_id)
        if ticket is None:
            raise NotFoundError("ticket")

        if self.is_conflict(ticket.updated_at, item.timestamp):
            logger.info(f"Ticket item {item.local_id}: conflict on ticket {ticket_id} "
                        f"(server {ticket.updated_at.isoformat()} >= device {item.timestamp.isoformat()})")
            return SyncTicketResult(local_id=item.local_id,
                                    server_id=str(ticket_id),
                                    status=enum.ItemStatus.CONFLICT,
                                    error=CONFLICT_MESSAGE)

        if item.data.status is not None:
            logger.warning(f"Ticket item {item.local_id}: ignoring status '{item.data.status}' for ticket "
                           f"{ticket_id}; status changes are not applied through sync")

        notes = blank_to_none(item.data.notes)
        if notes:
            try:
                Ticket.append_note(self.db, ticket, actor.user_id, actor.officer_id, notes)
            except SQLAlchemyError as e:
                raise InternalError(f"append note: {str(e)}")

        return SyncTicketResult(local_id=item.local_id,
                                server_id=str(ticket_id),
                                status=enum.ItemStatus.SUCCESS)
