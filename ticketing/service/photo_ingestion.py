import logging
import uuid
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ticketing.exception_handler.exceptions import ValidationFailed, NotFoundError, InternalError
from ticketing.models.ticket import Ticket
from ticketing.models.ticket_photo import TicketPhoto
from ticketing.schema import SyncPhotoItem, SyncPhotoResult
from ticketing.service.storage_service import LocalStorage
from ticketing.utils import enum
from ticketing.utils.image_utils import ImageUtils

logger = logging.getLogger(__name__)


class PhotoIngestion:

    def __init__(self, db: Session, storage: LocalStorage, max_photo_bytes: int):
        self.db = db
        self.storage = storage
        self.max_photo_bytes = max_photo_bytes

    def resolve_ticket_id(self, ticket_ref: str, local_to_server: Dict[str, int]) -> int:
        """
        Maps the photo's ticket reference to a server ticket id.

        A reference matching a ticket created earlier in the same batch wins over
        reading it as a server id.
        """
        if ticket_ref in local_to_server:
            return local_to_server[ticket_ref]

        try:
            ticket_id = int(ticket_ref)
        except (TypeError, ValueError):
            raise ValidationFailed(f"unknown ticket reference {ticket_ref}")

        if Ticket.get_by_id(self.db, ticket_id) is None:
            raise NotFoundError("ticket")
        return ticket_id

    def ingest(self, item: SyncPhotoItem, local_to_server: Dict[str, int]) -> SyncPhotoResult:
        try:
            photo_type = enum.PhotoType(item.type)
        except ValueError:
            raise ValidationFailed(f"invalid photo type '{item.type}'")

        content = ImageUtils.decode_base64_image(item.data)
        if len(content) > self.max_photo_bytes:
            raise ValidationFailed(f"photo exceeds maximum size of {self.max_photo_bytes} bytes")

        ticket_id = self.resolve_ticket_id(item.ticket_id, local_to_server)

        mime_type, extension = ImageUtils.detect_image_type(content)
        filename = f"{uuid.uuid4().hex[:8]}_sync.{extension}"
        try:
            storage_path = self.storage.save_file(content, f"tickets/{ticket_id}", filename)
        except OSError as e:
            raise InternalError(f"store photo: {str(e)}")

        try:
            photo = TicketPhoto.create(self.db, ticket_id, photo_type.value, storage_path,
                                       mime_type, len(content))
        except SQLAlchemyError as e:
            self.db.rollback()
            self.storage.delete_file(storage_path)
            raise InternalError(f"save photo record: {str(e)}")

        logger.info(f"Photo {item.photo_id}: stored {len(content)} bytes for ticket {ticket_id} "
                    f"as photo {photo.id}")
        return SyncPhotoResult(local_id=item.photo_id,
                               server_id=str(photo.id),
                               status=enum.ItemStatus.SUCCESS,
                               url=self.storage.file_url(storage_path))
