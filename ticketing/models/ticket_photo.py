from sqlalchemy import (Column,
                        String,
                        Integer,
                        Boolean,
                        ForeignKey,
                        )
from sqlalchemy.orm import Session
from ticketing.models.base_class import Base


class TicketPhoto(Base):
    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_id = Column(Integer, ForeignKey("ticket.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)
    storage_path = Column(String, nullable=False)
    thumbnail_path = Column(String, nullable=True)
    mime_type = Column(String, nullable=False, default="image/jpeg")
    file_size = Column(Integer, nullable=False)
    uploaded = Column(Boolean, nullable=False, default=True)

    @classmethod
    def create(cls, db: Session, ticket_id: int, photo_type: str, storage_path: str,
               mime_type: str, file_size: int):
        photo = cls(ticket_id=ticket_id,
                    type=photo_type,
                    storage_path=storage_path,
                    thumbnail_path=storage_path,
                    mime_type=mime_type,
                    file_size=file_size,
                    uploaded=True)
        db.add(photo)
        db.commit()
        db.refresh(photo)
        return photo

    @classmethod
    def get_by_ticket(cls, db: Session, ticket_id: int):
        return db.query(cls).filter(cls.ticket_id == ticket_id).all()
