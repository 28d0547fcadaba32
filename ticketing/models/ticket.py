from datetime import datetime
from typing import Optional, List

from sqlalchemy import (Column,
                        String,
                        Integer,
                        Float,
                        Boolean,
                        DateTime,
                        ForeignKey,
                        Index,
                        func,
                        )
from sqlalchemy.orm import Session, relationship
from ticketing.models.base_class import Base, utc_now
from ticketing.models.ticket_note import TicketNote
from ticketing.utils import enum


class Ticket(Base):
    __table_args__ = (Index("ix_ticket_updated_at", "updated_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_number = Column(String, nullable=False, unique=True)
    status = Column(String, nullable=False, default=enum.TicketStatus.UNPAID.value)

    vehicle_reg_number = Column(String, nullable=False, index=True)
    vehicle_type = Column(String, nullable=True)
    vehicle_color = Column(String, nullable=True)
    vehicle_make = Column(String, nullable=True)
    vehicle_model = Column(String, nullable=True)

    driver_name = Column(String, nullable=True)
    driver_license = Column(String, nullable=True)
    driver_phone = Column(String, nullable=True)
    driver_address = Column(String, nullable=True)

    location_description = Column(String, nullable=True)
    location_latitude = Column(Float, nullable=True)
    location_longitude = Column(Float, nullable=True)

    total_fine = Column(Float, nullable=False, default=0)
    payment_reference = Column(String, nullable=True, unique=True)
    payment_deadline = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    paid_amount = Column(Float, nullable=True)
    paid_method = Column(String, nullable=True)

    officer_id = Column(Integer, nullable=False)
    station_id = Column(Integer, ForeignKey("station.id"), nullable=False, index=True)
    district_id = Column(Integer, ForeignKey("district.id"), nullable=True)
    division_id = Column(Integer, ForeignKey("division.id"), nullable=True)
    region_id = Column(Integer, ForeignKey("region.id"), nullable=False, index=True)

    notes = Column(String, nullable=True)
    sync_status = Column(String, nullable=False, default=enum.SyncStatus.SYNCED.value)
    # Unique at the storage layer; the lookup in the sync path is only a fast path.
    client_created_id = Column(String, nullable=True, unique=True)

    printed = Column(Boolean, nullable=False, default=False)
    printed_at = Column(DateTime, nullable=True)
    voided_by = Column(Integer, nullable=True)
    voided_at = Column(DateTime, nullable=True)
    void_reason = Column(String, nullable=True)

    issued_at = Column(DateTime, nullable=False)
    due_date = Column(DateTime, nullable=True)

    offences = relationship("TicketOffence", back_populates="ticket", cascade="all, delete-orphan")
    notes_list = relationship("TicketNote", back_populates="ticket", cascade="all, delete-orphan",
                              order_by="TicketNote.id")

    def server_update_payload(self):
        data = {
            "status": self.status,
            "totalFine": self.total_fine,
            "updatedAt": self.updated_at,
        }
        optional_fields = {
            "paidAt": self.paid_at,
            "paidAmount": self.paid_amount,
            "paidMethod": self.paid_method,
            "voidedAt": self.voided_at,
            "voidReason": self.void_reason,
        }
        data.update({key: value for key, value in optional_fields.items() if value is not None})
        return data

    @classmethod
    def get_by_id(cls, db: Session, ticket_id: int):
        return db.get(cls, ticket_id, populate_existing=True)

    @classmethod
    def get_id_by_client_created_id(cls, db: Session, client_created_id: str) -> Optional[int]:
        return db.query(cls.id).filter(cls.client_created_id == client_created_id).scalar()

    @classmethod
    def create_with_offences(cls, db: Session, ticket: "Ticket", offences: List):
        """Writes the ticket and all of its offence lines in a single commit."""
        if not offences:
            raise ValueError("a ticket needs at least one offence line")
        ticket.offences = list(offences)
        try:
            db.add(ticket)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(ticket)
        return ticket

    @classmethod
    def append_note(cls, db: Session, ticket: "Ticket", user_id: int, officer_id: Optional[int], content: str):
        note = TicketNote(ticket_id=ticket.id, user_id=user_id, officer_id=officer_id, content=content)
        try:
            db.add(note)
            ticket.updated_at = utc_now()
            db.add(ticket)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(note)
        return note

    @classmethod
    def _jurisdiction_query(cls, db: Session, since: Optional[datetime],
                            station_id: Optional[int], region_id: Optional[int]):
        query = db.query(cls)
        if since is not None:
            query = query.filter(cls.updated_at > since)
        if station_id is not None:
            query = query.filter(cls.station_id == station_id)
        if region_id is not None:
            query = query.filter(cls.region_id == region_id)
        return query

    @classmethod
    def get_updated_since(cls, db: Session, since: Optional[datetime], station_id: Optional[int],
                          region_id: Optional[int], limit: int):
        query = cls._jurisdiction_query(db, since, station_id, region_id)
        return query.order_by(cls.updated_at.asc(), cls.id.asc()).limit(limit).all()

    @classmethod
    def count_updated_since(cls, db: Session, since: Optional[datetime], station_id: Optional[int],
                            region_id: Optional[int]) -> int:
        query = cls._jurisdiction_query(db, since, station_id, region_id)
        return query.with_entities(func.count(cls.id)).scalar() or 0
