from sqlalchemy import (Column,
                        String,
                        Integer,
                        Float,
                        ForeignKey,
                        )
from sqlalchemy.orm import relationship
from ticketing.models.base_class import Base


class TicketOffence(Base):
    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_id = Column(Integer, ForeignKey("ticket.id", ondelete="CASCADE"), nullable=False, index=True)
    offence_id = Column(Integer, ForeignKey("offence.id"), nullable=False)
    fine_amount = Column(Float, nullable=False)
    notes = Column(String, nullable=True)

    ticket = relationship("Ticket", back_populates="offences")
