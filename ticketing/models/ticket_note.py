from sqlalchemy import (Column,
                        String,
                        Integer,
                        ForeignKey,
                        )
from sqlalchemy.orm import relationship
from ticketing.models.base_class import Base


class TicketNote(Base):
    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_id = Column(Integer, ForeignKey("ticket.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, nullable=False)
    officer_id = Column(Integer, nullable=True)
    content = Column(String, nullable=False)

    ticket = relationship("Ticket", back_populates="notes_list")
