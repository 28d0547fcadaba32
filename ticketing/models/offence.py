from sqlalchemy import (Column,
                        String,
                        Integer,
                        Float,
                        Boolean,
                        )
from sqlalchemy.orm import Session
from ticketing.models.base_class import Base


class Offence(Base):
    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, nullable=False, default="other")
    default_fine = Column(Float, nullable=False)
    min_fine = Column(Float, nullable=False)
    max_fine = Column(Float, nullable=False)
    points = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    @classmethod
    def get_active_by_id(cls, db: Session, offence_id: int):
        return db.query(cls).filter(cls.id == offence_id, cls.is_active.is_(True)).first()
