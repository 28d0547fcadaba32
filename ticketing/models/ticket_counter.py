from sqlalchemy import (Column,
                        String,
                        Integer,
                        UniqueConstraint,
                        )
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ticketing.models.base_class import Base


class TicketCounter(Base):
    __table_args__ = (UniqueConstraint("year", "region_code", name="uq_ticket_counter_year_region"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    year = Column(Integer, nullable=False)
    region_code = Column(String, nullable=False)
    value = Column(Integer, nullable=False, default=0)

    @classmethod
    def _locked_row(cls, db: Session, year: int, region_code: str):
        return (db.query(cls)
                .filter(cls.year == year, cls.region_code == region_code)
                .with_for_update()
                .first())

    @classmethod
    def next_value(cls, db: Session, year: int, region_code: str) -> int:
        """
        Increments the (year, region) counter in its own short transaction and
        returns the new value. Values are never reused; a later failure leaves a gap.
        """
        try:
            counter = cls._locked_row(db, year, region_code)
            if counter is None:
                try:
                    with db.begin_nested():
                        counter = cls(year=year, region_code=region_code, value=0)
                        db.add(counter)
                except IntegrityError:
                    # another request created the row first
                    counter = cls._locked_row(db, year, region_code)
            counter.value = counter.value + 1
            value = counter.value
            db.commit()
        except Exception:
            db.rollback()
            raise
        return value
