from sqlalchemy import (Column,
                        String,
                        Integer,
                        Boolean,
                        ForeignKey,
                        )
from sqlalchemy.orm import Session
from ticketing.models.base_class import Base


class Region(Base):
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)

    @classmethod
    def get_by_id(cls, db: Session, region_id: int):
        return db.get(cls, region_id)


class Division(Base):
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=False)
    region_id = Column(Integer, ForeignKey("region.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class District(Base):
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=False)
    division_id = Column(Integer, ForeignKey("division.id"), nullable=False)
    region_id = Column(Integer, ForeignKey("region.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class Station(Base):
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=False)
    district_id = Column(Integer, ForeignKey("district.id"), nullable=False)
    division_id = Column(Integer, ForeignKey("division.id"), nullable=False)
    region_id = Column(Integer, ForeignKey("region.id"), nullable=False)
    address = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    @classmethod
    def get_by_id(cls, db: Session, station_id: int):
        return db.get(cls, station_id)
