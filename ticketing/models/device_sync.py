from datetime import datetime

from sqlalchemy import (Column,
                        String,
                        Integer,
                        DateTime,
                        UniqueConstraint,
                        )
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ticketing.models.base_class import Base


class DeviceSync(Base):
    __table_args__ = (UniqueConstraint("user_id", "device_id", name="uq_device_sync_user_device"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    device_id = Column(String, nullable=False)
    last_sync_timestamp = Column(DateTime, nullable=False)
    items_synced = Column(Integer, nullable=False, default=0)

    @classmethod
    def get(cls, db: Session, user_id: int, device_id: str):
        return db.query(cls).filter(cls.user_id == user_id, cls.device_id == device_id).first()

    @classmethod
    def _advance(cls, record: "DeviceSync", sync_timestamp: datetime, items_synced: int):
        if record.last_sync_timestamp is None or sync_timestamp > record.last_sync_timestamp:
            record.last_sync_timestamp = sync_timestamp
        record.items_synced = (record.items_synced or 0) + items_synced

    @classmethod
    def upsert(cls, db: Session, user_id: int, device_id: str, sync_timestamp: datetime, items_synced: int):
        try:
            record = cls.get(db, user_id, device_id)
            if record is None:
                try:
                    with db.begin_nested():
                        record = cls(user_id=user_id,
                                     device_id=device_id,
                                     last_sync_timestamp=sync_timestamp,
                                     items_synced=items_synced)
                        db.add(record)
                    db.commit()
                    return record
                except IntegrityError:
                    # first sync from two requests at once; fall through to an update
                    record = cls.get(db, user_id, device_id)
            cls._advance(record, sync_timestamp, items_synced)
            db.add(record)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return record
