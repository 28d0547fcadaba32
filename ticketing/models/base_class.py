from datetime import datetime
from typing import Any
from sqlalchemy.ext.declarative import as_declarative, declared_attr
from sqlalchemy import Column, DateTime

from ticketing.utils.common import DateTimeUtils


def utc_now() -> datetime:
    """Naive UTC ``datetime``; every timestamp column stores naive UTC."""
    return DateTimeUtils.utc_now()


@as_declarative()
class Base:
    id: Any
    __name__: str

    @declared_attr
    def __tablename__(cls) -> str:
        snake_case_name = "".join(
            ["_" + c.lower() if c.isupper() else c for c in cls.__name__]
        ).strip("_")
        return snake_case_name

    @declared_attr
    def created_at(cls):
        return Column(DateTime, default=utc_now, nullable=False)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
