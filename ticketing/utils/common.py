import logging
import time
from datetime import datetime
from typing import Union, Optional

import pytz
from dateutil import parser

logger = logging.getLogger(__name__)


class DateTimeUtils:

    @staticmethod
    def utc_now() -> datetime:
        return datetime.now(pytz.UTC).replace(tzinfo=None)

    @staticmethod
    def to_naive_utc(value: datetime) -> datetime:
        # naive values are taken to already be UTC
        if value.tzinfo is None:
            return value
        return value.astimezone(pytz.UTC).replace(tzinfo=None)

    @staticmethod
    def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
        if value is None:
            return None
        if isinstance(value, datetime):
            return DateTimeUtils.to_naive_utc(value)
        if isinstance(value, str):
            if not value.strip():
                return None
            try:
                parsed = parser.isoparse(value)
            except (ValueError, OverflowError):
                try:
                    parsed = parser.parse(value)
                except (ValueError, OverflowError) as e:
                    # pydantic only reports ValueError as a validation error
                    raise ValueError(f"invalid timestamp {value!r}: {str(e)}")
            return DateTimeUtils.to_naive_utc(parsed)
        raise ValueError(f"unsupported timestamp value: {value!r}")


def calculate_time_difference(start_time):
    end_time = time.time()
    return end_time - start_time


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
