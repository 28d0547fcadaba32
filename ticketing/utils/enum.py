from enum import Enum


class TicketStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    OVERDUE = "overdue"
    OBJECTION = "objection"
    CANCELLED = "cancelled"


class SyncStatus(str, Enum):
    SYNCED = "synced"


class ItemStatus(str, Enum):
    SUCCESS = "success"
    CONFLICT = "conflict"
    ERROR = "error"


class ServerUpdateAction(str, Enum):
    UPDATE = "update"
    DELETE = "delete"


class PhotoType(str, Enum):
    VEHICLE = "vehicle"
    PLATE = "plate"
    EVIDENCE = "evidence"
    OTHER = "other"


class ErrorCode(str, Enum):
    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL_ERROR"


# Statuses not listed here are terminal.
STATUS_TRANSITIONS = {
    TicketStatus.UNPAID: (TicketStatus.PAID, TicketStatus.OVERDUE,
                          TicketStatus.OBJECTION, TicketStatus.CANCELLED),
    TicketStatus.OVERDUE: (TicketStatus.PAID, TicketStatus.OBJECTION, TicketStatus.CANCELLED),
    TicketStatus.OBJECTION: (TicketStatus.UNPAID, TicketStatus.CANCELLED),
}


def can_transition(from_status, to_status) -> bool:
    try:
        current = TicketStatus(from_status)
        target = TicketStatus(to_status)
    except ValueError:
        return False
    return target in STATUS_TRANSITIONS.get(current, ())
