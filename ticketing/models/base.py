# Import all the models, so that Base has them before being
# imported by Alembic
from ticketing.models.base_class import Base
from ticketing.models.hierarchy import Region, Division, District, Station
from ticketing.models.offence import Offence
from ticketing.models.ticket import Ticket
from ticketing.models.ticket_offence import TicketOffence
from ticketing.models.ticket_note import TicketNote
from ticketing.models.ticket_photo import TicketPhoto
from ticketing.models.ticket_counter import TicketCounter
from ticketing.models.device_sync import DeviceSync
