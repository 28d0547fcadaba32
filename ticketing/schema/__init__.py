from .actor_schema import ActorContext
from .sync_schema import (CamelSchema, SyncRequest, OffenceInput, TicketCreateData, TicketUpdateData,
                          CreateTicketItem, UpdateTicketItem, TicketItem, ticket_item_adapter, SyncPhotoItem,
                          SyncTicketResult, SyncPhotoResult, ServerTicketUpdate, SyncResults, ServerUpdates,
                          SyncResponse, SyncStatusResponse)
