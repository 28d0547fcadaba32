from ticketing.models import base  # noqa: F401  registers every model on Base.metadata
