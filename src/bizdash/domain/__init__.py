"""Domain layer for bizdash application."""

from bizdash.domain.store import DeletePolicy, EntityCollection, EntryStore
from bizdash.domain.schedule import BusinessHoursService

__all__ = [
    "DeletePolicy",
    "EntityCollection",
    "EntryStore",
    "BusinessHoursService",
]
