"""Abstract sync gateway interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

Record = dict[str, Any]

# Collection names understood by every gateway implementation
CLIENTS = "clients"
PRODUCTS = "products"
PROFESSIONALS = "professionals"
APPOINTMENTS = "appointments"
FINANCIAL_ENTRIES = "financial_entries"
BUSINESS_HOURS = "business_hours"
BUSINESS_EXCEPTIONS = "business_exceptions"

COLLECTIONS = (
    CLIENTS,
    PRODUCTS,
    PROFESSIONALS,
    APPOINTMENTS,
    FINANCIAL_ENTRIES,
    BUSINESS_HOURS,
    BUSINESS_EXCEPTIONS,
)


class SyncGateway(ABC):
    """Remote persistence service keyed by collection name.

    Every request is scoped to one owner; implementations must refuse an
    empty owner identifier and must never return or touch another owner's
    records. Any failure is raised as ``RemoteError``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Open the connection to the backing store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection to the backing store."""
        pass

    @abstractmethod
    async def select(
        self,
        collection: str,
        owner_id: str,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[Record]:
        """List the owner's records, optionally ordered by one column."""
        pass

    @abstractmethod
    async def insert(self, collection: str, owner_id: str, values: Record) -> Record:
        """Insert a record. Returns it with its generated ``id``."""
        pass

    @abstractmethod
    async def update(
        self, collection: str, owner_id: str, record_id: int, patch: Record
    ) -> Record:
        """Apply ``patch`` to one of the owner's records. Returns the new record."""
        pass

    @abstractmethod
    async def delete(self, collection: str, owner_id: str, record_id: int) -> None:
        """Delete one of the owner's records."""
        pass
