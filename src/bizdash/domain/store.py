"""Entry store: in-memory, owner-scoped snapshots of every entity collection.

Each ``EntityCollection`` holds the last known state of one collection and is
the only writer of it. Mutations go through the sync gateway first and the
snapshot is patched with the server's response (no refetch). Snapshots are
replaced in a single assignment between suspension points, so a synchronous
metrics call never observes a half-applied change.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

from bizdash.domain import records, validation
from bizdash.domain.entities import (
    Appointment,
    BusinessException,
    Client,
    FinancialEntry,
    Product,
    Professional,
)
from bizdash.domain.errors import (
    NotFoundError,
    RemoteError,
    ValidationError,
    missing_owner,
    owner_mismatch,
    record_not_found,
)
from bizdash.domain.money import DEFAULT_FORMAT, CurrencyFormat
from bizdash.gateway import base as gateway_base
from bizdash.gateway.base import SyncGateway

logger = logging.getLogger(__name__)

E = TypeVar("E")


class DeletePolicy(Enum):
    """How a collection applies a remove to its snapshot."""

    # Drop the record only after the gateway acknowledges the delete
    PESSIMISTIC = "pessimistic"
    # Drop immediately and restore the exact record if the delete fails
    OPTIMISTIC = "optimistic"


@dataclass(frozen=True)
class CollectionSpec(Generic[E]):
    """Static description of one entity collection."""

    name: str
    parse: Callable[[dict], E]
    normalize: Callable[[Mapping[str, Any], CurrencyFormat], dict]
    patch: Callable[[E], dict]
    sort_key: Callable[[E], Any]
    order_by: str
    descending: bool = False


def _by_name(entity) -> tuple:
    return (entity.name.casefold(), entity.id)


CLIENTS = CollectionSpec(
    name=gateway_base.CLIENTS,
    parse=records.parse_client,
    normalize=validation.normalize_client,
    patch=validation.client_values,
    sort_key=_by_name,
    order_by="name",
)

PRODUCTS = CollectionSpec(
    name=gateway_base.PRODUCTS,
    parse=records.parse_product,
    normalize=validation.normalize_product,
    patch=validation.product_values,
    sort_key=_by_name,
    order_by="name",
)

PROFESSIONALS = CollectionSpec(
    name=gateway_base.PROFESSIONALS,
    parse=records.parse_professional,
    normalize=validation.normalize_professional,
    patch=validation.professional_values,
    sort_key=_by_name,
    order_by="name",
)

APPOINTMENTS = CollectionSpec(
    name=gateway_base.APPOINTMENTS,
    parse=records.parse_appointment,
    normalize=validation.normalize_appointment,
    patch=validation.appointment_values,
    sort_key=lambda appointment: (appointment.scheduled_at, appointment.id),
    order_by="scheduled_at",
)

FINANCIAL_ENTRIES = CollectionSpec(
    name=gateway_base.FINANCIAL_ENTRIES,
    parse=records.parse_financial_entry,
    normalize=validation.normalize_financial_entry,
    patch=validation.financial_entry_values,
    sort_key=lambda entry: (entry.entry_date, entry.id),
    order_by="entry_date",
    descending=True,
)

BUSINESS_EXCEPTIONS = CollectionSpec(
    name=gateway_base.BUSINESS_EXCEPTIONS,
    parse=records.parse_business_exception,
    normalize=validation.normalize_business_exception,
    patch=validation.business_exception_values,
    sort_key=lambda exception: (exception.exception_date, exception.id),
    order_by="exception_date",
)


def require_owner(owner_id: Optional[str]) -> str:
    if not owner_id:
        raise ValidationError(missing_owner())
    return owner_id


class EntityCollection(Generic[E]):
    """Owner-scoped snapshot of one collection, synchronized via the gateway."""

    def __init__(
        self,
        gateway: SyncGateway,
        spec: CollectionSpec[E],
        delete_policy: DeletePolicy = DeletePolicy.PESSIMISTIC,
        currency: CurrencyFormat = DEFAULT_FORMAT,
    ):
        self.gateway = gateway
        self.spec = spec
        self.delete_policy = delete_policy
        self.currency = currency
        self._items: list[E] = []
        self._owner_id: Optional[str] = None

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def owner_id(self) -> Optional[str]:
        return self._owner_id

    @property
    def items(self) -> tuple[E, ...]:
        """Current snapshot, in collection order."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(tuple(self._items))

    def get(self, entity_id: int) -> Optional[E]:
        """Get a record from the snapshot by ID."""
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def require(self, entity_id: int) -> E:
        """Get a record from the snapshot, raising NotFoundError if absent."""
        item = self.get(entity_id)
        if item is None:
            raise NotFoundError(record_not_found(self.name, entity_id))
        return item

    def _sorted(self, items: list[E]) -> list[E]:
        return sorted(items, key=self.spec.sort_key, reverse=self.spec.descending)

    def _parse_owned(self, record: dict, owner_id: str) -> E:
        entity = self.spec.parse(record)
        if entity.owner_id != owner_id:
            raise RemoteError(owner_mismatch(self.name, owner_id, entity.owner_id))
        return entity

    def _check_owner(self, owner_id: str) -> None:
        if self._owner_id is not None and self._owner_id != owner_id:
            raise ValidationError(owner_mismatch(self.name, self._owner_id, owner_id))

    async def fetch_all(self, owner_id: str) -> list[E]:
        """Replace the snapshot with the owner's records from the gateway.

        The last call to complete wins; there is no staleness check.
        """
        owner_id = require_owner(owner_id)
        fetched = await self.gateway.select(
            self.name,
            owner_id,
            order_by=self.spec.order_by,
            descending=self.spec.descending,
        )
        items = self._sorted([self._parse_owned(record, owner_id) for record in fetched])
        self._items = items
        self._owner_id = owner_id
        logger.debug("Loaded %d %s for owner %s", len(items), self.name, owner_id)
        return list(items)

    async def add(self, owner_id: str, payload: Mapping[str, Any]) -> E:
        """Validate, insert remotely, then add the server's record to the snapshot."""
        owner_id = require_owner(owner_id)
        self._check_owner(owner_id)
        values = self.spec.normalize(payload, self.currency)

        record = await self.gateway.insert(self.name, owner_id, values)
        entity = self._parse_owned(record, owner_id)

        self._items = self._sorted([*self._items, entity])
        self._owner_id = owner_id
        logger.info("Added %s %s", self.name, entity.id)
        return entity

    async def update(self, entity: E) -> E:
        """Validate an edited record, update it remotely and patch the snapshot."""
        current = self.require(entity.id)
        if entity.owner_id != current.owner_id:
            raise ValidationError(owner_mismatch(self.name, current.owner_id, entity.owner_id))
        patch = self.spec.patch(entity)

        record = await self.gateway.update(self.name, entity.owner_id, entity.id, patch)
        updated = self._parse_owned(record, entity.owner_id)

        # A concurrent remove may have dropped the record meanwhile
        if self.get(updated.id) is not None:
            self._items = self._sorted(
                [updated if item.id == updated.id else item for item in self._items]
            )
        logger.info("Updated %s %s", self.name, updated.id)
        return updated

    async def remove(self, entity_id: int) -> None:
        """Delete a record using this collection's delete policy."""
        current = self.require(entity_id)

        if self.delete_policy is DeletePolicy.PESSIMISTIC:
            await self.gateway.delete(self.name, current.owner_id, entity_id)
            self._items = [item for item in self._items if item.id != entity_id]
            logger.info("Removed %s %s", self.name, entity_id)
            return

        self._items = [item for item in self._items if item.id != entity_id]
        try:
            await self.gateway.delete(self.name, current.owner_id, entity_id)
        except RemoteError:
            if self.get(entity_id) is None:
                self._items = self._sorted([*self._items, current])
            logger.warning("Delete of %s %s failed, record restored", self.name, entity_id)
            raise
        logger.info("Removed %s %s", self.name, entity_id)

    def clear(self) -> None:
        """Forget the snapshot (e.g. when the owner signs out)."""
        self._items = []
        self._owner_id = None


class EntryStore:
    """All entity collections of one session, sharing one gateway.

    Products and financial entries delete optimistically, as their pages
    always have; the other collections wait for the gateway.
    """

    DEFAULT_DELETE_POLICIES = {
        gateway_base.PRODUCTS: DeletePolicy.OPTIMISTIC,
        gateway_base.FINANCIAL_ENTRIES: DeletePolicy.OPTIMISTIC,
    }

    def __init__(
        self,
        gateway: SyncGateway,
        currency: CurrencyFormat = DEFAULT_FORMAT,
        delete_policies: Optional[Mapping[str, DeletePolicy]] = None,
    ):
        self.gateway = gateway
        self.currency = currency
        policies = {**self.DEFAULT_DELETE_POLICIES, **(delete_policies or {})}

        def collection(spec: CollectionSpec) -> EntityCollection:
            policy = policies.get(spec.name, DeletePolicy.PESSIMISTIC)
            return EntityCollection(gateway, spec, delete_policy=policy, currency=currency)

        self.clients: EntityCollection[Client] = collection(CLIENTS)
        self.products: EntityCollection[Product] = collection(PRODUCTS)
        self.professionals: EntityCollection[Professional] = collection(PROFESSIONALS)
        self.appointments: EntityCollection[Appointment] = collection(APPOINTMENTS)
        self.financial_entries: EntityCollection[FinancialEntry] = collection(FINANCIAL_ENTRIES)
        self.business_exceptions: EntityCollection[BusinessException] = collection(
            BUSINESS_EXCEPTIONS
        )

    @property
    def collections(self) -> dict[str, EntityCollection]:
        return {
            c.name: c
            for c in (
                self.clients,
                self.products,
                self.professionals,
                self.appointments,
                self.financial_entries,
                self.business_exceptions,
            )
        }

    def collection(self, name: str) -> EntityCollection:
        try:
            return self.collections[name]
        except KeyError:
            raise ValidationError(f"Unknown collection '{name}'")

    async def fetch_all(self, owner_id: str, *names: str) -> dict[str, list]:
        """Fetch several collections concurrently (all of them by default)."""
        owner_id = require_owner(owner_id)
        targets = [self.collection(name) for name in names] or list(self.collections.values())
        results = await asyncio.gather(*(c.fetch_all(owner_id) for c in targets))
        return {c.name: result for c, result in zip(targets, results)}

    async def refresh(self, owner_id: Optional[str], *names: str) -> bool:
        """Like fetch_all, but a no-op while no owner is signed in.

        Returns:
            True if anything was fetched
        """
        if not owner_id:
            return False
        await self.fetch_all(owner_id, *names)
        return True

    def clear(self) -> None:
        for c in self.collections.values():
            c.clear()
