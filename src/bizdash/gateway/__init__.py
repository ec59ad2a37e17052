"""Sync gateway layer for bizdash."""

from bizdash.gateway.base import SyncGateway
from bizdash.gateway.factories import create_sqlite_gateway

__all__ = ["SyncGateway", "create_sqlite_gateway"]
