"""Shared pytest fixtures for bizdash tests."""

import asyncio
import os
import tempfile
from datetime import datetime

import pytest
from dateutil import tz

from bizdash.domain.errors import RemoteError
from bizdash.domain.schedule import BusinessHoursService
from bizdash.domain.store import EntryStore
from bizdash.gateway.factories import create_sqlite_gateway

OWNER = "owner-a"
OTHER_OWNER = "owner-b"


def run(coroutine):
    """Run a store coroutine to completion."""
    return asyncio.run(coroutine)


@pytest.fixture
def temp_gateway():
    """Create a gateway on a temporary SQLite database."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    gateway = create_sqlite_gateway(database_path=db_path)
    # Store the path for CLI tests that need it
    gateway.database_path = db_path
    gateway.connect()

    yield gateway

    gateway.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def store(temp_gateway):
    """Create an EntryStore over the temporary gateway."""
    return EntryStore(temp_gateway)


@pytest.fixture
def hours_service(temp_gateway):
    return BusinessHoursService(temp_gateway)


@pytest.fixture
def sample_people(store):
    """A client and a professional for OWNER, returned as (client, professional)."""
    client = run(store.clients.add(OWNER, {"name": "Ana Silva"}))
    professional = run(store.professionals.add(OWNER, {"name": "Marta"}))
    return client, professional


@pytest.fixture
def book(store, sample_people):
    """Factory booking an appointment for the sample client and professional."""
    client, professional = sample_people

    def _book(service="Haircut", price="25,00", at=None, confirmed=False):
        payload = {
            "client_id": client.id,
            "service": service,
            "price": price,
            "professional_id": professional.id,
            "scheduled_at": at or datetime(2024, 3, 1, 10, 0, tzinfo=tz.UTC),
            "is_confirmed": confirmed,
        }
        return run(store.appointments.add(OWNER, payload))

    return _book


class FlakyGateway:
    """Wraps a gateway and fails selected operations with RemoteError."""

    def __init__(self, gateway, fail_on=()):
        self.gateway = gateway
        self.fail_on = set(fail_on)
        self.calls = []

    def connect(self):
        self.gateway.connect()

    def disconnect(self):
        self.gateway.disconnect()

    async def _call(self, name, *args, **kwargs):
        self.calls.append(name)
        if name in self.fail_on:
            raise RemoteError(f"{name} failed: connection reset")
        return await getattr(self.gateway, name)(*args, **kwargs)

    async def select(self, *args, **kwargs):
        return await self._call("select", *args, **kwargs)

    async def insert(self, *args, **kwargs):
        return await self._call("insert", *args, **kwargs)

    async def update(self, *args, **kwargs):
        return await self._call("update", *args, **kwargs)

    async def delete(self, *args, **kwargs):
        return await self._call("delete", *args, **kwargs)


@pytest.fixture
def flaky_gateway(temp_gateway):
    return FlakyGateway(temp_gateway)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def invoke(cli_runner, temp_gateway, monkeypatch):
    """Invoke the CLI against the temporary database as OWNER, in UTC."""
    from bizdash.cli.main import cli

    for name in (
        "BIZDASH_OWNER",
        "BIZDASH_TIMEZONE",
        "BIZDASH_LOW_STOCK_THRESHOLD",
        "BIZDASH_CURRENCY_SYMBOL",
        "BIZDASH_DECIMAL_SEPARATOR",
        "BIZDASH_GROUP_SEPARATOR",
        "BIZDASH_SYMBOL_FIRST",
    ):
        monkeypatch.delenv(name, raising=False)

    def _invoke(*args, owner=OWNER, input=None):
        base = ["--db-path", temp_gateway.database_path]
        if owner is not None:
            base += ["--owner", owner]
        return cli_runner.invoke(cli, [*base, *args], input=input)

    return _invoke
