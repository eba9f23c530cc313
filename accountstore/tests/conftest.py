"""Fixtures providing an in-memory document store."""

from unittest import mock

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from ..connection import Connection, ConnectionState
from ..store import AccountStore


@pytest_asyncio.fixture
async def connection():
    """A :class:`.Connection` backed by mongomock, with indexes bound."""
    _connection = Connection(AsyncMongoMockClient(), 'accounts')
    await _connection.bind()
    _connection.state = ConnectionState.CONNECTED
    return _connection


@pytest.fixture
def store(connection):
    """An :class:`.AccountStore` using a cheap bcrypt work factor."""
    return AccountStore(connection, hash_rounds=4)


@pytest.fixture
def mock_connection():
    """A connected :class:`.Connection` whose collection is a mock."""
    _connection = Connection(mock.MagicMock(), 'accounts')
    _connection.users = mock.MagicMock()
    _connection.users.find_one = mock.AsyncMock(return_value=None)
    _connection.users.insert_one = mock.AsyncMock()
    _connection.users.find_one_and_update = mock.AsyncMock()
    _connection.state = ConnectionState.CONNECTED
    return _connection


@pytest_asyncio.fixture
async def user_id(store):
    """ID of a freshly registered user, ``jdoe`` with password Secret123."""
    await store.register_user('jdoe', 'jdoe@example.com', 'Secret123',
                              'Secret123')
    user = await store.check_user('jdoe', 'Secret123')
    return user.user_id
