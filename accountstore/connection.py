"""
Connection to the document store holding user records.

A :class:`.Connection` is created once at process start (see
:func:`connect`) and handed to the :class:`.store.AccountStore`. It owns the
async PyMongo client and the ``users`` collection, and tracks whether the
deployment is currently usable so that a connection lost after startup is
reported to callers as :class:`.ConnectionFailed`.
"""

from enum import Enum
from typing import Any, Optional
import logging

from pymongo import ASCENDING, AsyncMongoClient, monitoring
from pymongo.errors import PyMongoError

from . import config
from .exceptions import ConnectionFailed

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Lifecycle of a :class:`.Connection`."""

    UNCONNECTED = 'unconnected'
    CONNECTED = 'connected'
    FAULTED = 'faulted'
    CLOSED = 'closed'


class Connection(object):
    """
    Manages a connection to MongoDB.

    The async client is safe to share between coroutines; this class is a
    container for the client, the user collection, and the connection state.
    """

    def __init__(self, client: Any, database: str,
                 collection: str = config.MONGO_COLLECTION) -> None:
        self.client = client
        self.db = client[database]
        self.users = self.db[collection]
        self.state = ConnectionState.UNCONNECTED
        self.fault: Optional[str] = None

    async def open(self) -> None:
        """
        Confirm that the server is reachable and bind the user collection.

        Raises
        ------
        :class:`.ConnectionFailed`
            Raised if the server cannot be reached or the indexes cannot be
            created.

        """
        try:
            await self.client.admin.command('ping')
        except PyMongoError as e:
            logger.error('Could not reach document store: %s', e)
            raise ConnectionFailed(f'Connection failed: {e}') from e
        await self.bind()
        self.state = ConnectionState.CONNECTED
        self.fault = None
        logger.debug('Connected to %s.%s', self.db.name, self.users.name)

    async def bind(self) -> None:
        """Create the unique indexes that the user records rely on."""
        try:
            await self.users.create_index([('email', ASCENDING)],
                                          unique=True)
            await self.users.create_index([('userName', ASCENDING)],
                                          unique=True)
        except PyMongoError as e:
            logger.error('Could not create user indexes: %s', e)
            raise ConnectionFailed(f'Failed to bind users: {e}') from e

    def mark_faulted(self, reason: str) -> None:
        """Record that the deployment is no longer usable."""
        if self.state is ConnectionState.CONNECTED:
            logger.error('Lost connection to document store: %s', reason)
            self.state = ConnectionState.FAULTED
            self.fault = reason

    def mark_recovered(self) -> None:
        """Record that the deployment is usable again."""
        if self.state is ConnectionState.FAULTED:
            logger.info('Connection to document store restored')
            self.state = ConnectionState.CONNECTED
            self.fault = None

    def check(self) -> None:
        """
        Ensure that the connection may be used.

        Raises
        ------
        :class:`.ConnectionFailed`
            Raised if the connection was never opened, has faulted, or has
            been closed.

        """
        if self.state is ConnectionState.CONNECTED:
            return
        if self.state is ConnectionState.FAULTED:
            raise ConnectionFailed(f'Connection lost: {self.fault}',
                                   state=self.state.value)
        raise ConnectionFailed(f'Connection is {self.state.value}',
                               state=self.state.value)

    async def close(self) -> None:
        """Close the client."""
        await self.client.close()
        self.state = ConnectionState.CLOSED


class TopologyMonitor(monitoring.TopologyListener):
    """
    Keeps a :class:`.Connection` informed about the deployment topology.

    PyMongo publishes topology events from its monitor threads. When no
    writable server remains the connection is marked faulted; it recovers as
    soon as one is discovered again.
    """

    def __init__(self) -> None:
        self.connection: Optional[Connection] = None

    def opened(self, event: monitoring.TopologyOpenedEvent) -> None:
        logger.debug('Topology %s opened', event.topology_id)

    def description_changed(
            self, event: monitoring.TopologyDescriptionChangedEvent) -> None:
        if self.connection is None:
            return
        if event.new_description.has_writable_server():
            self.connection.mark_recovered()
        else:
            self.connection.mark_faulted('No writable server available')

    def closed(self, event: monitoring.TopologyClosedEvent) -> None:
        logger.debug('Topology %s closed', event.topology_id)


async def connect(url: str = config.MONGO_URL,
                  database: Optional[str] = None,
                  collection: str = config.MONGO_COLLECTION,
                  timeout_ms: int = config.MONGO_SERVER_SELECTION_TIMEOUT_MS) \
        -> Connection:
    """
    Establish a connection to the document store.

    Parameters
    ----------
    url : str
        MongoDB connection string.
    database : str
        Database name. If not set, the database named in ``url`` is used,
        falling back to ``MONGO_DATABASE``.
    collection : str
        Name of the user collection.
    timeout_ms : int
        Server selection timeout, in milliseconds.

    Returns
    -------
    :class:`.Connection`

    Raises
    ------
    :class:`.ConnectionFailed`
        Raised if the client cannot be created or the server does not
        confirm the connection.

    """
    monitor = TopologyMonitor()
    try:
        client = AsyncMongoClient(url, serverSelectionTimeoutMS=timeout_ms,
                                  event_listeners=[monitor])
        if database is None:
            database = client.get_default_database(
                default=config.MONGO_DATABASE
            ).name
    except PyMongoError as e:
        raise ConnectionFailed(f'Invalid connection target: {e}') from e
    connection = Connection(client, database, collection)
    try:
        await connection.open()
    except ConnectionFailed:
        await client.close()
        raise
    monitor.connection = connection
    return connection
