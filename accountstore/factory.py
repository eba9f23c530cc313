"""Wires configuration, the store connection, and the account store."""

from typing import Optional

from . import config
from .connection import connect
from .store import AccountStore


async def create_account_store(url: Optional[str] = None,
                               database: Optional[str] = None) \
        -> AccountStore:
    """
    Connect to the document store and build an :class:`.AccountStore`.

    Call this once at process start and share the result. Values not passed
    explicitly are taken from :mod:`accountstore.config`.
    """
    connection = await connect(
        url or config.MONGO_URL,
        database,
        collection=config.MONGO_COLLECTION,
        timeout_ms=config.MONGO_SERVER_SELECTION_TIMEOUT_MS
    )
    return AccountStore(
        connection,
        max_list_size=config.MAX_LIST_SIZE,
        hash_rounds=config.PASSWORD_HASH_ROUNDS,
        legacy_history_capacity=config.LEGACY_HISTORY_CAPACITY
    )
