"""Account store configuration, read from the environment."""

import os

from . import domain

#################### Document store ####################
MONGO_URL = os.environ.get('MONGO_URL', 'mongodb://localhost:27017')
"""Connection string for the MongoDB deployment holding user documents."""

MONGO_DATABASE = os.environ.get('MONGO_DATABASE', 'accounts')
"""Database to use when ``MONGO_URL`` does not name one."""

MONGO_COLLECTION = os.environ.get('MONGO_COLLECTION', 'users')

MONGO_SERVER_SELECTION_TIMEOUT_MS = int(
    os.environ.get('MONGO_SERVER_SELECTION_TIMEOUT_MS', '5000')
)
"""How long the client waits for a usable server before giving up."""

#################### Accounts ####################
PASSWORD_HASH_ROUNDS = int(os.environ.get('PASSWORD_HASH_ROUNDS', '10'))
"""bcrypt work factor (log2 of the number of rounds)."""

MAX_LIST_SIZE = int(
    os.environ.get('MAX_LIST_SIZE', str(domain.MAX_LIST_SIZE))
)
"""Capacity of the ``favourites`` and ``history`` lists."""

LEGACY_HISTORY_CAPACITY = bool(
    int(os.environ.get('ACCOUNTS_LEGACY_HISTORY_CAPACITY', '1'))
)
"""Gate history additions on the length of ``favourites``.

This is the deployed behaviour and is kept by default, although it is likely
a defect. Set to ``0`` to gate history additions on the length of
``history`` instead.
"""

#################### Logging ####################
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
