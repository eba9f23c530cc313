"""
User account store.

This package registers users, authenticates their credentials, and keeps two
short lists per user: ``favourites`` and ``history``. User records live in a
MongoDB collection; passwords are stored as bcrypt hashes.

Quick start
-----------

.. code-block:: python

   import asyncio
   from accountstore import create_account_store, exceptions


   async def main() -> None:
       store = await create_account_store('mongodb://localhost:27017/app')
       await store.register_user('jdoe', 'jdoe@example.com', 'pw', 'pw')
       user = await store.check_user('jdoe', 'pw')
       await store.add_favourite(user.user_id, 'item-42')

   asyncio.run(main())

All failures are raised as subclasses of
:class:`.exceptions.AccountStoreError`.
"""

from .domain import User, MAX_LIST_SIZE
from .connection import Connection, ConnectionState, connect
from .store import AccountStore
from .factory import create_account_store
