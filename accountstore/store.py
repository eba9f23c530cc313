"""
Provides the account store: registration, authentication, and user lists.

Every operation awaits at most two round trips to the document store. The
store holds no state of its own beyond the :class:`.Connection` it was given.

Adding to a list reads the user and then conditionally updates it. The two
steps are not isolated from one another, so concurrent additions to a list
that is nearly full may take it slightly past the maximum size.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Type
import logging

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from . import passwords
from .connection import Connection
from .domain import MAX_LIST_SIZE, User
from .exceptions import AccountStoreError, ConnectionFailed, \
    EmailAlreadyRegistered, ListFull, NoSuchUser, PasswordMismatch, \
    PasswordAuthenticationFailed, RegistrationFailed, UpdateFailed, \
    UsernameTaken

logger = logging.getLogger(__name__)


@contextmanager
def _translate(exc_type: Type[AccountStoreError], message: str,
               level: int = logging.DEBUG,
               **context: Any) -> Generator[None, None, None]:
    """Raise driver errors as account store exceptions."""
    try:
        yield
    except ConnectionFailure as e:
        raise ConnectionFailed(f'Connection failed: {e}', **context) from e
    except PyMongoError as e:
        logger.log(level, '%s: %s', message, e,
                   exc_info=level >= logging.ERROR)
        raise exc_type(message, **context) from e


def _duplicate_field(error: DuplicateKeyError) -> str:
    """Name the unique field that a duplicate-key error was raised for."""
    details = error.details or {}
    key = details.get('keyPattern') or details.get('keyValue') or {}
    if 'email' in key:
        return 'email'
    return 'userName'


def _object_id(user_id: str, exc_type: Type[AccountStoreError],
               message: str) -> ObjectId:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError) as e:
        logger.debug('Malformed user id: %r', user_id)
        raise exc_type(message, user_id=user_id) from e


class AccountStore(object):
    """
    Registers and authenticates users, and maintains their lists.

    Parameters
    ----------
    connection : :class:`.Connection`
        An open connection to the document store.
    max_list_size : int
        Capacity of ``favourites`` and of ``history``.
    hash_rounds : int
        bcrypt work factor used when registering users.
    legacy_history_capacity : bool
        If ``True`` (the default), additions to ``history`` are gated on the
        length of ``favourites``, as deployed clients expect. This is likely
        a defect; pass ``False`` to gate ``history`` on its own length.

    """

    def __init__(self, connection: Connection,
                 max_list_size: int = MAX_LIST_SIZE,
                 hash_rounds: int = passwords.ROUNDS,
                 legacy_history_capacity: bool = True) -> None:
        self._connection = connection
        self.max_list_size = max_list_size
        self.hash_rounds = hash_rounds
        self.legacy_history_capacity = legacy_history_capacity

    @property
    def _users(self) -> Any:
        self._connection.check()
        return self._connection.users

    async def register_user(self, username: str, email: str, password: str,
                            password2: str) -> str:
        """
        Create a new user.

        Parameters
        ----------
        username : str
        email : str
        password : str
            Password for the account, in plaintext.
        password2 : str
            Confirmation of ``password``.

        Returns
        -------
        str
            A message naming the registered user.

        Raises
        ------
        :class:`.PasswordMismatch`
            ``password`` and ``password2`` differ. The store is not touched.
        :class:`.EmailAlreadyRegistered`
        :class:`.UsernameTaken`
        :class:`.RegistrationFailed`
            Any other failure to create the user.

        """
        if password != password2:
            raise PasswordMismatch('Passwords do not match',
                                   username=username)

        message = 'There was an error creating the user'
        with _translate(RegistrationFailed, message, logging.ERROR,
                        email=email):
            existing = await self._users.find_one({'email': email})
        if existing is not None:
            logger.debug('Email already registered: %s', email)
            raise EmailAlreadyRegistered('Email already registered',
                                         email=email)

        password_hash = await passwords.hash_password(password,
                                                      self.hash_rounds)
        try:
            await self._users.insert_one({
                'userName': username,
                'email': email,
                'password': password_hash,
                'favourites': [],
                'history': [],
            })
        except DuplicateKeyError as e:
            if _duplicate_field(e) == 'email':
                raise EmailAlreadyRegistered('Email already registered',
                                             email=email) from e
            raise UsernameTaken('User Name already taken',
                                username=username) from e
        except ConnectionFailure as e:
            raise ConnectionFailed(f'Connection failed: {e}',
                                   username=username) from e
        except PyMongoError as e:
            logger.error('Failed to create user %s: %s', username, e,
                         exc_info=True)
            raise RegistrationFailed(f'{message}: {e}',
                                     username=username) from e

        logger.info('User %s has been added to the database.', username)
        return f'User {username} successfully registered'

    async def check_user(self, username: str, password: str) -> User:
        """
        Authenticate a user with their username and password.

        Raises
        ------
        :class:`.NoSuchUser`
            There is no user with ``username``, or the lookup failed.
        :class:`.PasswordAuthenticationFailed`
            The password is not correct.

        """
        message = f'Unable to find user {username}'
        with _translate(NoSuchUser, message, username=username):
            doc = await self._users.find_one({'userName': username})
        if doc is None:
            logger.debug('No such user: %s', username)
            raise NoSuchUser(message, username=username)

        if not await passwords.check_password(password, doc['password']):
            raise PasswordAuthenticationFailed(
                f'Incorrect password for user {username}',
                username=username
            )
        return User.from_document(doc)

    async def get_user(self, user_id: str) -> User:
        """Load a user by ID."""
        message = f'Unable to find user with id: {user_id}'
        doc = await self._get(user_id, message)
        return User.from_document(doc)

    async def get_username(self, user_id: str) -> str:
        """Get the username of the user with ``user_id``."""
        message = f'Unable to find user with id: {user_id}'
        doc = await self._get(user_id, message, projection={'userName': 1})
        username: str = doc['userName']
        return username

    async def get_favourites(self, user_id: str) -> List[str]:
        """Get the favourites of the user with ``user_id``."""
        return await self._get_list(user_id, 'favourites')

    async def get_history(self, user_id: str) -> List[str]:
        """Get the history of the user with ``user_id``."""
        return await self._get_list(user_id, 'history')

    async def add_favourite(self, user_id: str, fav_id: str) -> List[str]:
        """
        Add ``fav_id`` to the user's favourites, if not already present.

        Returns
        -------
        list
            The favourites after the update.

        Raises
        ------
        :class:`.ListFull`
            The user already has the maximum number of favourites.
        :class:`.UpdateFailed`
            The user does not exist, or the update failed.

        """
        return await self._add(user_id, 'favourites', fav_id, 'favourites')

    async def add_history(self, user_id: str, history_id: str) -> List[str]:
        """
        Add ``history_id`` to the user's history, if not already present.

        Unless the store was created with ``legacy_history_capacity=False``,
        the addition is rejected with :class:`.ListFull` when the user's
        *favourites* are full, whatever the length of the history.
        """
        gate = 'favourites' if self.legacy_history_capacity else 'history'
        return await self._add(user_id, 'history', history_id, gate)

    async def remove_favourite(self, user_id: str, fav_id: str) -> List[str]:
        """Remove ``fav_id`` from the user's favourites."""
        return await self._remove(user_id, 'favourites', fav_id)

    async def remove_history(self, user_id: str,
                             history_id: str) -> List[str]:
        """Remove ``history_id`` from the user's history."""
        return await self._remove(user_id, 'history', history_id)

    async def username_exists(self, username: str) -> bool:
        """
        Determine whether a user with a particular username exists.

        A failed lookup raises :class:`.AccountStoreError` rather than
        reporting that the user is absent.
        """
        with _translate(AccountStoreError,
                        f'Unable to check username {username}',
                        username=username):
            doc = await self._users.find_one({'userName': username},
                                             projection={'_id': 1})
        return doc is not None

    async def email_exists(self, email: str) -> bool:
        """Determine whether a user with a particular address exists."""
        with _translate(AccountStoreError, f'Unable to check email {email}',
                        email=email):
            doc = await self._users.find_one({'email': email},
                                             projection={'_id': 1})
        return doc is not None

    async def is_available(self) -> bool:
        """Check our connection to the document store."""
        try:
            self._connection.check()
            await self._connection.client.admin.command('ping')
        except (ConnectionFailed, PyMongoError) as e:
            logger.error('Encountered an error talking to the store: %s', e)
            return False
        return True

    async def _get(self, user_id: str, message: str,
                   projection: Optional[Dict[str, int]] = None) \
            -> Dict[str, Any]:
        oid = _object_id(user_id, NoSuchUser, message)
        with _translate(NoSuchUser, message, user_id=user_id):
            doc = await self._users.find_one({'_id': oid},
                                             projection=projection)
        if doc is None:
            raise NoSuchUser(message, user_id=user_id)
        result: Dict[str, Any] = doc
        return result

    async def _get_list(self, user_id: str, field: str) -> List[str]:
        doc = await self._get(user_id,
                              f'Unable to get {field} for user with id: '
                              f'{user_id}',
                              projection={field: 1})
        return list(doc.get(field) or [])

    async def _add(self, user_id: str, field: str, value: str,
                   gate: str) -> List[str]:
        message = f'Unable to update {field} for user with id: {user_id}'
        oid = _object_id(user_id, UpdateFailed, message)
        with _translate(UpdateFailed, message, user_id=user_id, field=field):
            doc = await self._users.find_one({'_id': oid})
        if doc is None:
            raise UpdateFailed(message, user_id=user_id, field=field)

        if len(doc.get(gate) or []) >= self.max_list_size:
            logger.debug('%s of user %s is full', gate, user_id)
            raise ListFull(message, user_id=user_id, field=field,
                           size=self.max_list_size)
        return await self._update(oid, field, {'$addToSet': {field: value}},
                                  message)

    async def _remove(self, user_id: str, field: str,
                      value: str) -> List[str]:
        message = f'Unable to update {field} for user with id: {user_id}'
        oid = _object_id(user_id, UpdateFailed, message)
        return await self._update(oid, field, {'$pull': {field: value}},
                                  message)

    async def _update(self, oid: ObjectId, field: str,
                      update: Dict[str, Any], message: str) -> List[str]:
        user_id = str(oid)
        with _translate(UpdateFailed, message, user_id=user_id, field=field):
            doc = await self._users.find_one_and_update(
                {'_id': oid}, update, return_document=ReturnDocument.AFTER
            )
        if doc is None:
            raise UpdateFailed(message, user_id=user_id, field=field)
        return list(doc.get(field) or [])
