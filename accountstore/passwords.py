"""bcrypt password hashing."""

import asyncio
import logging

import bcrypt

logger = logging.getLogger(__name__)

ROUNDS = 10

MAX_PASSWORD_BYTES = 72
"""bcrypt only considers the first 72 bytes of a password."""


def _encode(password: str) -> bytes:
    return password.encode('utf-8')[:MAX_PASSWORD_BYTES]


def _hash(password: str, rounds: int) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds)) \
        .decode('ascii')


def _check(password: str, encrypted: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), encrypted.encode('ascii'))
    except (ValueError, UnicodeEncodeError) as e:
        logger.warning('Stored password hash is malformed: %s', e)
        return False


async def hash_password(password: str, rounds: int = ROUNDS) -> str:
    """
    Generate a salted bcrypt hash of a password.

    Hashing runs in a worker thread so that the event loop is not blocked.

    Parameters
    ----------
    password : str
    rounds : int
        bcrypt work factor (default: 10).

    Returns
    -------
    str
        The hash, in modular crypt format (``$2b$10$...``).

    """
    return await asyncio.to_thread(_hash, password, rounds)


async def check_password(password: str, encrypted: str) -> bool:
    """Check a password against a hash produced by :func:`hash_password`."""
    return await asyncio.to_thread(_check, password, encrypted)
