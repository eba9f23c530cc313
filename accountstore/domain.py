"""Defines the user record handled by the account store."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

MAX_LIST_SIZE = 50
"""Maximum number of entries in ``favourites`` and in ``history``."""


class User(BaseModel):
    """A registered user."""

    user_id: str
    """Identifier assigned by the document store."""

    username: str
    """Unique username, stored as ``userName``."""

    email: str
    """Unique email address."""

    password: str = Field(repr=False)
    """bcrypt hash of the user's password. Never the plaintext."""

    favourites: List[str] = Field(default_factory=list)
    history: List[str] = Field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'User':
        """Build a :class:`.User` from a raw ``users`` document."""
        return cls(
            user_id=str(doc['_id']),
            username=doc['userName'],
            email=doc['email'],
            password=doc['password'],
            favourites=list(doc.get('favourites') or []),
            history=list(doc.get('history') or []),
        )
