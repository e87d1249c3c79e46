from .errors import (
    Conflict,
    Forbidden,
    InvalidArgument,
    InvalidState,
    NotFound,
    RelationshipError,
    Unavailable,
)
from .relationship_store import RelationshipStore
from .relationships import RelationshipService
from .users import UserDirectory

__all__ = [
    "Conflict",
    "Forbidden",
    "InvalidArgument",
    "InvalidState",
    "NotFound",
    "RelationshipError",
    "RelationshipService",
    "RelationshipStore",
    "Unavailable",
    "UserDirectory",
]
