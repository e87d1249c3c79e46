"""Models package for the Mingle backend"""

from .common import CamelModel, get_engine
from .auth import User
from .relationship import Relationship, RelationshipStatus
from .types import UtcAwareDateTime

__all__ = [
    "CamelModel",
    "Relationship",
    "RelationshipStatus",
    "User",
    "UtcAwareDateTime",
    "get_engine",
]
