import datetime
import uuid
from enum import Enum

from sqlalchemy import CheckConstraint, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from .types import UtcAwareDateTime, utcnow

PAIR_SEPARATOR = ":"


class RelationshipStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    blocked = "blocked"


def new_relationship_id() -> str:
    return uuid.uuid4().hex


class Relationship(SQLModel, table=True):
    __tablename__ = "relationships"
    __table_args__ = (
        UniqueConstraint("pair_key", name="uq_relationship_pair"),
        CheckConstraint("requester_id <> recipient_id", name="ck_relationship_distinct"),
    )

    id: str = Field(default_factory=new_relationship_id, primary_key=True)

    # Who initiated is kept, but uniqueness is on the unordered pair
    requester_id: str = Field(foreign_key="users.id", index=True)
    recipient_id: str = Field(foreign_key="users.id", index=True)
    pair_key: str

    status: RelationshipStatus = Field(default=RelationshipStatus.pending, index=True)
    blocked_by_id: str | None = Field(default=None, foreign_key="users.id")
    # Both parties blocked; blocked_by_id keeps the first one
    mutual_block: bool = False

    created_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )
    updated_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )

    @staticmethod
    def canonical_pair(a: str, b: str) -> tuple[str, str]:
        return (a, b) if a < b else (b, a)

    @classmethod
    def make_pair_key(cls, a: str, b: str) -> str:
        """Order-independent key for the pair.

        >>> Relationship.make_pair_key("bob", "alice")
        'alice:bob'
        >>> Relationship.make_pair_key("alice", "bob")
        'alice:bob'
        """
        return PAIR_SEPARATOR.join(cls.canonical_pair(a, b))

    @classmethod
    def between(cls, requester_id: str, recipient_id: str) -> "Relationship":
        """Build a new pending relationship, the only place pair_key is computed."""
        if requester_id == recipient_id:
            raise ValueError("A relationship needs two distinct users.")
        return cls(
            requester_id=requester_id,
            recipient_id=recipient_id,
            pair_key=cls.make_pair_key(requester_id, recipient_id),
            status=RelationshipStatus.pending,
        )

    def involves(self, user_id: str) -> bool:
        return user_id in (self.requester_id, self.recipient_id)

    def other_party(self, user_id: str) -> str:
        if user_id == self.requester_id:
            return self.recipient_id
        if user_id == self.recipient_id:
            return self.requester_id
        raise ValueError(f"{user_id} is not part of relationship {self.id}")
