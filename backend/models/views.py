"""Response projections, serialized in camelCase"""

import datetime

from pydantic import Field

from .auth import User
from .common import CamelModel
from .relationship import Relationship, RelationshipStatus


class UserRef(CamelModel):
    id: str
    display_name: str
    avatar_url: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserRef":
        return cls(id=user.id, display_name=user.name, avatar_url=user.picture)


class SocialMedia(CamelModel):
    platform: str = Field(min_length=1, max_length=40)
    url: str = Field(min_length=1, max_length=512)


class UserProfile(UserRef):
    username: str | None = None
    join_date: datetime.datetime | None = None
    social_medias: list[SocialMedia] = []


class RelationshipOut(CamelModel):
    id: str
    # Bare id when the user could not be resolved
    requester: UserRef | str
    recipient: UserRef | str
    status: RelationshipStatus
    blocked_by: str | None = None
    mutual_block: bool = False
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @classmethod
    def build(
        cls, relationship: Relationship, users: dict[str, User]
    ) -> "RelationshipOut":
        def ref(user_id: str) -> UserRef | str:
            user = users.get(user_id)
            return UserRef.from_user(user) if user else user_id

        return cls(
            id=relationship.id,
            requester=ref(relationship.requester_id),
            recipient=ref(relationship.recipient_id),
            status=relationship.status,
            blocked_by=relationship.blocked_by_id,
            mutual_block=relationship.mutual_block,
            created_at=relationship.created_at,
            updated_at=relationship.updated_at,
        )


class CounterpartOut(CamelModel):
    """A relationship seen from one of its parties: only the other side is shown."""

    relationship_id: str
    other: UserRef | str
    status: RelationshipStatus
    since: datetime.datetime


class PendingOut(CamelModel):
    incoming: list[CounterpartOut]
    outgoing: list[CounterpartOut]
