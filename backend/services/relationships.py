import logging
import re

from models.auth import User
from models.relationship import Relationship, RelationshipStatus
from models.views import CounterpartOut, PendingOut, RelationshipOut, UserRef
from services.errors import (
    Conflict,
    Forbidden,
    InvalidArgument,
    InvalidState,
    NotFound,
    Unavailable,
)
from services.relationship_store import RelationshipStore
from services.users import UserDirectory

logger = logging.getLogger("mingle.relationships")

USER_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
RELATIONSHIP_ID_RE = re.compile(r"^[0-9a-f]{32}$")
MAX_QUERY_LENGTH = 100
CREATE_ATTEMPTS = 3


def check_user_id(value: str | None, field: str = "user id") -> str:
    if not value or not isinstance(value, str):
        raise InvalidArgument(f"Missing {field}.")
    if not USER_ID_RE.match(value):
        raise InvalidArgument(f"Malformed {field}.")
    return value


def check_relationship_id(value: str | None) -> str:
    if not value or not RELATIONSHIP_ID_RE.match(value):
        raise InvalidArgument("Invalid relationship id.")
    return value


class RelationshipService:
    """Transition policy, authorization and presentation over the store.

    Every mutating call performs exactly one write against the store. The
    existence lookup before a create is only a shortcut: when two creates for
    the same pair race, the store's unique constraint rejects the loser, which
    then reads back and returns the winner's row.
    """

    def __init__(
        self,
        store: RelationshipStore,
        users: UserDirectory,
        *,
        search_limit: int = 20,
    ):
        self.store = store
        self.users = users
        self.search_limit = search_limit

    # Writes

    def create(self, actor: User, recipient_id: str | None) -> tuple[Relationship, bool]:
        """Request a relationship with ``recipient_id``.

        Returns the relationship and whether it was created by this call; an
        existing record for the pair, in either orientation, is returned as is.
        """
        recipient_id = check_user_id(recipient_id, "recipient")
        if recipient_id == actor.id:
            raise InvalidArgument("Cannot create a relationship with yourself.")
        if not self.users.exists(recipient_id):
            raise NotFound("User not found")

        for attempt in range(1, CREATE_ATTEMPTS + 1):
            try:
                return self.store.find_by_pair(actor.id, recipient_id), False
            except NotFound:
                pass
            try:
                relationship = self.store.create(actor.id, recipient_id)
            except Conflict:
                logger.info(
                    f"Lost the create race for {actor.id}/{recipient_id}, "
                    f"reading back (attempt {attempt})"
                )
                continue
            logger.debug(f"{actor.id} requested {recipient_id}: {relationship.id}")
            return relationship, True

        raise Unavailable("Could not settle the relationship, try again later.")

    def accept(self, actor: User, relationship_id: str) -> Relationship:
        return self._respond(actor, relationship_id, RelationshipStatus.accepted)

    def reject(self, actor: User, relationship_id: str) -> Relationship:
        return self._respond(actor, relationship_id, RelationshipStatus.rejected)

    def _respond(
        self, actor: User, relationship_id: str, status: RelationshipStatus
    ) -> Relationship:
        relationship = self.store.find_by_id(check_relationship_id(relationship_id))
        if actor.id != relationship.recipient_id:
            raise Forbidden("Only the recipient can answer a request.")
        if relationship.status != RelationshipStatus.pending:
            verb = "accept" if status == RelationshipStatus.accepted else "reject"
            raise InvalidState(
                f"Cannot {verb} a relationship that is {relationship.status.value}."
            )
        logger.debug(f"{actor.id} {status.value} relationship {relationship.id}")
        return self.store.update_status(relationship.id, status)

    def block(self, actor: User, relationship_id: str) -> Relationship:
        relationship = self.store.find_by_id(check_relationship_id(relationship_id))
        if not relationship.involves(actor.id):
            raise Forbidden("Only a party of the relationship can block.")
        if relationship.status == RelationshipStatus.blocked:
            if relationship.mutual_block or relationship.blocked_by_id == actor.id:
                return relationship
            # The first blocker stays recorded
            logger.debug(f"{actor.id} blocked relationship {relationship.id} back")
            return self.store.update_status(
                relationship.id,
                RelationshipStatus.blocked,
                blocked_by_id=relationship.blocked_by_id,
                mutual_block=True,
            )
        logger.debug(f"{actor.id} blocked relationship {relationship.id}")
        return self.store.update_status(
            relationship.id, RelationshipStatus.blocked, blocked_by_id=actor.id
        )

    def update_status(
        self, actor: User, relationship_id: str, status: RelationshipStatus | str
    ) -> Relationship:
        try:
            status = RelationshipStatus(status)
        except ValueError:
            raise InvalidArgument(f"Unknown status: {status}") from None

        match status:
            case RelationshipStatus.accepted:
                return self.accept(actor, relationship_id)
            case RelationshipStatus.rejected:
                return self.reject(actor, relationship_id)
            case RelationshipStatus.blocked:
                return self.block(actor, relationship_id)
            case _:
                raise InvalidArgument(
                    "Status must be one of accepted, rejected or blocked."
                )

    def delete(self, actor: User, relationship_id: str) -> None:
        relationship = self.store.find_by_id(check_relationship_id(relationship_id))
        if not (actor.is_admin or relationship.involves(actor.id)):
            raise Forbidden("Only a party of the relationship can delete it.")
        self.store.delete(relationship.id)

    def unfriend(self, actor: User, other_id: str) -> None:
        other_id = check_user_id(other_id)
        if other_id == actor.id:
            raise InvalidArgument("Cannot unfriend yourself.")
        relationship = self.store.find_by_pair(actor.id, other_id)
        self.store.delete(relationship.id)

    # Reads

    def get(self, actor: User, relationship_id: str) -> Relationship:
        relationship = self.store.find_by_id(check_relationship_id(relationship_id))
        if not (actor.is_admin or relationship.involves(actor.id)):
            raise Forbidden("Not allowed to view this relationship.")
        return relationship

    def present(self, relationship: Relationship) -> RelationshipOut:
        users = self.users.get_many(
            (relationship.requester_id, relationship.recipient_id)
        )
        return RelationshipOut.build(relationship, users)

    def status_with(self, actor: User, other_id: str) -> str:
        other_id = check_user_id(other_id)
        if other_id == actor.id:
            return "self"
        try:
            relationship = self.store.find_by_pair(actor.id, other_id)
        except NotFound:
            return "none"

        match relationship.status:
            case RelationshipStatus.accepted:
                return "friends"
            case RelationshipStatus.pending:
                if relationship.requester_id == actor.id:
                    return "pending_outgoing"
                return "pending_incoming"
            case status:
                return status.value

    def list_friends(
        self, actor: User, user_id: str | None = None
    ) -> list[CounterpartOut]:
        user_id = actor.id if user_id is None else check_user_id(user_id)
        if user_id != actor.id:
            if not self.users.exists(user_id) or self.is_hidden_from(actor, user_id):
                raise NotFound("User not found")
        rows = self.store.find_all_involving(user_id, RelationshipStatus.accepted)
        return self._counterparts(user_id, rows)

    def list_pending(self, actor: User) -> PendingOut:
        rows = self.store.find_all_involving(actor.id, RelationshipStatus.pending)
        incoming = [r for r in rows if r.recipient_id == actor.id]
        outgoing = [r for r in rows if r.requester_id == actor.id]
        return PendingOut(
            incoming=self._counterparts(actor.id, incoming),
            outgoing=self._counterparts(actor.id, outgoing),
        )

    def list_blocked(self, actor: User) -> list[CounterpartOut]:
        rows = self.store.find_all_involving(actor.id, RelationshipStatus.blocked)
        return self._counterparts(actor.id, rows)

    def _counterparts(
        self, user_id: str, rows: list[Relationship]
    ) -> list[CounterpartOut]:
        rows = sorted(rows, key=lambda r: r.updated_at, reverse=True)
        others = self.users.get_many(r.other_party(user_id) for r in rows)
        result = []
        for r in rows:
            other_id = r.other_party(user_id)
            other = others.get(other_id)
            result.append(
                CounterpartOut(
                    relationship_id=r.id,
                    other=UserRef.from_user(other) if other else other_id,
                    status=r.status,
                    since=r.updated_at,
                )
            )
        return result

    # Discovery

    def is_hidden_from(self, viewer: User, user_id: str) -> bool:
        """True when ``user_id`` blocked ``viewer``"""
        try:
            relationship = self.store.find_by_pair(viewer.id, user_id)
        except NotFound:
            return False
        if relationship.status != RelationshipStatus.blocked:
            return False
        return relationship.mutual_block or relationship.blocked_by_id == user_id

    def get_profile(self, viewer: User, user_id: str) -> User:
        user_id = check_user_id(user_id)
        user = self.users.get(user_id)
        if not user or (user_id != viewer.id and self.is_hidden_from(viewer, user_id)):
            raise NotFound("User not found")
        return user

    def search_users(
        self, actor: User, query: str | None, limit: int | None = None
    ) -> list[User]:
        query = (query or "").strip()
        if not query:
            raise InvalidArgument("Missing search query.")
        if len(query) > MAX_QUERY_LENGTH:
            raise InvalidArgument("Search query too long.")
        if limit is None:
            limit = self.search_limit
        limit = min(max(limit, 1), self.search_limit)

        related = {
            r.other_party(actor.id) for r in self.store.find_all_involving(actor.id)
        }
        return self.users.search(query, exclude=related | {actor.id}, limit=limit)
