import logging

from sqlalchemy import or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import delete, select, update

from models.relationship import Relationship, RelationshipStatus
from models.types import utcnow
from services.db import session_scope
from services.errors import Conflict, InvalidArgument, NotFound

logger = logging.getLogger("mingle.relationships.store")


class RelationshipStore:
    """Keyed storage of Relationship rows.

    At most one row exists per unordered pair of users: the unique constraint
    on ``pair_key`` is enforced by the database, so a create that loses a race
    fails with Conflict even when no lookup saw the winner. Status changes are
    not validated here, the transition policy belongs to RelationshipService.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def create(self, requester_id: str, recipient_id: str) -> Relationship:
        try:
            relationship = Relationship.between(requester_id, recipient_id)
        except ValueError as e:
            raise InvalidArgument(str(e)) from e

        with session_scope(self.engine) as session:
            session.add(relationship)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                logger.debug(f"Pair {relationship.pair_key} already stored: {e.orig}")
                raise Conflict(
                    "A relationship between these users already exists."
                ) from e
        logger.debug(
            f"Stored relationship {relationship.id} ({requester_id} -> {recipient_id})"
        )
        return relationship

    def find_by_id(self, relationship_id: str) -> Relationship:
        with session_scope(self.engine) as session:
            relationship = session.get(Relationship, relationship_id)
        if not relationship:
            raise NotFound("Relationship not found")
        return relationship

    def find_by_pair(self, user_a: str, user_b: str) -> Relationship:
        pair_key = Relationship.make_pair_key(user_a, user_b)
        with session_scope(self.engine) as session:
            relationship = session.exec(
                select(Relationship).where(Relationship.pair_key == pair_key)
            ).first()
        if not relationship:
            raise NotFound("Relationship not found")
        return relationship

    def find_all_involving(
        self, user_id: str, status: RelationshipStatus | None = None
    ) -> list[Relationship]:
        query = select(Relationship).where(
            or_(
                Relationship.requester_id == user_id,
                Relationship.recipient_id == user_id,
            )
        )
        if status is not None:
            query = query.where(Relationship.status == status)
        with session_scope(self.engine) as session:
            return list(session.exec(query).all())

    def update_status(
        self,
        relationship_id: str,
        status: RelationshipStatus,
        *,
        blocked_by_id: str | None = None,
        mutual_block: bool = False,
    ) -> Relationship:
        with session_scope(self.engine) as session:
            result = session.execute(
                update(Relationship)
                .where(Relationship.id == relationship_id)
                .values(
                    status=status,
                    blocked_by_id=blocked_by_id,
                    mutual_block=mutual_block,
                    updated_at=utcnow(),
                )
            )
            session.commit()
            if result.rowcount == 0:
                raise NotFound("Relationship not found")
            relationship = session.get(Relationship, relationship_id)
        # Deleted by a concurrent request between the update and the read
        if not relationship:
            raise NotFound("Relationship not found")
        return relationship

    def delete(self, relationship_id: str) -> None:
        with session_scope(self.engine) as session:
            result = session.execute(
                delete(Relationship).where(Relationship.id == relationship_id)
            )
            session.commit()
        if result.rowcount == 0:
            raise NotFound("Relationship not found")
        logger.debug(f"Deleted relationship {relationship_id}")
