import logging
from typing import Any, Iterable

from sqlalchemy import func, or_
from sqlalchemy.engine import Engine
from sqlmodel import col, select

from models.auth import User
from services.db import session_scope
from services.errors import NotFound

logger = logging.getLogger("mingle.users")


class UserDirectory:
    """Read access to user profiles, plus the caller's own profile updates.

    Users are created by the login flow; the relationship core only needs to
    know whether an id exists and how to display it.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def get(self, user_id: str) -> User | None:
        with session_scope(self.engine) as session:
            return session.get(User, user_id)

    def exists(self, user_id: str) -> bool:
        return self.get(user_id) is not None

    def get_many(self, user_ids: Iterable[str]) -> dict[str, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        with session_scope(self.engine) as session:
            users = session.exec(select(User).where(col(User.id).in_(ids))).all()
        return {user.id: user for user in users}

    def search(
        self, query: str, *, exclude: Iterable[str] = (), limit: int = 20
    ) -> list[User]:
        """Case-insensitive substring match on name, email or username"""
        needle = query.lower()
        stmt = select(User).where(
            or_(
                func.lower(User.name).contains(needle, autoescape=True),
                func.lower(User.email).contains(needle, autoescape=True),
                func.lower(User.username).contains(needle, autoescape=True),
            )
        )
        excluded = set(exclude)
        if excluded:
            stmt = stmt.where(col(User.id).not_in(excluded))
        stmt = stmt.order_by(User.name, User.id).limit(limit)
        with session_scope(self.engine) as session:
            return list(session.exec(stmt).all())

    def update_profile(
        self,
        user_id: str,
        *,
        name: str | None = None,
        picture: str | None = None,
        social_medias: list[dict[str, Any]] | None = None,
    ) -> User:
        with session_scope(self.engine) as session:
            user = session.get(User, user_id)
            if not user:
                raise NotFound("User not found")
            if name is not None:
                user.name = name
            if picture is not None:
                user.picture = picture
            if social_medias is not None:
                user.social_medias = social_medias
            session.add(user)
            session.commit()
            session.refresh(user)
        logger.debug(f"Updated profile of {user_id}")
        return user
