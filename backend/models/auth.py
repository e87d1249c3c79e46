"""User profile model"""

import datetime

from sqlalchemy import func
from sqlmodel import SQLModel, Field, Column, JSON

from .common import CamelModel
from .types import UtcAwareDateTime


class User(SQLModel, CamelModel, table=True):
    __tablename__ = "users"

    id: str = Field(primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    username: str | None = Field(default=None, index=True, unique=True, nullable=True)
    picture: str | None = None
    # [{"platform": ..., "url": ...}]
    social_medias: list[dict[str, str]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    join_date: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )
    is_admin: bool = False

    updated_at: datetime.datetime | None = Field(
        default=None,
        sa_column=Column(UtcAwareDateTime(), onupdate=func.now(), nullable=True),
    )

    def __str__(self):
        return self.email
