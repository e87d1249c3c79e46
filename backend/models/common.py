"""Common database utilities and base models"""

import logging

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.engine import Engine
from sqlmodel import create_engine

logger = logging.getLogger("mingle.db")


def get_engine(database_url: str | None = None) -> Engine:
    if database_url is None:
        from settings import DATABASE_URL

        database_url = DATABASE_URL
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    logger.debug(f"Creating engine for {database_url.split('@')[-1]}")
    return create_engine(database_url, connect_args=connect_args)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def parse_bool(bool_str: str | bool):
    if isinstance(bool_str, str):
        return bool_str.lower() in ("true", "1")
    return bool(bool_str)
