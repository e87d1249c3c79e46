import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

import setproctitle
from brotli_asgi import BrotliMiddleware
from fastapi import FastAPI, APIRouter
from sqlalchemy.engine import Engine
from starlette.middleware import Middleware
from starlette.middleware.sessions import SessionMiddleware

import settings
from models.common import get_engine
from routes.auth_route import get_version, router as auth_router
from routes.errors import register_error_handlers
from routes.relationship_route import router as relationship_router
from routes.user_route import router as user_router
from services.relationship_store import RelationshipStore
from services.relationships import RelationshipService
from services.users import UserDirectory
from utils import setup_logs

logger = logging.getLogger("mingle.main")
setup_logs()
setproctitle.setproctitle("Mingle API")


def update_database():  # pragma: no cover
    """Init the DB or run the Alembic migrations"""
    import alembic.config

    if not Path("alembic.ini").is_file():
        os.chdir(settings.BACKEND_DIR)

    try:
        alembic.config.main(
            argv=[
                "--raiseerr",
                "upgrade",
                "head",
            ]
        )
    except Exception as e:
        logger.exception(f"Cannot run DB migrations: {e}")


def create_app(engine: Engine | None = None) -> FastAPI:
    """Create and configure the FastAPI application

    When an engine is given the caller owns it: no migrations are run and the
    engine is not disposed on shutdown.
    """

    @asynccontextmanager
    async def app_lifespan(app: FastAPI):
        logger.debug("Starting...")
        owns_engine = engine is None
        if owns_engine:
            update_database()
        db = get_engine() if owns_engine else engine

        users = UserDirectory(db)
        app.state.users = users
        app.state.relationships = RelationshipService(
            RelationshipStore(db),
            users,
            search_limit=settings.SEARCH_RESULTS_LIMIT,
        )
        yield
        if owns_engine:
            db.dispose()
        logger.debug("Closing app")

    app = FastAPI(
        title="Mingle",
        description="Profiles and relationships for a small social network",
        version=get_version(),
        middleware=[
            Middleware(BrotliMiddleware, minimum_size=1000),
            Middleware(SessionMiddleware, secret_key=settings.SESSION_SECRET_KEY),
        ],
        swagger_ui_parameters={
            "defaultModelsExpandDepth": 0,
        },  # collapse the swagger schema
        lifespan=app_lifespan,
    )
    register_error_handlers(app)

    # Mount routers
    api_router = APIRouter()
    api_router.include_router(auth_router)
    api_router.include_router(user_router, tags=["users"])
    api_router.include_router(relationship_router, tags=["relationships"])
    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app
