import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from task_tracker.app.errors import register_error_handlers
from task_tracker.app.middleware.access_log import AccessLogMiddleware
from task_tracker.app.routes import tasks
from task_tracker.config import Settings
from task_tracker.domain.ports import TaskRepo
from task_tracker.infra.db.engine import make_database_url, make_engine, make_sessionmaker
from task_tracker.infra.db.task_repo_sql import SQLTaskRepo, create_schema
from task_tracker.observability.logging import setup_logging
from task_tracker.services.task_service import TaskService

logger = logging.getLogger("tracker.system")


def create_app(settings: Optional[Settings] = None, repo: Optional[TaskRepo] = None) -> FastAPI:
    """Build the API.

    Without ``repo`` the app owns an SQL engine built from ``settings``: the
    schema is created on startup and the pool disposed on shutdown. Passing a
    repo (e.g. InMemoryTaskRepo) skips the database entirely.
    """
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_dir)
    logger.info("system.start", extra={"category": "system", "event": "system.start"})

    app = FastAPI(title="Task Tracker")
    app.add_middleware(AccessLogMiddleware)
    register_error_handlers(app)

    engine = None
    if repo is None:
        url = make_database_url(settings)
        engine = make_engine(url, pool_size=settings.db_pool_size, pool_timeout=settings.db_pool_timeout)
        repo = SQLTaskRepo(make_sessionmaker(engine))

    app.state.settings = settings
    app.state.task_service = TaskService(repo)

    # Routers; /api keeps the original front-end's base URL working
    app.include_router(tasks.router)
    app.include_router(tasks.router, prefix="/api")

    if engine is not None:
        @app.on_event("startup")
        async def _startup():
            await create_schema(engine)
            logger.info(
                "db.ready",
                extra={"category": "system", "event": "db.ready", "backend": engine.url.get_backend_name()},
            )

        @app.on_event("shutdown")
        async def _shutdown():
            await engine.dispose()
            logger.info("db.closed", extra={"category": "system", "event": "db.closed"})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
