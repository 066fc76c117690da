import logging

from fastapi import FastAPI

from timetracker.fastapi.core.init_settings import global_settings
from timetracker.fastapi.core.lifespan import lifespan
from timetracker.fastapi.core.middleware import setup_cors, setup_exception_handlers
from timetracker.fastapi.core.routers import setup_routers


def create_app() -> FastAPI:
    logging.basicConfig(
        level=global_settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title=global_settings.APP_NAME,
        version=global_settings.APP_VERSION,
        lifespan=lifespan,
    )

    setup_cors(app)
    setup_exception_handlers(app)
    setup_routers(app)

    return app


app = create_app()
