import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.error import ClientError
from src.api.routes import quote_lines
from src.depends import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating database tables")
    await init_db()
    yield


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Quote Line Items", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ClientError)
    async def handle_client_error(request: Request, exc: ClientError):
        logger.info(f"{request.method} {request.url.path} rejected: {exc.error.code}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": {"code": exc.error.code, "message": exc.error.message}},
        )

    app.include_router(quote_lines.router, prefix=config.API_PREFIX)
    return app
