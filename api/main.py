import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import config, db, responses, schema
from core.errors import INTERNAL_ERROR, MISSING_FIELDS, NOT_FOUND, ApiError
from forms import repository as forms_repository
from forms import router as forms_router
from purchases import repository as purchases_repository
from purchases import router as purchases_router
from uploads import router as uploads_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


configure_logging()

SCHEMA_TABLES = (*forms_repository.TABLES, *purchases_repository.TABLES)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, handed to handlers through db.get_pool.
    app.state.pool = await db.create_pool()
    try:
        await schema.ensure_schema(app.state.pool, SCHEMA_TABLES)
        config.upload_dir().mkdir(parents=True, exist_ok=True)
        yield
    finally:
        await db.close_pool(app.state.pool)
        app.state.pool = None
        logger.info("db_pool_closed")


app = FastAPI(lifespan=lifespan)

# Public marketing site: any origin may post the forms.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(_: Request, exc: ApiError):
    return responses.failure(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError):
    logger.info("request_invalid errors=%s", exc.errors())
    return responses.failure(400, MISSING_FIELDS)


@app.exception_handler(Exception)
async def unexpected_error_handler(_: Request, exc: Exception):
    logger.error("unhandled_error", exc_info=exc)
    return responses.failure(500, INTERNAL_ERROR)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException):
    # Unknown path or method: a plain 404, as the site always answered.
    if exc.status_code in (404, 405):
        return responses.failure(404, NOT_FOUND)
    return responses.failure(exc.status_code, str(exc.detail))


app.include_router(forms_router.router, tags=["forms"])
app.include_router(purchases_router.router, tags=["purchases"])
app.include_router(uploads_router.router, tags=["uploads"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


# Mounted last so API routes win; serves index.html at "/".
if config.static_dir().is_dir():
    app.mount("/", StaticFiles(directory=config.static_dir(), html=True), name="site")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=config.host(), port=config.port())
