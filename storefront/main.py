# storefront/main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from storefront.api import include_routers
from storefront.data.database import init_db, make_engine, make_session_factory
from storefront.data.seed import seed
from storefront.repos.base import Storage
from storefront.repos.database import DatabaseStorage
from storefront.repos.memory import MemStorage
from storefront.repos.sessions import MemorySessionStore, RedisSessionStore
from storefront.services.credentials import DerivationError
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def build_session_store():
    if settings.SESSION_BACKEND == "redis":
        logger.info(f"Session store: redis ({settings.REDIS_URL})")
        return RedisSessionStore(settings.REDIS_URL, ttl=settings.SESSION_TTL_SECONDS)
    if settings.SESSION_BACKEND != "memory":
        raise ValueError(f"Nieznany SESSION_BACKEND: {settings.SESSION_BACKEND}")
    return MemorySessionStore(
        check_period=settings.SESSION_CHECK_PERIOD_SECONDS,
        ttl=settings.SESSION_TTL_SECONDS,
    )


def build_storage() -> Storage:
    session_store = build_session_store()

    if settings.STORAGE_BACKEND == "database":
        engine = make_engine(settings.DATABASE_URL)
        init_db(engine)
        logger.info(f"Storage: database ({engine.url.render_as_string(hide_password=True)})")
        return DatabaseStorage(make_session_factory(engine), session_store=session_store)
    if settings.STORAGE_BACKEND != "memory":
        raise ValueError(f"Nieznany STORAGE_BACKEND: {settings.STORAGE_BACKEND}")

    logger.info("Storage: in-memory")
    return MemStorage(session_store=session_store)


def create_app(storage: Storage | None = None, seed_data: bool | None = None) -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        version="1.0.0",
    )

    # jedna instancja repozytorium na proces, handlery biorą ją z app.state
    app.state.storage = storage or build_storage()

    if seed_data is None:
        seed_data = settings.SEED_SAMPLE_DATA
    if seed_data:
        seed(app.state.storage)

    @app.exception_handler(DerivationError)
    async def derivation_error_handler(request: Request, exc: DerivationError):
        logger.error(f"Key derivation failed on {request.url.path}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Wewnętrzny błąd serwera"})

    include_routers(app)

    return app


if __name__ == "__main__":
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
