import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import uvicorn

import config
from app.core import engine as default_engine, make_sessionmaker
from app.database import init_db
from app.routes import auth, customers, dashboard, financial, products, sales, users
from app.storage.errors import ConflictError
from app.storage.memory import InMemoryRepository, MemoryStore

logger = logging.getLogger("erp")


def configure_logging(level: str = config.LOG_LEVEL):
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(storage_backend: str = None, store: MemoryStore = None, bind=None, seed: bool = None) -> FastAPI:
    """
    Build the API bound to one storage backend.

    - "memory": one InMemoryRepository over ``store`` (a fresh MemoryStore by default)
    - "database": a session per request on ``bind`` (the configured engine by default)
    """
    configure_logging()
    storage_backend = (storage_backend or config.STORAGE_BACKEND).lower()
    seed = config.SEED_DEMO_DATA if seed is None else seed
    if storage_backend not in ("memory", "database"):
        raise ValueError(f"Unknown storage backend: {storage_backend}")

    bind = bind if bind is not None else default_engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if storage_backend == "database":
            init_db(bind=bind, seed=seed)
        logger.info(f"✅ ERP API started with '{storage_backend}' storage")
        yield

    app = FastAPI(title="ERP Back Office API", lifespan=lifespan)
    app.state.storage_backend = storage_backend
    if storage_backend == "memory":
        app.state.repository = InMemoryRepository(store if store is not None else MemoryStore(), seed=seed)
    else:
        app.state.session_factory = make_sessionmaker(bind)

    # -------------------- Error Handlers --------------------
    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(f"❌ Database error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Database error"})

    # -------------------- Include Routers --------------------
    app.include_router(dashboard.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(customers.router)
    app.include_router(products.router)
    app.include_router(sales.router)
    app.include_router(sales.items_router)
    app.include_router(financial.router)

    # -------------------- Root Endpoint --------------------
    @app.get("/")
    def root():
        return {"message": "ERP Back Office API running", "storage": storage_backend}

    return app


app = create_app()

# ---- Local deployment ----
if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=config.PORT, reload=False)
