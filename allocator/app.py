import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from allocator.core.settings import load_settings
from allocator.core.storage import ensure_data_root
from allocator.routes import allocation, clients, managers, state


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    settings = load_settings()
    configure_logging(settings.log_level)
    ensure_data_root()

    app = FastAPI(title="Workload Allocator API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(state.router, prefix="/api")
    app.include_router(clients.router, prefix="/api")
    app.include_router(managers.router, prefix="/api")
    app.include_router(allocation.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Workload Allocator API",
                "docs": "/docs",
                "health": "/api/state",
            }
        )

    return app


app = create_app()
