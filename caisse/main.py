# caisse/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

# Load .env before config reads the environment
load_dotenv()

from .command_router import invoke
from .config import Settings
from .store import Store

STATUS_BY_KIND = {
    "not_found": 404,
    "conflict": 409,
    "validation_failure": 422,
}


def create_app(settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    """
    Local HTTP host for the command surface.
    If `store` is given it is used as-is (and left open on shutdown).
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = store is None
        if owned:
            app.state.store = await run_in_threadpool(
                Store.open, settings.db_path, seed_locale=settings.seed_locale
            )
        else:
            app.state.store = store
        try:
            yield
        finally:
            if owned:
                await run_in_threadpool(app.state.store.close)

    app = FastAPI(
        title="Caisse POS",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    def get_store(request: Request) -> Store:
        return request.app.state.store

    # -------------------
    # Health
    # -------------------
    @app.get("/")
    def root():
        return {"ok": True, "service": "caisse"}

    # -------------------
    # Commands
    # -------------------
    @app.post("/api/{command}")
    def call_command(
        command: str,
        params: Optional[Dict[str, Any]] = Body(default=None),
        store: Store = Depends(get_store),
    ):
        res = invoke(store, command, params)
        if not res["ok"]:
            raise HTTPException(status_code=STATUS_BY_KIND.get(res["kind"], 500), detail=res["error"])
        return res["data"]

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)
