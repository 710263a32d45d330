from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from accounts.core.config import settings
from accounts.core.db import init_db
from accounts.core.logging import configure_logging
from accounts.routers import users

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    yield


app = FastAPI(title="Accounts API", lifespan=lifespan)


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    return RedirectResponse(url="/docs")  # Redirect the homepage to the Swagger UI


@app.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}


# Register routers
app.include_router(users.router, prefix=settings.api_v1_str)
