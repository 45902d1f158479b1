import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gottago import settings
from gottago.db import close, connect
from gottago.deps import get_db
from gottago.logging_setup import setup_logging
from gottago.routers import admin, auth, bathrooms, maps
from gottago.ws import router as ws_router

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="GottaGo API", version="0.1.0")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them."""
    logger.error(
        "Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "type": type(exc).__name__,
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.on_event("startup")
async def on_startup():
    await connect()


@app.on_event("shutdown")
async def on_shutdown():
    await close()


@app.get("/health", tags=["health"])
async def health(database=Depends(get_db)):
    return {
        "ok": True,
        "database": database is not None,
        "map_configured": settings.mapbox_token() is not None,
    }


app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(bathrooms.router, prefix="/bathrooms", tags=["bathrooms"])
app.include_router(maps.router, prefix="/map", tags=["map"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])
app.include_router(ws_router.router, tags=["ws"])
