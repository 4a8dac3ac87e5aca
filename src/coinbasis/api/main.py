import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import JSONResponse

from coinbasis.api.tax import router as tax_router
from coinbasis.api.transactions import router as transactions_router
from coinbasis.api.transfers import router as transfers_router
from coinbasis.config import settings
from coinbasis.container import Container
from coinbasis.exceptions import CoinbasisError

logger = logging.getLogger("coinbasis.api")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = Container()
    app.state.container = container
    yield
    await container.engine().dispose()


app = FastAPI(title="coinbasis", version=VERSION, debug=settings.debug, lifespan=lifespan)


@app.exception_handler(CoinbasisError)
async def domain_error_handler(request: Request, exc: CoinbasisError):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.include_router(transactions_router)
app.include_router(transfers_router)
app.include_router(tax_router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION}
