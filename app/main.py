import logging

from fastapi import FastAPI, HTTPException, status, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from app.core.config import settings
from app.api.cart import router as cart_router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title=f"{settings.SHOP_NAME} - Cart",
    description="Shopping cart API for the ArtisanMarket storefront",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Cart contents live in the signed session cookie
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY,
    max_age=3600 * 24 * settings.SESSION_MAX_AGE_DAYS
)

app.include_router(cart_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "shop_name": settings.SHOP_NAME}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.SHOP_NAME} cart service")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down cart service")
    from app.core.catalog_client import catalog_client
    await catalog_client.close()
