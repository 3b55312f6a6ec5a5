import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kubra_market.api.router import api_router
from kubra_market.core.config import settings
from kubra_market.core.exceptions import AppError, UnexpectedError
from kubra_market.core.sessions import SessionStore
import kubra_market.db.base  # noqa: F401  (registers every model)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Kubra Market Merchant API",
    description="Merchant back-office: shop, catalog, orders, rental, maintenance, notifications and sales",
    version="1.0.0"
)

# 1. Session store: session id -> merchant id, 7 day TTL
app.state.session_store = SessionStore()

# 2. CORS; credentials on so the browser sends the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3. Error taxonomy -> status codes
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Bad input is a 400 here, not FastAPI's default 422
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation failed", "errors": jsonable_encoder(exc.errors())},
    )

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return await app_error_handler(request, UnexpectedError())

# 4. API routes
app.include_router(api_router, prefix="/api")

# 5. Health check
@app.get("/")
def root():
    return {
        "status": "online",
        "message": "Welcome to Kubra Market API",
        "version": "1.0.0"
    }
